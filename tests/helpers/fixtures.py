import json
import logging
from pathlib import Path
from typing import Any, Dict, List, cast

logger = logging.getLogger(__name__)

STYLES = ("long", "abbrev", "short", "mr")


def load_expected_json(fixture_name: str, fixtures_dir: Path) -> List[Dict[str, Any]]:
    """
    Load expected conversions from the fixtures directory.

    Args:
        fixture_name: Name of the JSON fixture file
        fixtures_dir: Path to the fixtures directory

    Returns:
        List of cases, each with an input and the expected text per style

    Raises:
        FileNotFoundError: If the fixture doesn't exist
        json.JSONDecodeError: If JSON is invalid
    """
    expected_path = fixtures_dir / "expected" / fixture_name
    if not expected_path.exists():
        raise FileNotFoundError(f"Expected output not found: {expected_path}")

    logger.debug(f"Loading JSON from {expected_path}")
    return cast(List[Dict[str, Any]], json.loads(expected_path.read_text(encoding="utf-8")))


def conversion_cases() -> List[Dict[str, Any]]:
    """Load the shared conversion table, for use in ``pytest.mark.parametrize``."""
    fixtures_dir = Path(__file__).parent.parent / "fixtures"
    return load_expected_json("pubids.json", fixtures_dir)


def case_ids(cases: List[Dict[str, Any]]) -> List[str]:
    return [case["name"] for case in cases]
