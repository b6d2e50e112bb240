import pytest
from pathlib import Path
from typing import Any, Dict

from nist_pubid.domain.parser import PubIDParser
from nist_pubid.domain.series import SeriesRegistry, get_default_registry


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir(project_root: Path) -> Path:
    """Return the fixtures directory path."""
    return project_root / "tests" / "fixtures"


@pytest.fixture
def registry() -> SeriesRegistry:
    """The bundled series registry."""
    return get_default_registry()


@pytest.fixture
def parser(registry: SeriesRegistry) -> PubIDParser:
    return PubIDParser(registry)


@pytest.fixture
def small_registry_data() -> Dict[str, Any]:
    """A minimal registry data document for tests that build their own registry."""
    return {
        "publishers": {
            "NIST": {
                "long": "National Institute of Standards and Technology",
                "abbrev": "Natl. Inst. Stand. Technol.",
            },
            "NBS": {"long": "National Bureau of Standards", "abbrev": "Natl. Bur. Stand."},
        },
        "series": [
            {
                "code": "SP",
                "publishers": ["NBS", "NIST"],
                "long": "Special Publication",
                "abbrev": "Spec. Publ.",
            },
            {
                "code": "IR",
                "publishers": ["NBS", "NIST"],
                "long": "Interagency or Internal Report",
            },
        ],
        "fused_aliases": {"NISTIR": ["NIST", "IR"]},
    }
