from typing import Any, Dict

import pytest

from nist_pubid.domain.identifier import Identifier
from nist_pubid.domain.models import Style
from nist_pubid.domain.parser import PubIDParser
from tests.helpers.fixtures import STYLES, case_ids, conversion_cases

CASES = conversion_cases()


@pytest.mark.integration
@pytest.mark.parametrize("case", CASES, ids=case_ids(CASES))
def test_renders_every_style(case: Dict[str, Any], parser: PubIDParser) -> None:
    pubid = parser.parse(case["input"])
    for style in STYLES:
        assert pubid.to_text(style) == case[style], style


@pytest.mark.integration
@pytest.mark.parametrize("case", CASES, ids=case_ids(CASES))
def test_parse_of_render_is_identity(case: Dict[str, Any], parser: PubIDParser) -> None:
    pubid = parser.parse(case["input"])
    for style in Style:
        reparsed = parser.parse(pubid.to_text(style))
        assert reparsed == pubid, style
        assert reparsed.to_text(style) == pubid.to_text(style)


@pytest.mark.integration
@pytest.mark.parametrize("case", CASES, ids=case_ids(CASES))
def test_short_form_is_a_fixed_point(case: Dict[str, Any], parser: PubIDParser) -> None:
    short = parser.parse(case["input"]).to_text(Style.SHORT)
    assert parser.parse(short).to_text(Style.SHORT) == short


@pytest.mark.integration
@pytest.mark.parametrize("style", list(Style))
def test_qualifier_change_only_touches_its_projection(style: Style, parser: PubIDParser) -> None:
    pubid = parser.parse("NIST SP 800-60v1r1")
    pubid.revision = 2

    reparsed: Identifier = parser.parse(pubid.to_text(style))
    assert reparsed.revision == 2
    assert reparsed.volume == 1
    assert reparsed.docnumber == "800-60"
    assert reparsed.series.code == "SP"
