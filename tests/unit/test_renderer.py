import pytest

from nist_pubid.domain.identifier import Identifier
from nist_pubid.domain.models import Qualifiers, Style, Update
from nist_pubid.domain.renderer import (
    SUFFIX_FORMATS,
    PubIDRenderer,
    render_addendum_prefix,
    render_qualifiers,
)
from nist_pubid.domain.series import SeriesRegistry


class TestQualifierProjections:
    """Test the per-style qualifier suffixes."""

    @pytest.mark.unit
    def test_every_style_has_formats(self) -> None:
        assert set(SUFFIX_FORMATS) == set(Style)

    @pytest.mark.unit
    def test_suffixes_per_style(self) -> None:
        qualifiers = Qualifiers(part="1", revision=4)
        assert render_qualifiers(qualifiers, Style.LONG) == " Part 1, Revision 4"
        assert render_qualifiers(qualifiers, Style.ABBREV) == " Pt. 1, Rev. 4"
        assert render_qualifiers(qualifiers, Style.SHORT) == "pt1r4"
        assert render_qualifiers(qualifiers, Style.MR) == "pt1r4"

    @pytest.mark.unit
    def test_update_suffixes(self) -> None:
        qualifiers = Qualifiers(update=Update(3, "2015-06"))
        assert render_qualifiers(qualifiers, Style.LONG) == " Update 3:2015-06"
        assert render_qualifiers(qualifiers, Style.ABBREV) == " Upd. 3:2015-06"
        assert render_qualifiers(qualifiers, Style.SHORT) == "/Upd 3:2015-06"
        assert render_qualifiers(qualifiers, Style.MR) == ".u3-2015-06"

    @pytest.mark.unit
    def test_update_without_date(self) -> None:
        assert render_qualifiers(Qualifiers(update=2), Style.MR) == ".u2"

    @pytest.mark.unit
    def test_translation_case(self) -> None:
        qualifiers = Qualifiers(translation="por")
        assert render_qualifiers(qualifiers, Style.LONG) == " (POR)"
        assert render_qualifiers(qualifiers, Style.SHORT) == "(por)"

    @pytest.mark.unit
    def test_addendum_is_a_prefix_in_human_styles(self) -> None:
        qualifiers = Qualifiers(addendum=2)
        assert render_qualifiers(qualifiers, Style.LONG) == ""
        assert render_qualifiers(qualifiers, Style.SHORT) == " Addendum 2"
        assert render_qualifiers(qualifiers, Style.MR) == ".add-2"
        assert render_addendum_prefix(1, Style.LONG) == "Addendum to "
        assert render_addendum_prefix(2, Style.ABBREV) == "Add. 2 to "

    @pytest.mark.unit
    def test_version(self) -> None:
        qualifiers = Qualifiers(version=2)
        assert render_qualifiers(qualifiers, Style.LONG) == " Version 2"
        assert render_qualifiers(qualifiers, Style.ABBREV) == " Ver. 2"
        assert render_qualifiers(qualifiers, Style.MR) == "ver2"


class TestPubIDRenderer:
    """Test whole-identifier rendering."""

    @pytest.mark.unit
    def test_render_accepts_style_names(self, registry: SeriesRegistry) -> None:
        pubid = Identifier("NIST", "SP", "800-53", revision=5, registry=registry)
        renderer = PubIDRenderer(registry)
        assert renderer.render(pubid, "mr") == "NIST.SP.800-53r5"
        assert renderer.render(pubid, Style.SHORT) == "NIST SP 800-53r5"

    @pytest.mark.unit
    def test_every_qualifier_in_canonical_order(self, registry: SeriesRegistry) -> None:
        pubid = Identifier(
            "NIST",
            "SP",
            "800-53",
            stage="FPD",
            part="2",
            volume=1,
            version=3,
            revision=4,
            update=(1, "2020"),
            translation="esp",
            registry=registry,
        )
        assert pubid.to_text(Style.SHORT) == "NIST SP(FPD) 800-53pt2v1ver3r4/Upd 1:2020(esp)"
        assert pubid.to_text(Style.MR) == "NIST.SP.FPD.800-53pt2v1ver3r4.u1-2020(esp)"
        assert pubid.to_text(Style.LONG) == (
            "National Institute of Standards and Technology Special Publication Final Public Draft "
            "800-53 Part 2, Volume 1 Version 3, Revision 4 Update 1:2020 (ESP)"
        )
        assert pubid.to_text(Style.ABBREV) == (
            "Natl. Inst. Stand. Technol. Spec. Publ. Final Public Draft "
            "800-53 Pt. 2, Vol. 1 Ver. 3, Rev. 4 Upd. 1:2020 (ESP)"
        )

    @pytest.mark.unit
    def test_addendum_with_translation(self, registry: SeriesRegistry) -> None:
        pubid = Identifier("NIST", "SP", "800-38A", addendum=1, translation="esp", registry=registry)
        assert pubid.to_text(Style.SHORT) == "NIST SP 800-38A Addendum(esp)"
        assert pubid.to_text(Style.MR) == "NIST.SP.800-38A.add-1(esp)"
        assert pubid.to_text(Style.LONG) == (
            "Addendum to National Institute of Standards and Technology Special Publication 800-38A (ESP)"
        )

    @pytest.mark.unit
    def test_embedded_publisher_skips_organization(self, registry: SeriesRegistry) -> None:
        pubid = Identifier("NIST", "JRES", "95", registry=registry)
        assert pubid.to_text(Style.LONG) == (
            "Journal of Research of the National Institute of Standards and Technology 95"
        )
        assert pubid.to_text(Style.ABBREV) == "J. Res. Natl. Inst. Stand. Technol. 95"
        assert pubid.to_text(Style.SHORT) == "NIST JRES 95"
