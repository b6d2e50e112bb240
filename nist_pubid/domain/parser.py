"""
PubID parser.

This module reads a PubID in any of the four styles into an Identifier.
The head (publisher, series, stage) is matched against the series
registry. The tail is a document number followed by qualifier suffixes,
recognized by a per-style rule table evaluated in a fixed priority order.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from opentelemetry import trace

from nist_pubid.domain.errors import (
    InvalidModelError,
    MalformedDocNumberError,
    ParseError,
    UnknownSeriesError,
)
from nist_pubid.domain.identifier import Identifier
from nist_pubid.domain.models import (
    DOCNUMBER_PATTERN,
    UPDATE_DATE_PATTERN,
    Publisher,
    Stage,
    Style,
    Update,
)
from nist_pubid.domain.series import SeriesRegistry, get_default_registry

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

_DOCNUMBER_RE = re.compile(DOCNUMBER_PATTERN)
_PUBLISHER_RE = re.compile(r"(?P<publisher>NIST|NBS)[\s.]+", re.IGNORECASE)
_ADDENDUM_PREFIX_RE = re.compile(r"(?P<marker>Addendum|Add\.)(?:\s+(?P<value>\d+))?\s+to\s+")
_WHITESPACE_RE = re.compile(r"\s")

_STAGE_CODES = "|".join(re.escape(stage.code) for stage in Stage)
_STAGE_TITLES = "|".join(re.escape(stage.title) for stage in Stage)
_HUMAN_STAGE_RE = re.compile(rf"\s+(?P<stage>{_STAGE_TITLES})(?=\s)", re.IGNORECASE)
_STAGE_RES = {
    Style.SHORT: re.compile(rf"\((?P<stage>{_STAGE_CODES})\)", re.IGNORECASE),
    Style.MR: re.compile(rf"\.(?P<stage>{_STAGE_CODES})(?=\.)", re.IGNORECASE),
    Style.LONG: _HUMAN_STAGE_RE,
    Style.ABBREV: _HUMAN_STAGE_RE,
}

# Separator between the series (or stage) and the document number; optional
# because legacy spellings run the number into the code ("CRPL-F-B150").
_SEPARATOR_RES = {
    Style.SHORT: re.compile(r"\s+"),
    Style.MR: re.compile(r"\."),
    Style.LONG: re.compile(r"\s+"),
    Style.ABBREV: re.compile(r"\s+"),
}


class QualifierRule:
    """A suffix grammar rule: the qualifier it yields and the pattern recognizing it."""

    def __init__(self, qualifier: str, pattern: str):
        self.qualifier = qualifier
        self.regex = re.compile(pattern)

    def match(self, text: str, pos: int) -> Optional["re.Match[str]"]:
        return self.regex.match(text, pos)

    def value(self, match: "re.Match[str]") -> Any:
        """Convert the matched groups to the qualifier value."""
        groups = match.groupdict()
        if self.qualifier == "update":
            return Update(int(groups["number"]), groups.get("date"))
        if self.qualifier == "addendum":
            return int(groups["value"]) if groups.get("value") else 1
        if self.qualifier == "translation":
            return groups["value"].lower()
        if self.qualifier == "part":
            return groups["value"]
        return int(groups["value"])

    def __repr__(self) -> str:
        return f"QualifierRule({self.qualifier}, {self.regex.pattern!r})"


_TRANSLATION = r"\((?P<value>[A-Za-z]{2,4})\)"
_PART = r"(?P<value>[A-Z\d]+)"
_NUMBER = r"(?P<value>\d+)"


def _update(separator: str) -> str:
    return rf"(?P<number>\d+)(?:{separator}(?P<date>{UPDATE_DATE_PATTERN}))?"


# Priority order matters where markers share a prefix: "ver" before "v",
# "rev" before "r" (inside the revision pattern).
QUALIFIER_RULES: Dict[Style, List[QualifierRule]] = {
    Style.SHORT: [
        QualifierRule("translation", _TRANSLATION),
        QualifierRule("update", r"/Upd\s?" + _update(":")),
        QualifierRule("addendum", r"\s+Addendum(?:\s+(?P<value>\d+))?(?!\w)"),
        QualifierRule("part", r"(?:pt|\s*Pt\.\s*)" + _PART),
        QualifierRule("version", r"(?:ver|\s*Ver\.\s*)" + _NUMBER),
        QualifierRule("volume", r"(?:v|,?\s*Vol\.\s*)" + _NUMBER),
        QualifierRule("revision", r"(?:rev|r|,?\s*Rev\.\s*)" + _NUMBER),
        QualifierRule("edition", r"(?:e|\s*Ed\.\s*)" + _NUMBER),
    ],
    Style.MR: [
        QualifierRule("translation", _TRANSLATION),
        QualifierRule("update", r"\.u" + _update("-")),
        QualifierRule("addendum", r"\.add(?:-(?P<value>\d+))?"),
        QualifierRule("part", r"pt" + _PART),
        QualifierRule("version", r"ver" + _NUMBER),
        QualifierRule("volume", r"v" + _NUMBER),
        QualifierRule("revision", r"r" + _NUMBER),
        QualifierRule("edition", r"e" + _NUMBER),
    ],
    Style.LONG: [
        QualifierRule("translation", r"\s+" + _TRANSLATION),
        QualifierRule("update", r"\s+Update\s+" + _update(":")),
        QualifierRule("part", r"\s+Part\s+" + _PART),
        QualifierRule("version", r"\s+Version\s+" + _NUMBER),
        QualifierRule("volume", r",\s*Volume\s+" + _NUMBER),
        QualifierRule("revision", r",\s*Revision\s+" + _NUMBER),
        QualifierRule("edition", r"\s+Edition\s+" + _NUMBER),
    ],
    Style.ABBREV: [
        QualifierRule("translation", r"\s+" + _TRANSLATION),
        QualifierRule("update", r"\s+Upd\.\s*" + _update(":")),
        QualifierRule("part", r"\s+Pt\.\s*" + _PART),
        QualifierRule("version", r"\s+Ver\.\s*" + _NUMBER),
        QualifierRule("volume", r",\s*Vol\.\s*" + _NUMBER),
        QualifierRule("revision", r",\s*Rev\.\s*" + _NUMBER),
        QualifierRule("edition", r"\s+Ed\.\s*" + _NUMBER),
    ],
}


class PubIDParser:
    """Parse PubID strings into Identifier objects."""

    def __init__(self, registry: Optional[SeriesRegistry] = None):
        self.registry = registry or get_default_registry()

    def detect_style(self, text: str) -> Style:
        """
        Guess the style of a PubID string.

        Long and Abbrev forms start with an organization or series title
        (optionally behind an addendum prefix); MR forms contain no
        whitespace; anything else is read as the Short form.
        """
        prefix = _ADDENDUM_PREFIX_RE.match(text)
        title = self.registry.match_title(text, prefix.end() if prefix else 0)
        if title is not None:
            return title[2]
        if prefix is not None:
            return Style.ABBREV if prefix.group("marker") == "Add." else Style.LONG
        if not _WHITESPACE_RE.search(text):
            return Style.MR
        return Style.SHORT

    def parse(self, text: str, style: Optional[Union[Style, str]] = None) -> Identifier:
        """
        Parse a PubID string.

        Args:
            text: The PubID text
            style: Input style; detected from the text when omitted

        Returns:
            The parsed Identifier

        Raises:
            UnknownSeriesError: If the series token cannot be resolved
            MalformedDocNumberError: If the remainder does not match the
                docnumber and qualifier grammar, or violates a model invariant
        """
        with tracer.start_as_current_span("pubid.parse") as span:
            span.set_attribute("pubid.input", text)
            try:
                identifier = self._parse(text.strip(), style)
            except InvalidModelError as e:
                error = MalformedDocNumberError(str(e), text)
                self._record_failure(span, text, error)
                raise error from e
            except ParseError as e:
                self._record_failure(span, text, e)
                raise

            span.set_attribute("pubid.series", identifier.series.code)
            return identifier

    def _record_failure(self, span: Any, text: str, error: ParseError) -> None:
        span.set_attribute("error", True)
        span.set_attribute("error.type", error.kind)
        logger.debug("Failed to parse %r: %s", text, error)

    def _parse(self, text: str, style: Optional[Union[Style, str]]) -> Identifier:
        if not text:
            raise UnknownSeriesError("empty PubID", text)

        resolved_style = Style.coerce(style) if style else self.detect_style(text)
        trace.get_current_span().set_attribute("pubid.style", resolved_style.value)
        logger.debug("Parsing %r as %s", text, resolved_style.value)

        if resolved_style in (Style.LONG, Style.ABBREV):
            fields, pos = self._read_title_head(text, resolved_style)
        else:
            fields, pos = self._read_code_head(text, resolved_style)
        logger.debug(
            "Resolved publisher=%s series=%s",
            fields["publisher"].value,
            fields["series"].code,
        )

        fields.update(self._read_tail(text, pos, resolved_style))
        series = fields["series"]
        if not series.accepts_docnumber(fields["docnumber"]):
            raise MalformedDocNumberError(
                f"document number {fields['docnumber']!r} is not valid for series {series.code}",
                text,
            )
        return Identifier(registry=self.registry, **fields)

    def _read_code_head(self, text: str, style: Style) -> Tuple[Dict[str, Any], int]:
        """Read publisher, series and stage of a Short or MR PubID."""
        fields: Dict[str, Any] = {}
        fused = self.registry.match_fused(text)
        if fused is not None:
            fields["publisher"], fields["series"], pos = fused
        else:
            publisher_match = _PUBLISHER_RE.match(text)
            if publisher_match:
                publisher = Publisher.coerce(publisher_match.group("publisher"))
                pos = publisher_match.end()
            else:
                logger.debug("No publisher in %r, assuming NIST", text)
                publisher = Publisher.NIST
                pos = 0

            series = self.registry.match_series(publisher, text, pos)
            if series is None:
                raise UnknownSeriesError(
                    f"unknown series for {publisher.value} in {text!r}", text
                )
            fields["publisher"] = publisher
            fields["series"], pos = series

        return fields, self._read_stage(text, pos, style, fields)

    def _read_title_head(self, text: str, style: Style) -> Tuple[Dict[str, Any], int]:
        """Read addendum prefix, organization and series titles and stage of a Long or Abbrev PubID."""
        fields: Dict[str, Any] = {}
        pos = 0
        prefix = _ADDENDUM_PREFIX_RE.match(text)
        if prefix:
            fields["addendum"] = int(prefix.group("value") or 1)
            pos = prefix.end()

        title = self.registry.match_title(text, pos)
        if title is None:
            raise UnknownSeriesError(f"unknown series title in {text!r}", text)
        fields["publisher"], fields["series"], _, pos = title

        return fields, self._read_stage(text, pos, style, fields)

    @staticmethod
    def _read_stage(text: str, pos: int, style: Style, fields: Dict[str, Any]) -> int:
        stage = _STAGE_RES[style].match(text, pos)
        if stage is None:
            return pos
        fields["stage"] = Stage.coerce(stage.group("stage"))
        logger.debug("Recognized stage %s", fields["stage"].code)
        return stage.end()

    def _read_tail(self, text: str, pos: int, style: Style) -> Dict[str, Any]:
        """Read the document number and the qualifier suffixes after it."""
        separator = _SEPARATOR_RES[style].match(text, pos)
        if separator:
            pos = separator.end()

        docnumber = _DOCNUMBER_RE.match(text, pos)
        if docnumber is None:
            raise MalformedDocNumberError(
                f"no document number at {text[pos:]!r} in {text!r}", text
            )
        fields: Dict[str, Any] = {"docnumber": docnumber.group(0)}
        pos = docnumber.end()

        rules = QUALIFIER_RULES[style]
        while pos < len(text):
            found = self._match_rule(rules, text, pos)
            if found is None:
                raise MalformedDocNumberError(
                    f"unrecognized suffix {text[pos:]!r} in {text!r}", text
                )
            rule, match = found
            if rule.qualifier in fields:
                raise MalformedDocNumberError(
                    f"{rule.qualifier} given more than once in {text!r}", text
                )
            fields[rule.qualifier] = rule.value(match)
            logger.debug("Recognized %s=%r", rule.qualifier, fields[rule.qualifier])
            pos = match.end()

        return fields

    @staticmethod
    def _match_rule(
        rules: List[QualifierRule], text: str, pos: int
    ) -> Optional[Tuple[QualifierRule, "re.Match[str]"]]:
        for rule in rules:
            match = rule.match(text, pos)
            if match:
                return rule, match
        return None


def parse(text: str, style: Optional[Union[Style, str]] = None) -> Identifier:
    """Parse a PubID with the default registry."""
    return PubIDParser().parse(text, style)
