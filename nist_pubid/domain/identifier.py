"""
The Identifier entity.

This module contains the in-memory model of one PubID: publisher, series,
document number, draft stage and the qualifier set.
"""

import re
from typing import Any, Dict, Optional, Union

from nist_pubid.domain.errors import InvalidModelError, SeriesNotFoundError
from nist_pubid.domain.models import DOCNUMBER_PATTERN, Publisher, Qualifiers, Stage, Style
from nist_pubid.domain.renderer import PubIDRenderer
from nist_pubid.domain.series import SeriesEntry, SeriesRegistry, get_default_registry

_DOCNUMBER_RE = re.compile(DOCNUMBER_PATTERN)


def _qualifier(name: str) -> property:
    def getter(self: "Identifier") -> Any:
        return self._qualifiers.get(name)

    def setter(self: "Identifier", value: Any) -> None:
        self._qualifiers.replace(name, value)

    return property(getter, setter, doc=f"The {name} qualifier, or None.")


class Identifier:
    """
    Domain model representing a publication identifier.

    Publisher, series and document number are fixed at construction.
    Qualifiers are reassigned through their properties; assigning revision
    clears edition (and the reverse), assigning addendum clears update
    (and the reverse).
    """

    part = _qualifier("part")
    volume = _qualifier("volume")
    version = _qualifier("version")
    revision = _qualifier("revision")
    edition = _qualifier("edition")
    update = _qualifier("update")
    addendum = _qualifier("addendum")
    translation = _qualifier("translation")

    def __init__(
        self,
        publisher: Union[Publisher, str],
        series: Union[SeriesEntry, str],
        docnumber: str,
        stage: Optional[Union[Stage, str]] = None,
        part: Optional[Union[str, int]] = None,
        volume: Optional[int] = None,
        version: Optional[int] = None,
        revision: Optional[int] = None,
        edition: Optional[int] = None,
        update: Optional[Any] = None,
        addendum: Optional[Union[bool, int]] = None,
        translation: Optional[str] = None,
        registry: Optional[SeriesRegistry] = None,
    ):
        self._registry = registry or get_default_registry()
        self._publisher = Publisher.coerce(publisher)
        self._series = self._resolve_series(series)
        self._docnumber = self._validate_docnumber(docnumber)
        self._stage = Stage.coerce(stage) if stage is not None else None
        self._qualifiers = Qualifiers(
            part=part,
            volume=volume,
            version=version,
            revision=revision,
            edition=edition,
            update=update,
            addendum=addendum,
            translation=translation,
        )

    def _resolve_series(self, series: Union[SeriesEntry, str]) -> SeriesEntry:
        if isinstance(series, SeriesEntry):
            if self._publisher not in series.publishers:
                raise InvalidModelError(
                    f"series {series.code} is not published by {self._publisher.value}"
                )
            return series
        try:
            return self._registry.resolve(self._publisher, str(series))
        except SeriesNotFoundError as e:
            raise InvalidModelError(str(e)) from e

    def _validate_docnumber(self, docnumber: str) -> str:
        if not isinstance(docnumber, str) or not _DOCNUMBER_RE.fullmatch(docnumber):
            raise InvalidModelError(f"invalid document number: {docnumber!r}")
        if not self._series.accepts_docnumber(docnumber):
            raise InvalidModelError(
                f"document number {docnumber!r} is not valid for series {self._series.code}"
            )
        return docnumber

    @classmethod
    def parse(
        cls,
        text: str,
        style: Optional[Union[Style, str]] = None,
        registry: Optional[SeriesRegistry] = None,
    ) -> "Identifier":
        """
        Parse a PubID in any of the four styles.

        Args:
            text: The PubID text
            style: Input style; detected from the text when omitted
            registry: Series registry (defaults to the bundled one)

        Returns:
            The parsed Identifier

        Raises:
            UnknownSeriesError: If the series cannot be resolved
            MalformedDocNumberError: If the document number or a qualifier is malformed
        """
        from nist_pubid.domain.parser import PubIDParser

        return PubIDParser(registry).parse(text, style)

    @property
    def publisher(self) -> Publisher:
        return self._publisher

    @property
    def series(self) -> SeriesEntry:
        return self._series

    @property
    def docnumber(self) -> str:
        return self._docnumber

    @property
    def qualifiers(self) -> Qualifiers:
        return self._qualifiers

    @property
    def stage(self) -> Optional[Stage]:
        return self._stage

    @stage.setter
    def stage(self, value: Optional[Union[Stage, str]]) -> None:
        self._stage = Stage.coerce(value) if value is not None else None

    def to_text(self, style: Union[Style, str] = Style.SHORT) -> str:
        """Render in the given style (``long``, ``abbrev``, ``short`` or ``mr``)."""
        return PubIDRenderer(self._registry).render(self, style)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "publisher": self._publisher.value,
            "series": self._series.code,
            "docnumber": self._docnumber,
            "stage": self._stage.code if self._stage else None,
            **self._qualifiers.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], registry: Optional[SeriesRegistry] = None) -> "Identifier":
        """Create from dictionary."""
        qualifiers = {name: data.get(name) for name in Qualifiers.FIELDS}
        return cls(
            publisher=data["publisher"],
            series=data["series"],
            docnumber=data["docnumber"],
            stage=data.get("stage"),
            registry=registry,
            **qualifiers,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return self.to_text(Style.SHORT)

    def __repr__(self) -> str:
        return f"Identifier({self.to_text(Style.MR)})"
