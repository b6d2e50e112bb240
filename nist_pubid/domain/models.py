"""
Domain models for publication identifiers.

This module contains the value types shared by the parser, the renderer
and the Identifier entity: publishers, output styles, draft stages, dated
updates and the qualifier set.
"""

import re
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from nist_pubid.domain.errors import InvalidModelError


class Publisher(Enum):
    """Organizations issuing PubIDs."""

    NIST = "NIST"
    NBS = "NBS"

    @classmethod
    def coerce(cls, value: Union["Publisher", str]) -> "Publisher":
        """Return the Publisher for an enum member or its (case-insensitive) code."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidModelError(f"unknown publisher: {value!r}") from None


class Style(Enum):
    """Textual representations of a PubID."""

    LONG = "long"
    ABBREV = "abbrev"
    SHORT = "short"
    MR = "mr"

    @classmethod
    def coerce(cls, value: Union["Style", str]) -> "Style":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lstrip(":").lower())
        except ValueError:
            raise ValueError(f"unknown output style: {value!r}") from None


class Stage(Enum):
    """Draft stages, identified by their code."""

    INITIAL_PUBLIC_DRAFT = "IPD"
    SECOND_PUBLIC_DRAFT = "2PD"
    THIRD_PUBLIC_DRAFT = "3PD"
    FINAL_PUBLIC_DRAFT = "FPD"
    PRELIMINARY_DRAFT = "PRD"
    WORK_IN_PROGRESS_DRAFT = "WD"

    @property
    def code(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return _STAGE_TITLES[self]

    @classmethod
    def coerce(cls, value: Union["Stage", str]) -> "Stage":
        """Return the Stage for a member, a code (``"ipd"``) or a title."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for stage in cls:
            if text.upper() == stage.code or text.lower() == stage.title.lower():
                return stage
        raise InvalidModelError(f"unknown stage: {value!r}")


_STAGE_TITLES = {
    Stage.INITIAL_PUBLIC_DRAFT: "Initial Public Draft",
    Stage.SECOND_PUBLIC_DRAFT: "Second Public Draft",
    Stage.THIRD_PUBLIC_DRAFT: "Third Public Draft",
    Stage.FINAL_PUBLIC_DRAFT: "Final Public Draft",
    Stage.PRELIMINARY_DRAFT: "Preliminary Draft",
    Stage.WORK_IN_PROGRESS_DRAFT: "Work-in-Progress Draft",
}

# Lowercase letters never belong to a document number: they mark qualifiers
DOCNUMBER_PATTERN = r"\d[\dA-Z]*(?:-[\dA-Z]+)*"
UPDATE_DATE_PATTERN = r"\d{4}(?:-\d{2}){0,2}"
_UPDATE_DATE_RE = re.compile(UPDATE_DATE_PATTERN)
_PART_RE = re.compile(r"[A-Z\d]+")
_TRANSLATION_RE = re.compile(r"[A-Za-z]{2,4}")


class Update:
    """A dated post-publication update (sequence number and optional date)."""

    def __init__(self, number: int, date: Optional[str] = None):
        self.number = _to_count("update", number, minimum=1)
        if date is not None:
            date = str(date)
            if not _UPDATE_DATE_RE.fullmatch(date):
                raise InvalidModelError(f"invalid update date: {date!r}")
        self.date = date

    @classmethod
    def coerce(cls, value: Any) -> "Update":
        """Build an Update from an Update, a number or a (number, date) pair."""
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            return cls(value.get("number"), value.get("date"))  # type: ignore[arg-type]
        if isinstance(value, (tuple, list)):
            if len(value) != 2:
                raise InvalidModelError(f"invalid update: {value!r}")
            return cls(value[0], value[1])
        return cls(value)

    def to_dict(self) -> Dict[str, Any]:
        return {"number": self.number, "date": self.date}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Update):
            return NotImplemented
        return (self.number, self.date) == (other.number, other.date)

    def __hash__(self) -> int:
        return hash((self.number, self.date))

    def __repr__(self) -> str:
        return f"Update(number={self.number}, date={self.date})"


def _to_count(name: str, value: Any, minimum: int = 0) -> int:
    """Coerce an int or a digit string to an int no lower than ``minimum``."""
    if isinstance(value, bool):
        raise InvalidModelError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise InvalidModelError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidModelError(f"{name} must be >= {minimum}, got {value}")
    return value


def _to_part(value: Any) -> str:
    text = str(value).strip()
    if not _PART_RE.fullmatch(text):
        raise InvalidModelError(f"invalid part label: {value!r}")
    return text


def _to_addendum(value: Any) -> Optional[int]:
    if value is True:
        return 1
    if value is False:
        return None
    return _to_count("addendum", value, minimum=1)


def _to_translation(value: Any) -> str:
    text = str(value).strip()
    if not _TRANSLATION_RE.fullmatch(text):
        raise InvalidModelError(f"invalid translation code: {value!r}")
    return text.lower()


_COERCERS = {
    "part": _to_part,
    "volume": lambda value: _to_count("volume", value),
    "version": lambda value: _to_count("version", value),
    "revision": lambda value: _to_count("revision", value),
    "edition": lambda value: _to_count("edition", value),
    "addendum": _to_addendum,
    "update": Update.coerce,
    "translation": _to_translation,
}


class Qualifiers:
    """
    The optional qualifier set of an Identifier.

    Revision and edition are mutually exclusive, as are addendum and
    update. The constructor rejects conflicting values; ``replace`` is
    last-write-wins and clears the conflicting field.
    """

    # Canonical rendering order
    FIELDS: Tuple[str, ...] = (
        "part",
        "volume",
        "version",
        "revision",
        "edition",
        "update",
        "addendum",
        "translation",
    )

    EXCLUSIVE = {
        "revision": "edition",
        "edition": "revision",
        "addendum": "update",
        "update": "addendum",
    }

    def __init__(
        self,
        part: Optional[Union[str, int]] = None,
        volume: Optional[int] = None,
        version: Optional[int] = None,
        revision: Optional[int] = None,
        edition: Optional[int] = None,
        update: Optional[Any] = None,
        addendum: Optional[Union[bool, int]] = None,
        translation: Optional[str] = None,
    ):
        values = {
            "part": part,
            "volume": volume,
            "version": version,
            "revision": revision,
            "edition": edition,
            "update": update,
            "addendum": addendum,
            "translation": translation,
        }
        self._values: Dict[str, Any] = {}
        for name in self.FIELDS:
            self._values[name] = self._coerce(name, values[name])

        for name, other in (("revision", "edition"), ("addendum", "update")):
            if self._values[name] is not None and self._values[other] is not None:
                raise InvalidModelError(f"{name} and {other} are mutually exclusive")

    @staticmethod
    def _coerce(name: str, value: Any) -> Any:
        if value is None:
            return None
        return _COERCERS[name](value)

    def get(self, name: str) -> Any:
        return self._values[name]

    def replace(self, name: str, value: Any) -> None:
        """Set one qualifier, clearing its mutually exclusive counterpart."""
        if name not in self._values:
            raise KeyError(name)
        coerced = self._coerce(name, value)
        self._values[name] = coerced
        other = self.EXCLUSIVE.get(name)
        if other and coerced is not None:
            self._values[other] = None

    def items(self):  # type: ignore[no-untyped-def]
        """Iterate ``(name, value)`` over present qualifiers in canonical order."""
        return ((name, self._values[name]) for name in self.FIELDS if self._values[name] is not None)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self._values)
        if result["update"] is not None:
            result["update"] = result["update"].to_dict()
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Qualifiers):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        present = ", ".join(f"{name}={value!r}" for name, value in self.items())
        return f"Qualifiers({present})"
