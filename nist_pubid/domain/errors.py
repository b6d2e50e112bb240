"""
Domain errors for PubID parsing and construction.

Parse failures carry the offending text and a ``kind`` naming the failure
category, so callers can branch without inspecting messages.
"""

from typing import Optional


class PubIDError(Exception):
    """Base class for all PubID errors."""


class ParseError(PubIDError, ValueError):
    """A PubID string could not be parsed."""

    kind = "ParseError"

    def __init__(self, message: str, text: Optional[str] = None):
        super().__init__(message)
        self.text = text


class UnknownSeriesError(ParseError):
    """The series token has no registry entry for the publisher."""

    kind = "UnknownSeries"


class MalformedDocNumberError(ParseError):
    """The text after the series does not match the docnumber grammar."""

    kind = "MalformedDocNumber"


class InvalidModelError(PubIDError, ValueError):
    """Identifier fields violate the model invariants."""

    kind = "InvalidModel"


class SeriesNotFoundError(PubIDError, LookupError):
    """Registry lookup failed for a (publisher, series) pair."""

    def __init__(self, publisher: str, series: str):
        super().__init__(f"unknown series {series!r} for publisher {publisher}")
        self.publisher = publisher
        self.series = series
