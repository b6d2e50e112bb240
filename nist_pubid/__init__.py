"""
Parse and render NIST and NBS publication identifiers (PubIDs).

    >>> from nist_pubid import parse
    >>> parse("NIST SP 800-53r5").to_text("mr")
    'NIST.SP.800-53r5'
"""

from nist_pubid.domain.errors import (
    InvalidModelError,
    MalformedDocNumberError,
    ParseError,
    PubIDError,
    SeriesNotFoundError,
    UnknownSeriesError,
)
from nist_pubid.domain.identifier import Identifier
from nist_pubid.domain.models import Publisher, Stage, Style, Update
from nist_pubid.domain.parser import PubIDParser, parse
from nist_pubid.domain.series import SeriesEntry, SeriesRegistry, get_default_registry

__all__ = [
    "Identifier",
    "InvalidModelError",
    "MalformedDocNumberError",
    "ParseError",
    "PubIDError",
    "PubIDParser",
    "Publisher",
    "SeriesEntry",
    "SeriesNotFoundError",
    "SeriesRegistry",
    "Stage",
    "Style",
    "UnknownSeriesError",
    "Update",
    "get_default_registry",
    "parse",
]
