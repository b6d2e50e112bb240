"""
Series registry.

This module maps (publisher, series token) pairs to series metadata. Current
codes, aliases, machine-readable codes and legacy spellings that fuse the
publisher into the series token (``NISTIR``) are all explicit entries, so
normalization never depends on ad hoc string substitution.
"""

import json
import logging
import os
import re
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Tuple

from nist_pubid.domain.errors import SeriesNotFoundError
from nist_pubid.domain.models import Publisher, Style

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_SERIES_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "data", "series.json"
)

_SEPARATOR_RE = re.compile(r"[\s.\-]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_token(token: str) -> str:
    """Return the case- and punctuation-insensitive lookup key of a spelling."""
    return _SEPARATOR_RE.sub("", token).upper()


def _spelling_pattern(spelling: str) -> str:
    chunks = [re.escape(chunk) for chunk in _SEPARATOR_RE.split(spelling.strip()) if chunk]
    return r"[\s.\-]?".join(chunks)


def _title_pattern(title: str) -> str:
    return r"\s+".join(re.escape(word) for word in title.split())


def _title_key(title: str) -> str:
    return _WHITESPACE_RE.sub(" ", title.strip()).lower()


class SeriesEntry:
    """Metadata for one document series."""

    def __init__(
        self,
        code: str,
        publishers: Iterable[Publisher],
        long_title: str,
        abbrev_title: str,
        aliases: Iterable[str] = (),
        mr_code: Optional[str] = None,
        embeds_publisher: bool = False,
        docnumber_pattern: Optional[str] = None,
    ):
        self.code = code
        self.publishers: Tuple[Publisher, ...] = tuple(publishers)
        self.long_title = long_title
        self.abbrev_title = abbrev_title
        self.aliases: Tuple[str, ...] = tuple(aliases)
        self.mr_code = mr_code or code.replace(" ", ".")
        self.embeds_publisher = embeds_publisher
        self.docnumber_pattern = docnumber_pattern
        self._docnumber_re = re.compile(docnumber_pattern) if docnumber_pattern else None

        if not self.publishers:
            raise ValueError(f"series {code!r} has no publisher")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeriesEntry":
        """Create from a registry data record."""
        return cls(
            code=data["code"],
            publishers=[Publisher(code) for code in data["publishers"]],
            long_title=data["long"],
            abbrev_title=data.get("abbrev", data["long"]),
            aliases=data.get("aliases", ()),
            mr_code=data.get("mr_code"),
            embeds_publisher=data.get("embeds_publisher", False),
            docnumber_pattern=data.get("docnumber_pattern"),
        )

    def spellings(self) -> List[str]:
        """All spellings that resolve to this entry: code, MR code and aliases."""
        return [self.code, self.mr_code, *self.aliases]

    def title(self, style: Style) -> str:
        """Series text for an output style."""
        if style is Style.LONG:
            return self.long_title
        if style is Style.ABBREV:
            return self.abbrev_title
        if style is Style.MR:
            return self.mr_code
        return self.code

    def accepts_docnumber(self, docnumber: str) -> bool:
        """Series-specific docnumber check; series without a pattern accept any."""
        if self._docnumber_re is None:
            return True
        return self._docnumber_re.fullmatch(docnumber) is not None

    def __repr__(self) -> str:
        publishers = "/".join(publisher.value for publisher in self.publishers)
        return f"SeriesEntry(code={self.code}, publishers={publishers})"


class SeriesRegistry:
    """
    Read-only lookup table of known series.

    Every spelling is indexed by ``(publisher, normalize_token(spelling))``.
    Two different entries normalizing to the same key for one publisher is
    a data error and is rejected when the registry is built, so a lookup
    either finds exactly one entry or none.
    """

    def __init__(
        self,
        publisher_titles: Dict[Publisher, Dict[Style, str]],
        entries: Iterable[SeriesEntry],
        fused_aliases: Optional[Dict[str, Tuple[Publisher, str]]] = None,
    ):
        self._publisher_titles = publisher_titles
        self._entries = list(entries)
        self._index: Dict[Tuple[Publisher, str], SeriesEntry] = {}
        self._spellings: Dict[Publisher, List[str]] = {publisher: [] for publisher in Publisher}

        for entry in self._entries:
            for publisher in entry.publishers:
                if publisher not in publisher_titles:
                    raise ValueError(f"no titles for publisher {publisher.value}")
                for spelling in entry.spellings():
                    self._register(publisher, spelling, entry)

        self._fused: Dict[str, Tuple[Publisher, SeriesEntry]] = {}
        for token, (publisher, code) in (fused_aliases or {}).items():
            key = normalize_token(token)
            if key in self._fused:
                raise ValueError(f"duplicate fused alias: {token!r}")
            self._fused[key] = (publisher, self.resolve(publisher, code))

        self._series_res = {
            publisher: self._compile_spellings(spellings)
            for publisher, spellings in self._spellings.items()
        }
        self._fused_re = self._compile_spellings(list(fused_aliases or {}))
        self._titles: Dict[str, Tuple[Publisher, SeriesEntry, Style]] = {}
        self._title_re = self._compile_titles()

        logger.debug(
            "Series registry built: %d entries, %d fused aliases",
            len(self._entries),
            len(self._fused),
        )

    def _register(self, publisher: Publisher, spelling: str, entry: SeriesEntry) -> None:
        key = normalize_token(spelling)
        existing = self._index.get((publisher, key))
        if existing is entry:
            return
        if existing is not None:
            raise ValueError(
                f"ambiguous series spelling {spelling!r} for {publisher.value}: "
                f"{existing.code} and {entry.code}"
            )
        self._index[(publisher, key)] = entry
        self._spellings[publisher].append(spelling)

    @staticmethod
    def _compile_spellings(spellings: List[str], boundary: str = r"[\s.(]|\d|$") -> "re.Pattern[str]":
        # Longest spelling first, so "FIPS PUB" wins over "FIPS"
        ordered = sorted(set(spellings), key=lambda spelling: (-len(normalize_token(spelling)), spelling))
        if not ordered:
            return re.compile(r"(?!)")
        alternation = "|".join(_spelling_pattern(spelling) for spelling in ordered)
        return re.compile(rf"(?:{alternation})(?={boundary})", re.IGNORECASE)

    def _compile_titles(self) -> "re.Pattern[str]":
        for entry in self._entries:
            for publisher in entry.publishers:
                for style in (Style.LONG, Style.ABBREV):
                    if entry.embeds_publisher:
                        full_title = entry.title(style)
                    else:
                        full_title = f"{self.publisher_title(publisher, style)} {entry.title(style)}"
                    key = _title_key(full_title)
                    existing = self._titles.get(key)
                    if existing is None:
                        self._titles[key] = (publisher, entry, style)
                    elif existing[:2] != (publisher, entry):
                        raise ValueError(f"ambiguous series title: {full_title!r}")

        ordered = sorted(self._titles, key=lambda title: (-len(title), title))
        if not ordered:
            return re.compile(r"(?!)")
        alternation = "|".join(_title_pattern(title) for title in ordered)
        return re.compile(rf"(?:{alternation})(?=\s|$)", re.IGNORECASE)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeriesRegistry":
        """Build a registry from its data document."""
        publisher_titles: Dict[Publisher, Dict[Style, str]] = {}
        for code, titles in data["publishers"].items():
            publisher = Publisher(code)
            publisher_titles[publisher] = {
                Style.LONG: titles["long"],
                Style.ABBREV: titles.get("abbrev", titles["long"]),
                Style.SHORT: publisher.value,
                Style.MR: publisher.value,
            }

        entries = [SeriesEntry.from_dict(record) for record in data["series"]]
        fused_aliases = {
            token: (Publisher(target[0]), target[1])
            for token, target in data.get("fused_aliases", {}).items()
        }
        return cls(publisher_titles, entries, fused_aliases)

    @classmethod
    def from_json_file(cls, file_path: str) -> "SeriesRegistry":
        """
        Load a registry from a JSON data file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        logger.debug("Loading series registry from %s", file_path)
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def entries(self) -> List[SeriesEntry]:
        return list(self._entries)

    def publisher_title(self, publisher: Publisher, style: Style) -> str:
        """Organization text for an output style."""
        return self._publisher_titles[publisher][style]

    def resolve(self, publisher: Publisher, series: str) -> SeriesEntry:
        """
        Resolve a series token for a publisher.

        Accepts the canonical code, an alias, the MR code, the code prefixed
        with the publisher (``"NIST SP"``) or a fused legacy token
        (``"NISTIR"``).

        Raises:
            SeriesNotFoundError: If no entry matches
        """
        token = series.strip()
        prefix = re.match(rf"{publisher.value}[\s.]+", token, re.IGNORECASE)
        if prefix:
            token = token[prefix.end():]

        key = normalize_token(token)
        entry = self._index.get((publisher, key))
        if entry is not None:
            return entry

        fused = self._fused.get(key)
        if fused is not None and fused[0] is publisher:
            return fused[1]

        raise SeriesNotFoundError(publisher.value, series)

    def match_series(self, publisher: Publisher, text: str, pos: int = 0) -> Optional[Tuple[SeriesEntry, int]]:
        """Match the longest known series spelling at ``pos``; return entry and end offset."""
        match = self._series_res[publisher].match(text, pos)
        if not match:
            return None
        return self._index[(publisher, normalize_token(match.group(0)))], match.end()

    def match_fused(self, text: str, pos: int = 0) -> Optional[Tuple[Publisher, SeriesEntry, int]]:
        """Match a legacy token fusing publisher and series (``NBSIR``) at ``pos``."""
        match = self._fused_re.match(text, pos)
        if not match:
            return None
        publisher, entry = self._fused[normalize_token(match.group(0))]
        return publisher, entry, match.end()

    def match_title(self, text: str, pos: int = 0) -> Optional[Tuple[Publisher, SeriesEntry, Style, int]]:
        """Match a full organization and series title in Long or Abbrev style at ``pos``."""
        match = self._title_re.match(text, pos)
        if not match:
            return None
        publisher, entry, style = self._titles[_title_key(match.group(0))]
        return publisher, entry, style, match.end()


@lru_cache(maxsize=None)
def get_default_registry() -> SeriesRegistry:
    """
    Return the process-wide registry.

    Built once from ``NIST_PUBID_SERIES_PATH`` when set, otherwise from the
    bundled ``data/series.json``.
    """
    file_path = os.getenv("NIST_PUBID_SERIES_PATH") or DEFAULT_SERIES_PATH
    return SeriesRegistry.from_json_file(file_path)
