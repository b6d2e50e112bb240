"""
PubID renderer.

Every output style is a projection of the same Identifier: a head built
from the publisher, series and stage, followed by the qualifier suffixes in
canonical order. Suffix markers for each style live in one table so the
four forms cannot drift apart.
"""

from typing import TYPE_CHECKING, Any, Dict, Union

from nist_pubid.domain.models import Qualifiers, Style
from nist_pubid.domain.series import SeriesRegistry

if TYPE_CHECKING:
    from nist_pubid.domain.identifier import Identifier


SUFFIX_FORMATS: Dict[Style, Dict[str, str]] = {
    Style.LONG: {
        "part": " Part {}",
        "volume": ", Volume {}",
        "version": " Version {}",
        "revision": ", Revision {}",
        "edition": " Edition {}",
        "update": " Update {}",
        "translation": " ({})",
    },
    Style.ABBREV: {
        "part": " Pt. {}",
        "volume": ", Vol. {}",
        "version": " Ver. {}",
        "revision": ", Rev. {}",
        "edition": " Ed. {}",
        "update": " Upd. {}",
        "translation": " ({})",
    },
    Style.SHORT: {
        "part": "pt{}",
        "volume": "v{}",
        "version": "ver{}",
        "revision": "r{}",
        "edition": "e{}",
        "update": "/Upd {}",
        "addendum": " Addendum{}",
        "translation": "({})",
    },
    Style.MR: {
        "part": "pt{}",
        "volume": "v{}",
        "version": "ver{}",
        "revision": "r{}",
        "edition": "e{}",
        "update": ".u{}",
        "addendum": ".add-{}",
        "translation": "({})",
    },
}

# Long and Abbrev render the addendum as a prefix of the whole string
ADDENDUM_PREFIXES = {
    Style.LONG: "Addendum",
    Style.ABBREV: "Add.",
}


def _format_value(name: str, value: Any, style: Style) -> str:
    if name == "update":
        if value.date is None:
            return str(value.number)
        separator = "-" if style is Style.MR else ":"
        return f"{value.number}{separator}{value.date}"
    if name == "translation":
        return value.upper() if style in ADDENDUM_PREFIXES else value
    if name == "addendum" and style is Style.SHORT:
        return f" {value}" if value > 1 else ""
    return str(value)


def render_qualifiers(qualifiers: Qualifiers, style: Style) -> str:
    """Render the qualifier suffixes of one style, in canonical order."""
    formats = SUFFIX_FORMATS[style]
    return "".join(
        formats[name].format(_format_value(name, value, style))
        for name, value in qualifiers.items()
        if name in formats
    )


def render_addendum_prefix(addendum: int, style: Style) -> str:
    marker = ADDENDUM_PREFIXES[style]
    if addendum > 1:
        return f"{marker} {addendum} to "
    return f"{marker} to "


class PubIDRenderer:
    """Render Identifiers in any of the four output styles."""

    def __init__(self, registry: SeriesRegistry):
        self.registry = registry

    def render(self, identifier: "Identifier", style: Union[Style, str]) -> str:
        """
        Render an identifier.

        Args:
            identifier: The identifier to render
            style: Output style, as a Style or its name ("long", "mr", ...)

        Returns:
            The identifier text in the requested style
        """
        style = Style.coerce(style)
        if style is Style.SHORT:
            return self._render_short(identifier)
        if style is Style.MR:
            return self._render_mr(identifier)
        return self._render_human(identifier, style)

    def _render_short(self, identifier: "Identifier") -> str:
        head = f"{identifier.publisher.value} {identifier.series.title(Style.SHORT)}"
        if identifier.stage is not None:
            head += f"({identifier.stage.code})"
        suffix = render_qualifiers(identifier.qualifiers, Style.SHORT)
        return f"{head} {identifier.docnumber}{suffix}"

    def _render_mr(self, identifier: "Identifier") -> str:
        tokens = [identifier.publisher.value, identifier.series.title(Style.MR)]
        if identifier.stage is not None:
            tokens.append(identifier.stage.code)
        tokens.append(identifier.docnumber + render_qualifiers(identifier.qualifiers, Style.MR))
        return ".".join(tokens)

    def _render_human(self, identifier: "Identifier", style: Style) -> str:
        words = []
        if not identifier.series.embeds_publisher:
            words.append(self.registry.publisher_title(identifier.publisher, style))
        words.append(identifier.series.title(style))
        if identifier.stage is not None:
            words.append(identifier.stage.title)
        words.append(identifier.docnumber + render_qualifiers(identifier.qualifiers, style))

        text = " ".join(words)
        if identifier.addendum is not None:
            text = render_addendum_prefix(identifier.addendum, style) + text
        return text
