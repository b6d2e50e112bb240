"""
Application services for PubID conversion.

This module contains the application layer services that orchestrate the
parser and renderer over single identifiers and batches.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from opentelemetry import trace

from nist_pubid.domain.errors import ParseError
from nist_pubid.domain.models import Style
from nist_pubid.domain.parser import PubIDParser
from nist_pubid.domain.series import SeriesRegistry

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


class ConversionResult:
    """Outcome of converting one PubID: either an output or an error."""

    def __init__(
        self,
        source: str,
        style: Style,
        output: Optional[str] = None,
        error: Optional[ParseError] = None,
    ):
        self.source = source
        self.style = style
        self.output = output
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source": self.source,
            "style": self.style.value,
            "output": self.output,
            "error": str(self.error) if self.error else None,
            "error_kind": self.error.kind if self.error else None,
        }

    def __repr__(self) -> str:
        return f"ConversionResult(source={self.source}, output={self.output}, error={self.error})"


class PubIDConversionService:
    """Service for converting PubIDs between styles."""

    def __init__(self, registry: Optional[SeriesRegistry] = None) -> None:
        self.parser = PubIDParser(registry)

    def convert(self, text: str, style: Union[Style, str]) -> str:
        """
        Convert a PubID to another style.

        Args:
            text: The PubID in any style
            style: The output style

        Returns:
            The PubID rendered in the output style

        Raises:
            UnknownSeriesError: If the series cannot be resolved
            MalformedDocNumberError: If the document number is malformed
        """
        target = Style.coerce(style)
        with tracer.start_as_current_span("convert") as span:
            span.set_attribute("pubid.input", text)
            span.set_attribute("pubid.output_style", target.value)

            output = self.parser.parse(text).to_text(target)

            span.set_attribute("pubid.output", output)
            logger.debug("Converted %r to %s: %r", text, target.value, output)
            return output

    def normalize(self, text: str) -> str:
        """Return the canonical Short form of a PubID, resolving legacy spellings."""
        return self.convert(text, Style.SHORT)

    def convert_all(self, texts: Iterable[str], style: Union[Style, str]) -> List[ConversionResult]:
        """
        Convert a batch of PubIDs.

        Inputs that fail to parse are reported in their result and do not
        stop the batch.

        Args:
            texts: PubIDs in any style
            style: The output style

        Returns:
            One ConversionResult per input, in input order
        """
        target = Style.coerce(style)
        with tracer.start_as_current_span("convert_all") as span:
            results: List[ConversionResult] = []
            for text in texts:
                try:
                    output = self.parser.parse(text).to_text(target)
                    results.append(ConversionResult(text, target, output=output))
                except ParseError as e:
                    logger.warning("Skipping %r: %s", text, e)
                    results.append(ConversionResult(text, target, error=e))

            failures = sum(1 for result in results if not result.ok)
            span.set_attribute("pubid.count", len(results))
            span.set_attribute("pubid.failures", failures)
            logger.info(
                "Converted %d PubIDs to %s (%d failed)",
                len(results) - failures,
                target.value,
                failures,
            )

            # Add event for batch completion
            span.add_event("conversion_completed", {"pubid_count": len(results)})

            return results
