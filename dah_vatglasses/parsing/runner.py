"""Format resolution and strategy dispatch."""

from __future__ import annotations

from dataclasses import replace

from dah_vatglasses.common.constants import DEFAULT_SOURCE_LABEL, SOURCE_HINTS
from dah_vatglasses.common.errors import ConversionError, FormatError, PipelineError
from dah_vatglasses.common.models import DetectedFormat, ParsedDocument
from dah_vatglasses.parsing.csv_parser import parse_csv
from dah_vatglasses.parsing.detect import detect_format
from dah_vatglasses.parsing.generic import parse_generic
from dah_vatglasses.parsing.json_parser import parse_json
from dah_vatglasses.parsing.structured_text import parse_structured_text

FORCED_FORMAT_BY_HINT = {
    "csv": DetectedFormat.CSV,
    "json": DetectedFormat.JSON,
}


def resolve_format(text: str, source_hint: str | None = None) -> DetectedFormat:
    """Pick the parsing strategy: ``csv``/``json`` hints win, anything else is detected."""
    if source_hint is not None and source_hint not in SOURCE_HINTS:
        raise FormatError(f"Unknown source hint: {source_hint}")
    forced = FORCED_FORMAT_BY_HINT.get(source_hint or "")
    if forced is not None:
        return forced
    return detect_format(text)


def run_strategy(detected: DetectedFormat, text: str) -> ParsedDocument:
    if detected is DetectedFormat.CSV:
        return parse_csv(text)
    if detected is DetectedFormat.STRUCTURED_TEXT:
        return parse_structured_text(text)
    if detected is DetectedFormat.JSON:
        return parse_json(text)
    if detected is DetectedFormat.GENERIC:
        return parse_generic(text)
    raise ValueError(f"Unknown format: {detected}")


def parse_document(
    text: str,
    source_hint: str | None = None,
    *,
    source_label: str = DEFAULT_SOURCE_LABEL,
) -> ParsedDocument:
    """Parse one decoded DAH document into the intermediate model.

    ``FormatError`` propagates unchanged; any other failure is wrapped in a
    ``ConversionError`` that chains the original cause.
    """
    try:
        detected = resolve_format(text, source_hint)
        document = run_strategy(detected, text)
    except PipelineError:
        raise
    except Exception as exc:
        raise ConversionError(f"Failed to parse DAH document: {exc}") from exc
    return replace(document, source=source_label)
