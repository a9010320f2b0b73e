"""Document-level orchestration: parse, convert, and log each stage."""

from __future__ import annotations

import logging
from datetime import datetime

from dah_vatglasses.common.config_loader import ConversionTables
from dah_vatglasses.common.errors import ConversionError, PipelineError
from dah_vatglasses.common.logging import log_event
from dah_vatglasses.common.models import ParsedDocument
from dah_vatglasses.parsing.runner import parse_document
from dah_vatglasses.pipeline.convert import DEFAULT_TABLES, convert


def _parse_stage(
    text: str,
    source_hint: str | None,
    tables: ConversionTables,
    logger: logging.Logger | None,
    run_id: str | None,
) -> ParsedDocument:
    try:
        document = parse_document(text, source_hint, source_label=tables.source_label)
    except PipelineError as exc:
        log_event(
            logger,
            f"parse failed: {exc}",
            run_id=run_id,
            stage="parse",
            source=source_hint,
            event="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        raise

    log_event(
        logger,
        "document parsed",
        run_id=run_id,
        stage="parse",
        source=source_hint,
        format=document.format.value,
        event="PARSE",
        status="ok",
        rows_in=len(text.splitlines()),
        rows_out=len(document.airspaces),
    )
    for warning in document.warnings:
        log_event(
            logger,
            warning,
            run_id=run_id,
            stage="parse",
            format=document.format.value,
            event="ROW_SKIPPED",
            status="warning",
        )
    return document


def convert_document(
    text: str,
    source_hint: str | None = None,
    *,
    tables: ConversionTables = DEFAULT_TABLES,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Turn one decoded DAH document into a VATGlasses JSON object.

    All-or-nothing per document: any failure raises a ``PipelineError`` and no
    partial output is returned.
    """
    document = _parse_stage(text, source_hint, tables, logger, run_id)

    try:
        output = convert(document, tables, now=now)
    except Exception as exc:
        error = exc if isinstance(exc, PipelineError) else ConversionError(f"Failed to convert DAH document: {exc}")
        log_event(
            logger,
            f"conversion failed: {exc}",
            run_id=run_id,
            stage="convert",
            event="STAGE_FAIL",
            status="error",
            error_code=error.error_code,
        )
        if error is exc:
            raise
        raise error from exc

    log_event(
        logger,
        "document converted",
        run_id=run_id,
        stage="convert",
        format=document.format.value,
        event="CONVERT",
        status="ok",
        rows_in=len(document.airspaces) + len(document.positions) + len(document.airports),
        rows_out=len(output["airspace"]) + len(output["positions"]) + len(output["airports"]),
    )
    return output
