"""CLI entrypoint for the DAH to VATGlasses converter."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dah_vatglasses.common.config_loader import ConversionTables, load_config
from dah_vatglasses.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, SOURCE_HINTS
from dah_vatglasses.common.errors import ContractError, PipelineError
from dah_vatglasses.common.fs import read_json, read_pdf_text, read_text, write_json
from dah_vatglasses.common.ids import generate_run_id
from dah_vatglasses.common.logging import build_logger, log_event
from dah_vatglasses.parsing.detect import detect_format
from dah_vatglasses.pipeline.run import convert_document
from dah_vatglasses.pipeline.validate import validate

HINT_BY_SUFFIX = {
    ".csv": "csv",
    ".json": "json",
    ".pdf": "pdf-extracted",
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("input")
    parser.add_argument("--output", default=None)
    parser.add_argument("--source-hint", default=None, choices=SOURCE_HINTS)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default=None)
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def read_document(path: Path) -> tuple[str, str | None]:
    """Return the decoded text of ``path`` and the source hint implied by its suffix."""
    hint = HINT_BY_SUFFIX.get(path.suffix.lower())
    if hint == "pdf-extracted":
        return read_pdf_text(path), hint
    return read_text(path), hint


def _load_tables(args: argparse.Namespace) -> ConversionTables:
    if args.config_dir is None:
        return ConversionTables()
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    return load_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)


def _emit(payload, output: str | None) -> None:
    if output is None:
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
    else:
        write_json(Path(output), payload)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)
    input_path = Path(args.input)

    if args.command == "detect":
        text, _hint = read_document(input_path)
        detected = detect_format(text)
        sys.stdout.write(detected.value + "\n")
        log_event(
            logger,
            "format detected",
            run_id=run_id,
            stage="detect",
            format=detected.value,
            event="DETECT",
            status="ok",
        )
        return EXIT_SUCCESS

    if args.command == "validate":
        report = validate(read_json(input_path))
    else:
        tables = _load_tables(args)
        text, suffix_hint = read_document(input_path)
        output = convert_document(
            text,
            args.source_hint or suffix_hint,
            tables=tables,
            logger=logger,
            run_id=run_id,
        )
        report = validate(output)
        _emit(output, args.output)

    log_event(
        logger,
        "validation finished",
        run_id=run_id,
        stage="validate",
        event="VALIDATE",
        status="ok" if report.valid else "error",
        rows_out=len(report.warnings),
    )
    if args.command == "validate":
        _emit(report.to_dict(), args.output)

    if not report.valid:
        raise ContractError(";".join(report.errors))
    if report.warnings:
        if args.strict:
            raise ContractError(";".join(report.warnings))
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError as exc:
        sys.stderr.write(f"{exc.error_code}: {exc}\n")
        return EXIT_HARD_FAIL
    except (OSError, ValueError) as exc:
        sys.stderr.write(f"INPUT_ERROR: {exc}\n")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
