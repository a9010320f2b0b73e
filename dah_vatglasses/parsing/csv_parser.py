"""Row-per-vertex CSV airspace tables."""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import replace
from typing import Callable

from dah_vatglasses.common.errors import FormatError
from dah_vatglasses.common.models import Boundary, DetectedFormat, ParsedAirspace, ParsedDocument, parse_flag
from dah_vatglasses.parsing.coordinates import parse_coordinate

COLUMN_ROLES: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("id", lambda header: "airspace" in header and "id" in header),
    ("name", lambda header: "airspace" in header and "name" in header),
    ("type", lambda header: "type" in header),
    ("latitude", lambda header: "lat" in header),
    ("longitude", lambda header: "lon" in header),
    ("upperLimit", lambda header: "upper" in header),
    ("lowerLimit", lambda header: "lower" in header),
    ("conditional", lambda header: "conditional" in header),
    ("sequence", lambda header: "sequence" in header),
)

_LEADING_INT_RE = re.compile(r"^\s*([-+]?\d+)")


def split_csv_line(line: str) -> list[str]:
    """Split on commas outside quotes. Every ``"`` toggles quoting and is dropped; there is no ``""`` escape."""
    fields = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def map_columns(headers: list[str]) -> dict[str, int | None]:
    """Assign each role the first unclaimed header that matches it."""
    mapping: dict[str, int | None] = {role: None for role, _ in COLUMN_ROLES}
    claimed: set[int] = set()

    for idx, raw_header in enumerate(headers):
        header = raw_header.strip().lower()
        for role, matches in COLUMN_ROLES:
            if mapping[role] is None and matches(header):
                mapping[role] = idx
                claimed.add(idx)
                break

    if mapping["name"] is None:
        for idx, raw_header in enumerate(headers):
            if idx not in claimed and raw_header.strip().lower() == "name":
                mapping["name"] = idx
                break

    return mapping


def _parse_sequence(value: str) -> int:
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else 0


def merge_airspace_boundaries(airspaces: list[ParsedAirspace]) -> list[ParsedAirspace]:
    """Group records by id and rebuild each polygon in ``sequence`` order."""
    representatives: dict[str, ParsedAirspace] = {}
    grouped: dict[str, list[Boundary]] = defaultdict(list)

    for airspace in airspaces:
        representatives.setdefault(airspace.id, airspace)
        grouped[airspace.id].extend(airspace.boundaries)

    return [
        replace(representative, boundaries=tuple(sorted(grouped[key], key=lambda point: point.sequence)))
        for key, representative in representatives.items()
    ]


def parse_csv(content: str) -> ParsedDocument:
    lines = [line for line in content.split("\n") if line.strip()]
    if len(lines) < 2:
        raise FormatError("CSV file must have headers and at least one data row")

    headers = [header.strip() for header in split_csv_line(lines[0])]
    columns = map_columns(headers)

    airspaces: list[ParsedAirspace] = []
    warnings: list[str] = []

    for line_no in range(1, len(lines)):
        values = split_csv_line(lines[line_no])
        if len(values) != len(headers):
            warnings.append(f"CSV row {line_no} has {len(values)} fields, expected {len(headers)}")
            continue

        def value(role: str) -> str:
            idx = columns[role]
            return values[idx].strip() if idx is not None else ""

        boundaries: tuple[Boundary, ...] = ()
        if value("latitude") and value("longitude"):
            boundaries = (
                Boundary(
                    latitude=parse_coordinate(value("latitude")),
                    longitude=parse_coordinate(value("longitude")),
                    sequence=_parse_sequence(value("sequence")),
                ),
            )

        airspaces.append(
            ParsedAirspace(
                id=value("id") or f"AIRSPACE_{line_no}",
                name=value("name") or "Unknown",
                type=value("type") or None,
                boundaries=boundaries,
                upper_limit=value("upperLimit") or "UNL",
                lower_limit=value("lowerLimit") or "GND",
                conditional=parse_flag(value("conditional")),
            )
        )

    return ParsedDocument(
        format=DetectedFormat.CSV,
        airspaces=tuple(merge_airspace_boundaries(airspaces)),
        warnings=tuple(warnings),
    )
