"""Last-resort extraction of coordinate pairs from unstructured text."""

from __future__ import annotations

import re

from dah_vatglasses.common.models import Boundary, DetectedFormat, ParsedAirspace, ParsedDocument
from dah_vatglasses.parsing.coordinates import parse_coordinate

EXTRACTED_AIRSPACE_ID = "EXTRACTED_AIRSPACE"
EXTRACTED_AIRSPACE_NAME = "Extracted from DAH"

COORDINATE_PAIR_RE = re.compile(
    r"(-?\d+(?:\.\d+)?)\s*°?\s*([NSEW])?"
    r"[\s,;/]+"
    r"(-?\d+(?:\.\d+)?)\s*°?\s*([NSEW])?",
    re.IGNORECASE,
)


def parse_generic(text: str) -> ParsedDocument:
    boundaries = tuple(
        Boundary(
            latitude=parse_coordinate(match.group(1) + (match.group(2) or "")),
            longitude=parse_coordinate(match.group(3) + (match.group(4) or "")),
        )
        for match in COORDINATE_PAIR_RE.finditer(text)
    )
    if not boundaries:
        return ParsedDocument(format=DetectedFormat.GENERIC)

    airspace = ParsedAirspace(
        id=EXTRACTED_AIRSPACE_ID,
        name=EXTRACTED_AIRSPACE_NAME,
        boundaries=boundaries,
        upper_limit="UNL",
        lower_limit="GND",
    )
    return ParsedDocument(format=DetectedFormat.GENERIC, airspaces=(airspace,))
