"""Titled-block DAH text, as produced by PDF text extraction.

Each airspace starts with a title line such as ``YBBB-YMMM/MELBOURNE FIR CTA A1``
and is followed by labelled sections::

    LATERAL LIMITS: 3322225 14822227E 3400000 15000000E
    VERTICAL LIMITS: FL180 - FL245
    HOURS OF ACTIVATION: H24
    CONTROLLING AUTHORITY: BRISBANE CENTRE 128.600

Lateral and vertical sections may continue over the following lines until the
next label or title.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from dah_vatglasses.common.models import Boundary, DetectedFormat, ParsedAirspace, ParsedDocument
from dah_vatglasses.parsing.altitude import extract_vertical_limits
from dah_vatglasses.parsing.coordinates import extract_coordinate_pairs

VHF_MIN_MHZ = 108.0
VHF_MAX_MHZ = 136.975

TITLE_RE = re.compile(
    r"^(?P<code>[A-Z]{4}(?:[-/][A-Z]{4})*)/(?P<name>.+?)"
    r"(?:\s+(?P<kind>CTA|CTR|TMA|CLASS(?:\s+[A-G])?))?"
    r"(?:\s+(?P<suffix>[A-Z]?\d+))?$"
)
LOCATION_RE = re.compile(r"[A-Z]{4}")

LATERAL_RE = re.compile(r"^LATERAL\s+LIMITS:\s*", re.IGNORECASE)
VERTICAL_RE = re.compile(r"^VERTICAL\s+LIMITS:\s*", re.IGNORECASE)
HOURS_RE = re.compile(r"^HOURS?\s+OF\s+(?:ACTIVATION|OPERATION):\s*", re.IGNORECASE)
AUTHORITY_RE = re.compile(r"^CONTROLLING\s+AUTHORITY:\s*", re.IGNORECASE)
FREQUENCY_RE = re.compile(r"^FREQUENC(?:Y|IES):\s*", re.IGNORECASE)
MHZ_RE = re.compile(r"(?<![\d.])(1[0-3]\d\.\d{1,3})(?![\d.])")


class ScanState(Enum):
    NONE = "none"
    READING_LATERAL = "reading_lateral"
    READING_VERTICAL = "reading_vertical"


@dataclass
class _Draft:
    id: str
    name: str
    type: str | None
    locations: tuple[str, ...]
    boundaries: list[Boundary] = field(default_factory=list)
    upper_limit: str = "UNL"
    lower_limit: str = "GND"
    controlling_authority: str | None = None
    frequencies: list[float] = field(default_factory=list)
    hours_of_operation: str | None = None

    def apply_vertical_limits(self, text: str) -> None:
        lower, upper = extract_vertical_limits(text)
        if lower is not None:
            self.lower_limit = lower
        if upper is not None:
            self.upper_limit = upper

    def add_frequencies(self, text: str) -> None:
        for value in extract_frequencies(text):
            if value not in self.frequencies:
                self.frequencies.append(value)

    def freeze(self) -> ParsedAirspace:
        return ParsedAirspace(
            id=self.id,
            name=self.name,
            type=self.type,
            locations=self.locations,
            boundaries=tuple(self.boundaries),
            upper_limit=self.upper_limit,
            lower_limit=self.lower_limit,
            controlling_authority=self.controlling_authority,
            frequencies=tuple(self.frequencies),
            hours_of_operation=self.hours_of_operation,
        )


def extract_frequencies(text: str) -> list[float]:
    values = []
    for raw in MHZ_RE.findall(text):
        value = float(raw)
        if VHF_MIN_MHZ <= value <= VHF_MAX_MHZ:
            values.append(value)
    return values


def parse_title(line: str) -> _Draft | None:
    match = TITLE_RE.match(line)
    if not match:
        return None

    code = match.group("code")
    name = match.group("name").strip()
    suffix = match.group("suffix") or ""
    return _Draft(
        id=f"{code}/{name} {suffix}".strip(),
        name=f"{name} {suffix}".strip(),
        type=match.group("kind"),
        locations=tuple(LOCATION_RE.findall(code)),
    )


def parse_structured_text(text: str) -> ParsedDocument:
    airspaces: list[ParsedAirspace] = []
    current: _Draft | None = None
    state = ScanState.NONE

    def flush() -> None:
        # Blocks that never produced a boundary are dropped.
        if current is not None and current.boundaries:
            airspaces.append(current.freeze())

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        title = parse_title(line)
        if title is not None:
            flush()
            current = title
            state = ScanState.NONE
            continue

        if current is None:
            continue

        if LATERAL_RE.match(line):
            state = ScanState.READING_LATERAL
            current.boundaries.extend(extract_coordinate_pairs(LATERAL_RE.sub("", line, count=1)))
            continue

        if VERTICAL_RE.match(line):
            state = ScanState.READING_VERTICAL
            current.apply_vertical_limits(VERTICAL_RE.sub("", line, count=1))
            continue

        if HOURS_RE.match(line):
            current.hours_of_operation = HOURS_RE.sub("", line, count=1).strip()
            state = ScanState.NONE
            continue

        if AUTHORITY_RE.match(line):
            authority = AUTHORITY_RE.sub("", line, count=1).strip()
            current.controlling_authority = authority
            current.add_frequencies(authority)
            state = ScanState.NONE
            continue

        if FREQUENCY_RE.match(line):
            current.add_frequencies(FREQUENCY_RE.sub("", line, count=1))
            state = ScanState.NONE
            continue

        if state is ScanState.READING_LATERAL:
            current.boundaries.extend(extract_coordinate_pairs(line))
        elif state is ScanState.READING_VERTICAL:
            current.apply_vertical_limits(line)

    flush()
    return ParsedDocument(format=DetectedFormat.STRUCTURED_TEXT, airspaces=tuple(airspaces))
