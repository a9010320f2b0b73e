"""Coordinate parsing: decimal degrees, DMS text and fixed-width DMS digit blocks."""

from __future__ import annotations

import re
from typing import Any

from dah_vatglasses.common.models import Boundary

LATITUDE_BLOCK_DIGITS = 7
LONGITUDE_BLOCK_DIGITS = 8

# Unlabelled fixed-width blocks are read as southern latitudes and eastern longitudes.
DEFAULT_LATITUDE_HEMISPHERE = "S"
DEFAULT_LONGITUDE_HEMISPHERE = "E"

_DECIMAL_RE = re.compile(r"^([-+]?(?:\d+(?:\.\d*)?|\.\d+))\s*([NSEW])?$", re.IGNORECASE)
_DMS_TEXT_RE = re.compile(
    r"^(\d+)\s*[°º\s]\s*(\d+)\s*['′\s]\s*(\d+(?:\.\d*)?)\s*(?:\"|″|'')?\s*([NSEW])?$",
    re.IGNORECASE,
)
_FIXED_WIDTH_RE = re.compile(r"^(\d{7,8})\s*([NSEW])?$", re.IGNORECASE)

_FIXED_WIDTH_PAIR_RE = re.compile(r"(?<!\d)(\d{7})([NS])?\s+(\d{8})([EW])?(?!\d)", re.IGNORECASE)
_SYMBOL_DMS_PAIR_RE = re.compile(
    r"(\d+)°\s*(\d+)'\s*(\d+(?:\.\d+)?)\"?\s*([NS])\s+(\d+)°\s*(\d+)'\s*(\d+(?:\.\d+)?)\"?\s*([EW])",
    re.IGNORECASE,
)
_BARE_LATITUDE_BLOCK_RE = re.compile(r"(?<!\d)(\d{7})(?!\d)")


def dms_to_decimal(degrees: float, minutes: float, seconds: float, direction: str | None) -> float:
    decimal = degrees + minutes / 60 + seconds / 3600
    if direction and direction.upper() in ("S", "W"):
        decimal *= -1
    return decimal


def decimal_to_dms(value: float) -> tuple[int, int, float]:
    """Split an absolute decimal angle into whole degrees, whole minutes and seconds."""
    absolute = abs(value)
    degrees = int(absolute)
    minutes_decimal = (absolute - degrees) * 60
    minutes = int(minutes_decimal)
    seconds = (minutes_decimal - minutes) * 60
    return degrees, minutes, seconds


def format_dms(value: float, *, is_latitude: bool, hemisphere: bool = False) -> str:
    """Render ``DDMMSS`` (latitude) or ``DDDMMSS`` (longitude).

    Negative values get a leading ``-`` unless ``hemisphere`` is set, in which
    case an ``N``/``S``/``E``/``W`` suffix carries the sign instead.
    """
    degrees, minutes, seconds = decimal_to_dms(value)
    whole_seconds = int(round(seconds))
    if whole_seconds == 60:
        whole_seconds = 0
        minutes += 1
    if minutes == 60:
        minutes = 0
        degrees += 1

    width = 2 if is_latitude else 3
    body = f"{degrees:0{width}d}{minutes:02d}{whole_seconds:02d}"
    if hemisphere:
        if is_latitude:
            return body + ("S" if value < 0 else "N")
        return body + ("W" if value < 0 else "E")
    return ("-" if value < 0 else "") + body


def parse_dms_coordinate(block: str, direction: str | None = None) -> float | None:
    """Parse a fixed-width ``DDMMSSS`` or ``DDDMMSSS`` block; the last three digits are tenths of a second."""
    digits = re.sub(r"[^\d]", "", block)

    if len(digits) == LATITUDE_BLOCK_DIGITS:
        degrees = int(digits[0:2])
        minutes = int(digits[2:4])
        seconds = int(digits[4:7]) / 10
        default = DEFAULT_LATITUDE_HEMISPHERE
    elif len(digits) == LONGITUDE_BLOCK_DIGITS:
        degrees = int(digits[0:3])
        minutes = int(digits[3:5])
        seconds = int(digits[5:8]) / 10
        default = DEFAULT_LONGITUDE_HEMISPHERE
    else:
        return None

    return dms_to_decimal(degrees, minutes, seconds, direction or default)


def parse_coordinate(token: Any, hemisphere_hint: str | None = None) -> float:
    """Parse one coordinate token into signed decimal degrees.

    Tries a plain decimal, then DMS text, then a fixed-width DMS block.
    Anything else yields ``0.0`` so line scans keep going over partial matches.
    """
    if isinstance(token, bool) or token is None:
        return 0.0
    if isinstance(token, (int, float)):
        return float(token)

    text = str(token).strip()
    if not text:
        return 0.0

    decimal_match = _DECIMAL_RE.match(text)
    if decimal_match:
        value = float(decimal_match.group(1))
        if abs(value) <= 180:
            direction = decimal_match.group(2)
            if direction:
                value = dms_to_decimal(abs(value), 0, 0, direction)
            return value

    dms_match = _DMS_TEXT_RE.match(text)
    if dms_match:
        return dms_to_decimal(
            int(dms_match.group(1)),
            int(dms_match.group(2)),
            float(dms_match.group(3)),
            dms_match.group(4) or hemisphere_hint,
        )

    block_match = _FIXED_WIDTH_RE.match(text)
    if block_match:
        parsed = parse_dms_coordinate(block_match.group(1), block_match.group(2) or hemisphere_hint)
        if parsed is not None:
            return parsed

    return 0.0


def extract_coordinate_pairs(line: str) -> list[Boundary]:
    """Find every latitude/longitude pair on one line of a lateral-limits section."""
    matches = list(_FIXED_WIDTH_PAIR_RE.finditer(line))
    if matches:
        points = []
        for match in matches:
            latitude = parse_dms_coordinate(match.group(1), match.group(2) or DEFAULT_LATITUDE_HEMISPHERE)
            longitude = parse_dms_coordinate(match.group(3), match.group(4) or DEFAULT_LONGITUDE_HEMISPHERE)
            if latitude is not None and longitude is not None:
                points.append(Boundary(latitude=latitude, longitude=longitude))
        return points

    matches = list(_SYMBOL_DMS_PAIR_RE.finditer(line))
    if matches:
        return [
            Boundary(
                latitude=dms_to_decimal(int(m.group(1)), int(m.group(2)), float(m.group(3)), m.group(4)),
                longitude=dms_to_decimal(int(m.group(5)), int(m.group(6)), float(m.group(7)), m.group(8)),
            )
            for m in matches
        ]

    blocks = _BARE_LATITUDE_BLOCK_RE.findall(line)
    points = []
    for idx in range(0, len(blocks) - 1, 2):
        latitude = parse_dms_coordinate(blocks[idx], DEFAULT_LATITUDE_HEMISPHERE)
        longitude = parse_dms_coordinate(blocks[idx + 1], DEFAULT_LONGITUDE_HEMISPHERE)
        if latitude is not None and longitude is not None:
            points.append(Boundary(latitude=latitude, longitude=longitude))
    return points
