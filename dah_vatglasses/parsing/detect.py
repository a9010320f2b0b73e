"""Content-based format classification for DAH documents."""

from __future__ import annotations

import json

from dah_vatglasses.common.models import DetectedFormat

CSV_HEADER_KEYWORDS = ("airspace", "latitude", "name")
STRUCTURED_TEXT_MARKERS = (
    "AIRSPACE",
    "Airspace",
    "UPPER LIMIT",
    "LOWER LIMIT",
    "LATERAL LIMITS",
    "VERTICAL LIMITS",
)


def _is_json(text: str) -> bool:
    stripped = text.strip()
    if not stripped.startswith(("{", "[")):
        return False
    try:
        json.loads(stripped)
    except ValueError:
        return False
    return True


def _looks_like_csv(text: str) -> bool:
    lines = text.split("\n")
    if len(lines) < 2 or "," not in lines[0]:
        return False
    header = lines[0].lower()
    return any(keyword in header for keyword in CSV_HEADER_KEYWORDS)


def detect_format(text: str) -> DetectedFormat:
    if _is_json(text):
        return DetectedFormat.JSON
    if _looks_like_csv(text):
        return DetectedFormat.CSV
    if any(marker in text for marker in STRUCTURED_TEXT_MARKERS):
        return DetectedFormat.STRUCTURED_TEXT
    return DetectedFormat.GENERIC
