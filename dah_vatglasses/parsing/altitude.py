"""Altitude range extraction and VATGlasses altitude normalisation."""

from __future__ import annotations

import re
from typing import Any, Mapping

FLIGHT_LEVEL_THRESHOLD = 180
UNLIMITED_FLIGHT_LEVEL = 999

_RANGE_RE = re.compile(r"(SFC|GND|FL\d+|\d+)\s*[-–]\s*(UNL|FL\d+|\d+)", re.IGNORECASE)
_LONE_LIMIT_RE = re.compile(r"FL\d+|UNL|SFC|GND", re.IGNORECASE)
_GROUND_TOKENS = ("SFC", "GND")

_FLIGHT_LEVEL_RE = re.compile(r"(FL|F|L)?(\d+)")
_FEET_RE = re.compile(r"(\d+)\s*(FT|'|FEET|AMSL|AGL)?")


def extract_vertical_limits(text: str) -> tuple[str | None, str | None]:
    """Return ``(lower, upper)`` raw limit strings found in ``text``.

    A ``<lower> - <upper>`` range fills both sides. A lone limit token fills the
    lower side when it is SFC/GND and the upper side otherwise. Sides not
    present in the text come back as ``None``.
    """
    range_match = _RANGE_RE.search(text)
    if range_match:
        return range_match.group(1), range_match.group(2)

    token = text.strip()
    if _LONE_LIMIT_RE.fullmatch(token):
        if token.upper() in _GROUND_TOKENS:
            return token, None
        return None, token

    return None, None


def _altitude(value: int, unit: str, reference: str) -> dict:
    return {"value": value, "unit": unit, "reference": reference}


def normalize_altitude(altitude: Any) -> dict:
    """Resolve a raw limit (``"FL245"``, ``"UNL"``, ``"5000 AGL"``) into value/unit/reference.

    Mappings that already carry a value are passed through, which keeps the
    conversion idempotent over its own output.
    """
    if isinstance(altitude, Mapping):
        return _altitude(
            altitude.get("value", 0),
            altitude.get("unit", "FT"),
            altitude.get("reference", "AMSL"),
        )

    text = str(altitude).upper().strip()

    if text in ("UNL", "UNLIMITED"):
        return _altitude(UNLIMITED_FLIGHT_LEVEL, "FL", "STD")

    if text in ("GND", "GROUND", "SFC"):
        return _altitude(0, "FT", "AGL")

    level_match = _FLIGHT_LEVEL_RE.fullmatch(text)
    if level_match:
        _prefix, digits = level_match.groups()
        value = int(digits)
        # Only a three digit figure can be a level; longer ones are feet.
        if value > FLIGHT_LEVEL_THRESHOLD and len(digits) <= 3:
            return _altitude(value, "FL", "STD")

    feet_match = _FEET_RE.search(text)
    if feet_match:
        reference = "AGL" if ("AGL" in text or "ABOVE GROUND" in text) else "AMSL"
        return _altitude(int(feet_match.group(1)), "FT", reference)

    return _altitude(0, "FT", "AMSL")
