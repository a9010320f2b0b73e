"""JSON airspace documents, including previously converted VATGlasses output."""

from __future__ import annotations

import json
from collections.abc import Mapping

from dah_vatglasses.common.errors import FormatError
from dah_vatglasses.common.models import (
    DetectedFormat,
    ParsedAirport,
    ParsedAirspace,
    ParsedDocument,
    ParsedPosition,
)

AIRSPACE_KEYS = ("airspaces", "airspace")
COLLECTION_KEYS = ("positions", "airports")


def _records(value) -> list[Mapping]:
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, Mapping)]
    return []


def parse_json(content: str) -> ParsedDocument:
    try:
        payload = json.loads(content)
    except ValueError as exc:
        raise FormatError(f"Invalid JSON document: {exc}") from exc

    positions: list[Mapping] = []
    airports: list[Mapping] = []

    if isinstance(payload, list):
        airspaces = _records(payload)
    elif isinstance(payload, Mapping):
        key = next((name for name in AIRSPACE_KEYS if name in payload), None)
        if key is not None:
            airspaces = _records(payload[key])
        elif any(name in payload for name in COLLECTION_KEYS):
            airspaces = []
        else:
            airspaces = [payload]
        positions = _records(payload.get("positions"))
        airports = _records(payload.get("airports"))
    else:
        airspaces = []

    return ParsedDocument(
        format=DetectedFormat.JSON,
        airspaces=tuple(ParsedAirspace.from_dict(record) for record in airspaces),
        positions=tuple(ParsedPosition.from_dict(record) for record in positions),
        airports=tuple(ParsedAirport.from_dict(record) for record in airports),
    )
