"""Intermediate data model shared by every parsing strategy and the converter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from dah_vatglasses.common.constants import DEFAULT_SOURCE_LABEL, TRUE_FLAGS


def _safe_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _safe_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _listed(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return [value]
    return []


def parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_FLAGS
    return bool(value)


def _coordinates_of(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    coordinates = payload.get("coordinates")
    return coordinates if isinstance(coordinates, Mapping) else {}


class DetectedFormat(str, Enum):
    CSV = "csv"
    STRUCTURED_TEXT = "structured_text"
    JSON = "json"
    GENERIC = "generic"


@dataclass(frozen=True)
class Boundary:
    latitude: float
    longitude: float
    sequence: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Boundary":
        latitude = payload.get("latitude", payload.get("lat"))
        longitude = payload.get("longitude", payload.get("lon"))
        return cls(latitude=latitude, longitude=longitude, sequence=_safe_int(payload.get("sequence")))


@dataclass(frozen=True)
class ParsedAirspace:
    id: str | None
    name: str | None
    type: str | None = None
    locations: tuple[str, ...] = ()
    boundaries: tuple[Boundary, ...] = ()
    upper_limit: Any = None
    lower_limit: Any = None
    controlling_authority: str | None = None
    frequencies: tuple[float, ...] = ()
    hours_of_operation: str | None = None
    conditional: bool = False
    airspace_class: str | None = None
    frequency: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ParsedAirspace":
        """Build a record from a loosely shaped mapping.

        Accepts both the intermediate key names (``upperLimit``, ``latitude``)
        and the VATGlasses output names (``ceiling``, ``lat``), so converted
        output can be fed back in.
        """
        boundaries = tuple(
            Boundary.from_dict(point)
            for point in _listed(payload.get("boundaries"))
            if isinstance(point, Mapping)
        )
        frequencies = _listed(payload.get("frequencies"))
        return cls(
            id=payload.get("id"),
            name=payload.get("name"),
            type=payload.get("type"),
            locations=tuple(str(location) for location in _listed(payload.get("locations"))),
            boundaries=boundaries,
            upper_limit=payload.get("upperLimit", payload.get("ceiling")),
            lower_limit=payload.get("lowerLimit", payload.get("floor")),
            controlling_authority=payload.get("controllingAuthority"),
            frequencies=tuple(value for value in (_safe_float(item) for item in frequencies) if value is not None),
            hours_of_operation=payload.get("hoursOfOperation"),
            conditional=parse_flag(payload.get("conditional", False)),
            airspace_class=payload.get("class"),
            frequency=payload.get("frequency"),
        )


@dataclass(frozen=True)
class ParsedPosition:
    id: str | None = None
    callsign: str | None = None
    frequency: str | None = None
    name: str | None = None
    type: str | None = None
    latitude: Any = None
    longitude: Any = None
    airspace: Any = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ParsedPosition":
        coordinates = _coordinates_of(payload)
        return cls(
            id=payload.get("id"),
            callsign=payload.get("callsign"),
            frequency=payload.get("frequency"),
            name=payload.get("name"),
            type=payload.get("type"),
            latitude=payload.get("latitude", coordinates.get("lat")),
            longitude=payload.get("longitude", coordinates.get("lon")),
            airspace=payload.get("airspace"),
        )


@dataclass(frozen=True)
class ParsedAirport:
    icao: str | None = None
    code: str | None = None
    name: str | None = None
    latitude: Any = None
    longitude: Any = None
    elevation: Any = None
    runways: Any = None
    positions: Any = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ParsedAirport":
        coordinates = _coordinates_of(payload)
        return cls(
            icao=payload.get("icao"),
            code=payload.get("code"),
            name=payload.get("name"),
            latitude=payload.get("latitude", coordinates.get("lat")),
            longitude=payload.get("longitude", coordinates.get("lon")),
            elevation=payload.get("elevation"),
            runways=payload.get("runways"),
            positions=payload.get("positions", payload.get("ownership")),
        )


@dataclass(frozen=True)
class ParsedDocument:
    format: DetectedFormat
    airspaces: tuple[ParsedAirspace, ...] = ()
    positions: tuple[ParsedPosition, ...] = ()
    airports: tuple[ParsedAirport, ...] = ()
    source: str = DEFAULT_SOURCE_LABEL
    warnings: tuple[str, ...] = ()
