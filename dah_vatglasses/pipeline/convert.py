"""Conversion of the intermediate model into VATGlasses JSON."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from dah_vatglasses.common.config_loader import ConversionTables
from dah_vatglasses.common.constants import AIRSPACE_TYPE_CODES, OUTPUT_VERSION, WGS84_EPSG
from dah_vatglasses.common.errors import ConfigError
from dah_vatglasses.common.ids import generate_id
from dah_vatglasses.common.models import ParsedAirport, ParsedAirspace, ParsedDocument, ParsedPosition
from dah_vatglasses.common.time_utils import utc_timestamp_iso
from dah_vatglasses.parsing.altitude import normalize_altitude

DEFAULT_TABLES = ConversionTables()
PLACEHOLDER_FREQUENCY = "000.000"
DERIVED_POSITION_TYPE = "FSS"

_FALLBACK_CODE_RE = re.compile(r"[A-Z]{3,4}")

PointTransform = Callable[[float, float], tuple[float, float]]


def build_point_transform(source_epsg: int) -> PointTransform | None:
    """Return a ``(lat, lon) -> (lat, lon)`` WGS84 transform, or None for WGS84 sources."""
    if source_epsg == WGS84_EPSG:
        return None
    try:
        transformer = Transformer.from_crs(CRS.from_epsg(source_epsg), CRS.from_epsg(WGS84_EPSG), always_xy=True)
    except CRSError as exc:
        raise ConfigError(f"Unsupported source EPSG code: {source_epsg}") from exc

    def transform(lat: float, lon: float) -> tuple[float, float]:
        transformed_lon, transformed_lat = transformer.transform(lon, lat)
        return transformed_lat, transformed_lon

    return transform


def normalize_airspace_type(value: Any) -> str:
    if not value:
        return "OTHER"
    upper = str(value).upper().strip()
    return AIRSPACE_TYPE_CODES.get(upper, upper)


def _to_float(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def normalize_coordinate(value: Any, precision: int = 6) -> float:
    return round(_to_float(value), precision)


def _point(latitude: Any, longitude: Any, tables: ConversionTables, transform: PointTransform | None) -> dict:
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if transform is not None:
        lat, lon = transform(lat, lon)
    return {
        "lat": normalize_coordinate(lat, tables.coordinate_precision),
        "lon": normalize_coordinate(lon, tables.coordinate_precision),
    }


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _frequency_text(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.3f}"
    return str(value)


def convert_airspace(
    airspace: ParsedAirspace | Mapping[str, Any],
    tables: ConversionTables = DEFAULT_TABLES,
    transform: PointTransform | None = None,
) -> dict:
    if isinstance(airspace, Mapping):
        airspace = ParsedAirspace.from_dict(airspace)

    record: dict[str, Any] = {
        "id": airspace.id or generate_id("AIRSPACE"),
        "name": airspace.name or "Unknown Airspace",
        "type": normalize_airspace_type(airspace.type),
    }
    if airspace.upper_limit:
        record["ceiling"] = normalize_altitude(airspace.upper_limit)
    if airspace.lower_limit:
        record["floor"] = normalize_altitude(airspace.lower_limit)

    record["boundaries"] = [
        _point(point.latitude, point.longitude, tables, transform) for point in airspace.boundaries
    ]
    record["conditional"] = bool(airspace.conditional)

    if airspace.airspace_class:
        record["class"] = airspace.airspace_class
    if airspace.frequency:
        record["frequency"] = _frequency_text(airspace.frequency)
    elif airspace.frequencies:
        record["frequency"] = _frequency_text(airspace.frequencies[0])

    return record


def convert_position(
    position: ParsedPosition | Mapping[str, Any],
    tables: ConversionTables = DEFAULT_TABLES,
    transform: PointTransform | None = None,
) -> dict:
    if isinstance(position, Mapping):
        position = ParsedPosition.from_dict(position)

    record: dict[str, Any] = {
        "id": position.id or generate_id("POS"),
        "callsign": position.callsign or position.name or "UNKNOWN",
        "frequency": _frequency_text(position.frequency) if position.frequency else PLACEHOLDER_FREQUENCY,
        "name": position.name or "Unknown Position",
    }
    if position.type:
        record["type"] = str(position.type).upper()
    if position.latitude not in (None, "") and position.longitude not in (None, ""):
        record["coordinates"] = _point(position.latitude, position.longitude, tables, transform)
    if position.airspace:
        record["airspace"] = _as_list(position.airspace)
    return record


def convert_airport(
    airport: ParsedAirport | Mapping[str, Any],
    tables: ConversionTables = DEFAULT_TABLES,
    transform: PointTransform | None = None,
) -> dict:
    if isinstance(airport, Mapping):
        airport = ParsedAirport.from_dict(airport)

    record: dict[str, Any] = {
        "icao": airport.icao or airport.code,
        "name": airport.name or "Unknown Airport",
        "coordinates": _point(airport.latitude, airport.longitude, tables, transform),
    }
    if airport.elevation is not None:
        record["elevation"] = airport.elevation
    if airport.runways:
        record["runways"] = airport.runways
    if airport.positions:
        record["ownership"] = _as_list(airport.positions)
    return record


def extract_position_code(airspace: ParsedAirspace, codes: Iterable[tuple[str, str]]) -> str | None:
    """Map an airspace name onto a position code, falling back to its first 3-4 letter word."""
    text = (airspace.name or airspace.id or "").upper()
    for needle, code in codes:
        if needle in text:
            return code
    fallback = _FALLBACK_CODE_RE.search(text)
    return fallback.group(0) if fallback else None


def position_callsign_prefix(locations: tuple[str, ...], code: str, prefixes: Mapping[str, str]) -> str:
    if not locations:
        return code
    location = locations[0]
    prefix = prefixes.get(location) or location[1:3].upper()
    return f"{prefix}-{code}"


def derive_positions(
    pairs: Iterable[tuple[ParsedAirspace, dict]],
    tables: ConversionTables,
    taken_ids: set[str],
) -> list[dict]:
    """Build FSS positions for airspaces that carry a controlling authority and frequency."""
    derived: dict[str, dict] = {}
    for airspace, record in pairs:
        if not airspace.controlling_authority or not airspace.frequencies:
            continue
        code = extract_position_code(airspace, tables.position_codes)
        if code is None or code in taken_ids:
            continue
        position = derived.get(code)
        if position is None:
            derived[code] = {
                "id": code,
                "callsign": position_callsign_prefix(airspace.locations, code, tables.position_prefixes),
                "frequency": _frequency_text(airspace.frequencies[0]),
                "name": airspace.controlling_authority,
                "type": DERIVED_POSITION_TYPE,
                "airspace": [record["id"]],
            }
        elif record["id"] not in position["airspace"]:
            position["airspace"].append(record["id"])
    return list(derived.values())


def convert(
    document: ParsedDocument,
    tables: ConversionTables = DEFAULT_TABLES,
    *,
    now: datetime | None = None,
) -> dict:
    transform = build_point_transform(tables.source_epsg)

    airspace_records = [convert_airspace(airspace, tables, transform) for airspace in document.airspaces]
    positions = [convert_position(position, tables, transform) for position in document.positions]
    airports = [convert_airport(airport, tables, transform) for airport in document.airports]

    if tables.derive_positions:
        taken_ids = {position["id"] for position in positions}
        positions.extend(derive_positions(zip(document.airspaces, airspace_records), tables, taken_ids))

    return {
        "airspace": airspace_records,
        "positions": positions,
        "airports": airports,
        "metadata": {
            "generatedAt": utc_timestamp_iso(now),
            "source": document.source or tables.source_label,
            "version": OUTPUT_VERSION,
        },
    }
