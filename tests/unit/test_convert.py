import re
from datetime import datetime, timezone

import pytest
from pyproj import Transformer

from dah_vatglasses.common.config_loader import ConversionTables
from dah_vatglasses.common.errors import ConfigError
from dah_vatglasses.common.models import Boundary, DetectedFormat, ParsedAirspace, ParsedDocument, ParsedPosition
from dah_vatglasses.pipeline.convert import (
    build_point_transform,
    convert,
    convert_airport,
    convert_airspace,
    convert_position,
    extract_position_code,
    normalize_airspace_type,
    position_callsign_prefix,
)
from dah_vatglasses.pipeline.validate import validate

GENERATED_ID_RE = re.compile(r"^AIRSPACE_[0-9A-Z]+_[0-9A-Z]{5}$")


def _brisbane() -> ParsedAirspace:
    return ParsedAirspace(
        id="YBBB/BRISBANE A1",
        name="BRISBANE A1",
        type="CTA",
        locations=("YBBB",),
        boundaries=(Boundary(-33.3729166667, 148.3729722222), Boundary(-34.0, 150.0)),
        upper_limit="FL245",
        lower_limit="FL180",
        controlling_authority="BRISBANE CENTRE 128.600",
        frequencies=(128.6,),
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("CLASS C", "C"),
        ("class a", "A"),
        ("Control Zone", "CTR"),
        ("RESTRICTED", "R"),
        ("PROHIBITED", "P"),
        ("TMA", "TMA"),
        (None, "OTHER"),
        ("", "OTHER"),
        ("glider area", "GLIDER AREA"),
    ],
)
def test_normalize_airspace_type(raw, expected):
    assert normalize_airspace_type(raw) == expected


def test_convert_airspace_shapes_the_record():
    record = convert_airspace(_brisbane())

    assert record == {
        "id": "YBBB/BRISBANE A1",
        "name": "BRISBANE A1",
        "type": "CTA",
        "ceiling": {"value": 245, "unit": "FL", "reference": "STD"},
        "floor": {"value": 180, "unit": "FT", "reference": "AMSL"},
        "boundaries": [{"lat": -33.372917, "lon": 148.372972}, {"lat": -34.0, "lon": 150.0}],
        "conditional": False,
        "frequency": "128.600",
    }


def test_convert_airspace_generates_missing_id():
    record = convert_airspace(ParsedAirspace(id=None, name=None))

    assert GENERATED_ID_RE.match(record["id"])
    assert record["name"] == "Unknown Airspace"
    assert record["type"] == "OTHER"
    assert record["boundaries"] == []
    assert "ceiling" not in record
    assert "floor" not in record


def test_convert_airspace_is_idempotent_on_its_own_output():
    once = convert_airspace(_brisbane())
    assert convert_airspace(once) == once


def test_convert_airspace_keeps_class_and_zeroes_bad_coordinates():
    record = convert_airspace(
        {
            "id": "X",
            "name": "X",
            "class": "C",
            "frequency": 118.1,
            "conditional": True,
            "boundaries": [{"latitude": "abc", "longitude": float("nan")}],
        }
    )

    assert record["class"] == "C"
    assert record["frequency"] == "118.100"
    assert record["conditional"] is True
    assert record["boundaries"] == [{"lat": 0.0, "lon": 0.0}]


def test_convert_position_defaults():
    record = convert_position({})

    assert record["id"].startswith("POS_")
    assert record["callsign"] == "UNKNOWN"
    assert record["frequency"] == "000.000"
    assert record["name"] == "Unknown Position"
    assert "coordinates" not in record
    assert "airspace" not in record


def test_convert_position_full_record():
    record = convert_position(
        {
            "id": "BRIS",
            "callsign": "BN-BRIS",
            "frequency": 128.6,
            "name": "Brisbane Centre",
            "type": "fss",
            "latitude": -27.4,
            "longitude": 153.0,
            "airspace": "YBBB/BRISBANE A1",
        }
    )

    assert record == {
        "id": "BRIS",
        "callsign": "BN-BRIS",
        "frequency": "128.600",
        "name": "Brisbane Centre",
        "type": "FSS",
        "coordinates": {"lat": -27.4, "lon": 153.0},
        "airspace": ["YBBB/BRISBANE A1"],
    }


def test_convert_airport_uses_code_and_always_has_coordinates():
    record = convert_airport({"code": "YBBN", "elevation": 13, "ownership": ["BRIS"]})

    assert record == {
        "icao": "YBBN",
        "name": "Unknown Airport",
        "coordinates": {"lat": 0.0, "lon": 0.0},
        "elevation": 13,
        "ownership": ["BRIS"],
    }


def test_extract_position_code_table_then_fallback():
    codes = ConversionTables().position_codes

    assert extract_position_code(ParsedAirspace(id="a", name="CORAL SEA CTA"), codes) == "COL"
    assert extract_position_code(ParsedAirspace(id="a", name="INDIAN EAST HIGH"), codes) == "INE"
    assert extract_position_code(ParsedAirspace(id="a", name="INDIAN OCEAN"), codes) == "IND"
    assert extract_position_code(ParsedAirspace(id="a", name="BRISBANE A1"), codes) == "BRIS"
    assert extract_position_code(ParsedAirspace(id="a", name="12 34"), codes) is None


def test_position_callsign_prefix():
    prefixes = ConversionTables().position_prefixes

    assert position_callsign_prefix(("YBBB",), "BRIS", prefixes) == "BN-BRIS"
    assert position_callsign_prefix(("YXYZ",), "ABC", prefixes) == "XY-ABC"
    assert position_callsign_prefix((), "ABC", prefixes) == "ABC"


def test_convert_derives_one_position_per_code():
    second = ParsedAirspace(
        id="YBBB/BRISBANE A2",
        name="BRISBANE A2",
        boundaries=(Boundary(-27.0, 153.0),),
        controlling_authority="BRISBANE CENTRE",
        frequencies=(133.2,),
    )
    document = ParsedDocument(format=DetectedFormat.STRUCTURED_TEXT, airspaces=(_brisbane(), second))

    output = convert(document)

    assert output["positions"] == [
        {
            "id": "BRIS",
            "callsign": "BN-BRIS",
            "frequency": "128.600",
            "name": "BRISBANE CENTRE 128.600",
            "type": "FSS",
            "airspace": ["YBBB/BRISBANE A1", "YBBB/BRISBANE A2"],
        }
    ]


def test_convert_does_not_shadow_declared_positions():
    document = ParsedDocument(
        format=DetectedFormat.JSON,
        airspaces=(_brisbane(),),
        positions=(ParsedPosition(id="BRIS", callsign="BN-BRIS", frequency="128.600"),),
    )

    output = convert(document)

    assert [position["id"] for position in output["positions"]] == ["BRIS"]
    assert "type" not in output["positions"][0]


def test_convert_without_derived_positions():
    document = ParsedDocument(format=DetectedFormat.STRUCTURED_TEXT, airspaces=(_brisbane(),))
    assert convert(document, ConversionTables(derive_positions=False))["positions"] == []


def test_convert_metadata():
    document = ParsedDocument(format=DetectedFormat.CSV, source="Test DAH")

    output = convert(document, now=datetime(2026, 1, 1, 12, 30, tzinfo=timezone.utc))

    assert output == {
        "airspace": [],
        "positions": [],
        "airports": [],
        "metadata": {"generatedAt": "2026-01-01T12:30:00.000Z", "source": "Test DAH", "version": "1.0"},
    }


def test_coordinate_transform_from_non_wgs84():
    transformer = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
    x, y = transformer.transform(151.2, -33.9)

    tables = ConversionTables(source_epsg=3857)
    record = convert_airspace(
        ParsedAirspace(id="A", name="A", boundaries=(Boundary(latitude=y, longitude=x),)),
        tables,
        build_point_transform(tables.source_epsg),
    )

    point = record["boundaries"][0]
    assert abs(point["lat"] - (-33.9)) < 1e-5
    assert abs(point["lon"] - 151.2) < 1e-5


def test_wgs84_source_needs_no_transform():
    assert build_point_transform(4326) is None


def test_unknown_epsg_is_a_config_error():
    with pytest.raises(ConfigError):
        build_point_transform(999999)


def test_reconverting_a_full_output_array_stays_valid():
    document = ParsedDocument(format=DetectedFormat.STRUCTURED_TEXT, airspaces=(_brisbane(),))
    first = convert(document)

    again = [convert_airspace(record) for record in first["airspace"]]

    assert again == first["airspace"]
    assert validate({"airspace": again}).warnings == []
