import copy

from dah_vatglasses.pipeline.validate import validate


def test_empty_object_is_invalid():
    report = validate({})

    assert report.valid is False
    assert report.errors == ["Data must contain at least one of: airspace, positions, or airports"]


def test_non_object_is_invalid():
    assert validate([1, 2]).valid is False


def test_collection_must_be_array():
    report = validate({"airspace": {"id": "A"}})

    assert report.valid is False
    assert "airspace must be an array" in report.errors


def test_missing_fields_are_warnings_only():
    report = validate(
        {
            "airspace": [{"id": "A", "name": "A", "boundaries": []}],
            "positions": [{"id": "P"}],
            "airports": [{"icao": "YBBN", "name": "Brisbane"}, "junk"],
        }
    )

    assert report.valid is True
    assert report.errors == []
    assert report.warnings == [
        "Airspace A has no boundaries",
        "Position at index 0 missing callsign",
        "Position at index 0 missing frequency",
        "Airport at index 0 missing coordinates",
        "Airport at index 1 is not an object",
    ]


def test_complete_document_has_no_findings():
    report = validate(
        {
            "airspace": [{"id": "A", "name": "A", "boundaries": [{"lat": -33.0, "lon": 151.0}]}],
            "positions": [],
            "airports": [],
        }
    )

    assert report.to_dict() == {"valid": True, "errors": [], "warnings": []}


def test_validate_does_not_mutate_input():
    data = {"airspace": [{"name": "No id"}], "positions": None}
    before = copy.deepcopy(data)

    validate(data)

    assert data == before


def test_empty_airspace_record_warns_for_each_missing_field():
    report = validate({"airspace": [{}]})

    assert report.valid is True
    assert report.warnings == [
        "Airspace at index 0 missing id",
        "Airspace at index 0 missing name",
        "Airspace 0 has no boundaries",
    ]
