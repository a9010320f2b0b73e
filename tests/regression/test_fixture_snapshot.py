from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from dah_vatglasses.pipeline.run import convert_document

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"
FIXED_NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.regression
def test_structured_text_fixture_snapshot_is_stable():
    text = (FIXTURES / "brisbane_dah.txt").read_text(encoding="utf-8")

    output = convert_document(text, now=FIXED_NOW)

    assert output == {
        "airspace": [
            {
                "id": "YBBB/BRISBANE A1",
                "name": "BRISBANE A1",
                "type": "CTA",
                "ceiling": {"value": 245, "unit": "FL", "reference": "STD"},
                "floor": {"value": 180, "unit": "FT", "reference": "AMSL"},
                "boundaries": [
                    {"lat": -33.372917, "lon": 148.372972},
                    {"lat": -34.0, "lon": 150.0},
                    {"lat": -33.5, "lon": 151.0},
                ],
                "conditional": False,
                "frequency": "128.600",
            }
        ],
        "positions": [
            {
                "id": "BRIS",
                "callsign": "BN-BRIS",
                "frequency": "128.600",
                "name": "BRISBANE CENTRE 128.600",
                "type": "FSS",
                "airspace": ["YBBB/BRISBANE A1"],
            }
        ],
        "airports": [],
        "metadata": {
            "generatedAt": "2026-01-01T00:00:00.000Z",
            "source": "Air Services Australia DAH",
            "version": "1.0",
        },
    }


@pytest.mark.regression
def test_csv_fixture_snapshot_is_stable():
    text = (FIXTURES / "sector_points.csv").read_text(encoding="utf-8")

    output = convert_document(text, "csv", now=FIXED_NOW)

    assert output["airspace"] == [
        {
            "id": "SY_C",
            "name": "Sydney, Class C",
            "type": "C",
            "ceiling": {"value": 8500, "unit": "FT", "reference": "AMSL"},
            "floor": {"value": 1500, "unit": "FT", "reference": "AMSL"},
            "boundaries": [
                {"lat": -33.0, "lon": 150.5},
                {"lat": -33.5, "lon": 151.0},
                {"lat": -34.0, "lon": 151.5},
            ],
            "conditional": False,
        },
        {
            "id": "R405",
            "name": "Williamtown",
            "type": "R",
            "ceiling": {"value": 180, "unit": "FT", "reference": "AMSL"},
            "floor": {"value": 0, "unit": "FT", "reference": "AGL"},
            "boundaries": [{"lat": -32.8, "lon": 151.8}],
            "conditional": True,
        },
    ]
    assert output["positions"] == []
