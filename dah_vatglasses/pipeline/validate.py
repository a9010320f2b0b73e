"""Structural validation of VATGlasses documents.

Validation never raises and never mutates its input. Structural problems are
reported as errors; missing but expected per-record fields as warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

TOP_LEVEL_COLLECTIONS = ("airspace", "positions", "airports")


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def _airspace_warnings(record: Mapping, index: int) -> list[str]:
    warnings = []
    if not record.get("id"):
        warnings.append(f"Airspace at index {index} missing id")
    if not record.get("name"):
        warnings.append(f"Airspace at index {index} missing name")
    if not record.get("boundaries"):
        warnings.append(f"Airspace {record.get('id') or index} has no boundaries")
    return warnings


def _position_warnings(record: Mapping, index: int) -> list[str]:
    warnings = []
    if not record.get("id"):
        warnings.append(f"Position at index {index} missing id")
    if not record.get("callsign"):
        warnings.append(f"Position at index {index} missing callsign")
    if not record.get("frequency"):
        warnings.append(f"Position at index {index} missing frequency")
    return warnings


def _airport_warnings(record: Mapping, index: int) -> list[str]:
    warnings = []
    if not record.get("icao"):
        warnings.append(f"Airport at index {index} missing ICAO code")
    if not record.get("name"):
        warnings.append(f"Airport at index {index} missing name")
    if not record.get("coordinates"):
        warnings.append(f"Airport at index {index} missing coordinates")
    return warnings


RECORD_CHECKS: dict[str, tuple[str, Callable[[Mapping, int], list[str]]]] = {
    "airspace": ("Airspace", _airspace_warnings),
    "positions": ("Position", _position_warnings),
    "airports": ("Airport", _airport_warnings),
}


def validate(data: Any) -> ValidationReport:
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(data, Mapping):
        return ValidationReport(valid=False, errors=["Data must be a JSON object"])

    if all(data.get(key) is None for key in TOP_LEVEL_COLLECTIONS):
        errors.append("Data must contain at least one of: airspace, positions, or airports")

    for key in TOP_LEVEL_COLLECTIONS:
        records = data.get(key)
        if records is None:
            continue
        if not isinstance(records, list):
            errors.append(f"{key} must be an array")
            continue
        label, check = RECORD_CHECKS[key]
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                warnings.append(f"{label} at index {index} is not an object")
                continue
            warnings.extend(check(record, index))

    return ValidationReport(valid=not errors, errors=errors, warnings=warnings)
