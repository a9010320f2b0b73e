"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from dah_vatglasses.common.errors import ConfigError

CONVERSION_REQUIRED_KEYS = {"source_label", "positions"}
CONVERSION_KNOWN_KEYS = CONVERSION_REQUIRED_KEYS | {"coordinate_precision", "crs"}


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_conversion_config(cfg, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "conversion config")
    _assert_required_keys(cfg, CONVERSION_REQUIRED_KEYS, "conversion config")
    _assert_no_unknown_keys(cfg, CONVERSION_KNOWN_KEYS, "conversion config", allow_unknown)

    if not isinstance(cfg["source_label"], str) or not cfg["source_label"].strip():
        raise ConfigError("source_label must be a non-empty string")

    precision = cfg.get("coordinate_precision", 6)
    if isinstance(precision, bool) or not isinstance(precision, int) or not 0 <= precision <= 10:
        raise ConfigError("coordinate_precision must be an integer between 0 and 10")

    crs = cfg.get("crs", {})
    _assert_mapping(crs, "crs")
    epsg = crs.get("source_epsg", 4326)
    if isinstance(epsg, bool) or not isinstance(epsg, int):
        raise ConfigError("crs.source_epsg must be an integer EPSG code")

    positions = cfg["positions"]
    _assert_mapping(positions, "positions")
    _assert_required_keys(positions, {"derive", "codes", "prefixes"}, "positions")
    if not isinstance(positions["derive"], bool):
        raise ConfigError("positions.derive must be true or false")
    if not isinstance(positions["codes"], list):
        raise ConfigError("positions.codes must be a list")
    for idx, entry in enumerate(positions["codes"]):
        _assert_mapping(entry, f"positions.codes[{idx}]")
        _assert_required_keys(entry, {"match", "code"}, f"positions.codes[{idx}]")
    _assert_mapping(positions["prefixes"], "positions.prefixes")

    return cfg
