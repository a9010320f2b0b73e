"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from dah_vatglasses.common.constants import (
    DEFAULT_COORDINATE_PRECISION,
    DEFAULT_SOURCE_LABEL,
    POSITION_CODES_BY_NAME,
    POSITION_PREFIX_BY_LOCATION,
    WGS84_EPSG,
)
from dah_vatglasses.common.errors import ConfigError
from dah_vatglasses.common.fs import read_yaml
from dah_vatglasses.common.schema import validate_conversion_config

CONVERSION_CONFIG_FILENAME = "conversion.yml"


@dataclass(frozen=True)
class ConversionTables:
    """Lookup data and options handed to the converter."""

    source_label: str = DEFAULT_SOURCE_LABEL
    coordinate_precision: int = DEFAULT_COORDINATE_PRECISION
    source_epsg: int = WGS84_EPSG
    derive_positions: bool = True
    position_codes: tuple[tuple[str, str], ...] = POSITION_CODES_BY_NAME
    position_prefixes: Mapping[str, str] = field(default_factory=lambda: POSITION_PREFIX_BY_LOCATION)


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def tables_from_config(cfg: dict) -> ConversionTables:
    positions = cfg["positions"]
    return ConversionTables(
        source_label=cfg["source_label"].strip(),
        coordinate_precision=int(cfg.get("coordinate_precision", DEFAULT_COORDINATE_PRECISION)),
        source_epsg=int(cfg.get("crs", {}).get("source_epsg", WGS84_EPSG)),
        derive_positions=positions["derive"],
        position_codes=tuple((str(entry["match"]).upper(), str(entry["code"])) for entry in positions["codes"]),
        position_prefixes=MappingProxyType(
            {str(icao).upper(): str(prefix) for icao, prefix in positions["prefixes"].items()}
        ),
    )


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConversionTables:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONVERSION_CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / CONVERSION_CONFIG_FILENAME, overlay_path)
    return tables_from_config(validate_conversion_config(cfg, allow_unknown=allow_unknown))
