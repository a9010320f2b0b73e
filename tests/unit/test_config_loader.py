from pathlib import Path

import pytest

from dah_vatglasses.common.config_loader import load_config
from dah_vatglasses.common.errors import ConfigError

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


def test_load_config_from_repo_config_dir():
    tables = load_config(CONFIG_DIR)

    assert tables.source_label == "Air Services Australia DAH"
    assert tables.coordinate_precision == 6
    assert tables.source_epsg == 4326
    assert tables.derive_positions is True
    assert ("CORAL", "COL") in tables.position_codes
    assert tables.position_prefixes["YBBB"] == "BN"


def test_load_config_applies_overlay_values(tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "conversion.yml").write_text(
        """source_label: Overlay DAH
positions:
  derive: false
""",
        encoding="utf-8",
    )

    tables = load_config(CONFIG_DIR, overlay_config_dir=overlay)

    assert tables.source_label == "Overlay DAH"
    assert tables.derive_positions is False
    assert tables.position_prefixes["YMMM"] == "ML"


def test_load_config_ignores_empty_overlay(tmp_path: Path):
    (tmp_path / "conversion.yml").write_text("", encoding="utf-8")

    tables = load_config(CONFIG_DIR, overlay_config_dir=tmp_path)

    assert tables.source_label == "Air Services Australia DAH"


def test_load_config_rejects_non_mapping_overlay(tmp_path: Path):
    (tmp_path / "conversion.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(CONFIG_DIR, overlay_config_dir=tmp_path)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="Missing config file"):
        load_config(tmp_path)


def test_load_config_unknown_key(tmp_path: Path):
    (tmp_path / "conversion.yml").write_text(
        """source_label: X
positions: {derive: true, codes: [], prefixes: {}}
colour: blue
""",
        encoding="utf-8",
    )

    with pytest.raises(ConfigError, match="Unknown keys"):
        load_config(tmp_path)

    assert load_config(tmp_path, allow_unknown=True).position_codes == ()


def test_load_config_rejects_bad_precision(tmp_path: Path):
    (tmp_path / "conversion.yml").write_text(
        """source_label: X
coordinate_precision: 42
positions: {derive: true, codes: [], prefixes: {}}
""",
        encoding="utf-8",
    )

    with pytest.raises(ConfigError, match="coordinate_precision"):
        load_config(tmp_path)
