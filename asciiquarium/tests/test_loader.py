"""
Test data loading: YAML -> dataclasses with schema validation.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from asciiquarium.assets import normalized_rows
from asciiquarium.loader import (
    DataLoadError,
    load_all_data,
    load_aquarium,
    load_asset_pack,
    load_theme,
    load_yaml,
)

DATA_ROOT = Path(__file__).parent.parent.parent / "data"
SCHEMA_DIR = Path(__file__).parent.parent.parent / "schemas"


def test_load_aquarium():
    """Aquarium definition with simulation tunables"""
    aquarium = load_aquarium(DATA_ROOT / "aquarium.yaml", SCHEMA_DIR)

    print(f"[OK] Loaded aquarium: {aquarium['name']} ({aquarium['aquarium_id']})")
    print(f"  Grid: {aquarium['size'][0]}x{aquarium['size'][1]}, dt={aquarium['dt']}")

    assert aquarium['aquarium_id'] == "aq-default"
    assert aquarium['size'] == (80, 24)
    assert aquarium['dt'] == 1.0
    config = aquarium['config']
    assert config.seed == 12345
    assert config.fish_count == 4
    assert config.school_count == 1
    assert config.respawn_delay_range == [20, 80]
    assert aquarium['theme_file'] == "themes/deep_sea.yaml"


def test_load_themes():
    deep_sea = load_theme(DATA_ROOT / "themes" / "deep_sea.yaml", SCHEMA_DIR)
    assert deep_sea.enable_color
    assert deep_sea.palette is not None
    assert deep_sea.palette.water == "#00aaff"
    assert deep_sea.background == "#080c10"
    assert deep_sea.wrap is False

    mono = load_theme(DATA_ROOT / "themes" / "mono.yaml", SCHEMA_DIR)
    assert not mono.enable_color
    assert mono.background is None


def test_load_asset_pack():
    arts = load_asset_pack(DATA_ROOT / "assets" / "extra_fish.yaml", SCHEMA_DIR)
    by_name = {art.name: art for art in arts}
    print(f"[OK] Loaded {len(arts)} assets: {', '.join(by_name)}")

    angler = by_name["fish-angler"]
    assert (angler.width, angler.height) == (6, 3)
    assert angler.art.split("\n")[1] == "q(==)p"

    long_fish = by_name["fish-long"]
    assert (long_fish.width, long_fish.height) == (10, 4)

    # Declared size wins over the measured one
    declared = by_name["fish-wide-declared"]
    assert (declared.width, declared.height) == (6, 1)
    assert normalized_rows(declared) == ["><((('"]


def test_load_all_data():
    """Complete data pack: built-in catalog plus asset packs"""
    data = load_all_data(DATA_ROOT, SCHEMA_DIR)

    assets = data['assets']
    assert data['size'] == (80, 24)
    assert data['theme'].enable_color
    assert assets.named("fish-angler") is not None
    assert assets.named("ship") is not None
    assert assets.index_of("fish-angler") in assets.fish_indices
    print(f"[OK] Loaded {len(assets)} assets ({len(assets.fish_indices)} fish)")


def test_missing_file(tmp_path):
    with pytest.raises(DataLoadError, match="File not found"):
        load_yaml(tmp_path / "nope.yaml")


def test_bad_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("grid: [80, 24\n")
    with pytest.raises(DataLoadError, match="YAML parse error"):
        load_yaml(path)


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(DataLoadError):
        load_yaml(path)


def test_schema_violation_theme(tmp_path):
    path = tmp_path / "theme.yaml"
    path.write_text("enable_color: true\npalette:\n  body: red\n")
    with pytest.raises(DataLoadError, match="Validation error"):
        load_theme(path, SCHEMA_DIR)


def test_schema_violation_aquarium(tmp_path):
    path = tmp_path / "aquarium.yaml"
    path.write_text(
        "aquarium_id: aq-bad\n"
        "grid: {width: 10, height: 5}\n"
        "simulation:\n"
        "  warp_speed: 9\n"
    )
    with pytest.raises(DataLoadError, match="Validation error"):
        load_aquarium(path, SCHEMA_DIR)


def test_empty_art_skipped(tmp_path):
    path = tmp_path / "pack.yaml"
    path.write_text(
        "pack_id: sparse\n"
        "assets:\n"
        "  - name: fish-ghost\n"
        "    art: \"   \"\n"
        "  - name: fish-dot\n"
        "    art: \"o\"\n"
    )
    arts = load_asset_pack(path)
    assert [art.name for art in arts] == ["fish-dot"]
