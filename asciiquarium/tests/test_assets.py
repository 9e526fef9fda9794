"""
Test asset table: measuring, lookups, mirroring, glyph cells.
"""

import numpy as np
import pytest

from asciiquarium.assets import (
    AssetTable,
    art_cells,
    default_asset_table,
    get_fish_assets,
    make_art,
    measure_art,
    mirror_art,
    mirror_line,
    normalized_rows,
)
from asciiquarium.data_types import FishArt


def test_measure_single_line():
    """Single-line art measures to its length x 1"""
    assert measure_art("><(((o>") == (7, 1)


def test_measure_multi_line_strips_blank_edges():
    """Leading/trailing blank lines do not count toward height"""
    art = "\n   __\n><(o )___\n ( .__> /\n  `----'\n"
    width, height = measure_art(art)
    print(f"  measured {width}x{height}")
    assert height == 4
    assert width == 9


def test_measure_empty_is_one_by_one():
    assert measure_art("") == (1, 1)


def test_builtin_assets_non_empty():
    """Every built-in fish is at least 1x1 and named"""
    assets = get_fish_assets()
    assert assets
    for art in assets:
        assert art.width >= 1 and art.height >= 1
        assert art.art
        assert art.name.startswith("fish-")
        assert art.category == 'fish'


def test_default_table_has_creatures_and_castle():
    table = default_asset_table()
    for name in ("ship", "shark", "whale", "castle"):
        assert table.named(name) is not None, f"missing {name}"
    assert table.index_of("castle") not in table.fish_indices
    assert len(table.fish_indices) == len(get_fish_assets())


def test_catalog_carries_multi_line_classics():
    by_name = {art.name: art for art in get_fish_assets()}
    for name in ("fish-big", "fish-pair", "fish-lure"):
        assert name in by_name, f"missing {name}"
    assert (by_name["fish-big"].width, by_name["fish-big"].height) == (9, 4)
    assert (by_name["fish-pair"].width, by_name["fish-pair"].height) == (4, 2)
    assert normalized_rows(by_name["fish-lure"])[1] == "q(==)p"

    # Left-facing variants come from mirroring, not separate entries
    assert mirror_art(by_name["fish-small"])[1] == "<')=<"


def test_lookup_never_raises():
    """Unknown indices and names resolve to None"""
    table = AssetTable([make_art("><>", "fish-tiny")])
    assert table.get(0) is not None
    assert table.get(1) is None
    assert table.get(-1) is None
    assert table.get(None) is None
    assert table.get("0") is None
    assert table.named("kraken") is None
    assert table.index_of("kraken") is None


def test_extended_keeps_indices():
    base = AssetTable([make_art("><>", "fish-a")])
    bigger = base.extended([make_art("<><", "fish-b")])
    assert len(base) == 1
    assert len(bigger) == 2
    assert bigger.get(0).name == "fish-a"
    assert bigger.index_of("fish-b") == 1


def test_mirror_line_swaps_directional_glyphs():
    assert mirror_line("><>") == "<><"
    assert mirror_line("><(((o>") == "<o)))><"
    assert mirror_line("/\\[]{}") == "{}[]/\\"


def test_mirror_pads_to_width_before_reversing():
    """Short lines stay right-aligned correctly after mirroring"""
    art = make_art(" __\n><_'>\n   '")
    rows = mirror_art(art)
    assert rows == ["  __ ", "<'_><", " '   "]
    assert all(len(row) == art.width for row in rows)


def test_declared_size_is_authoritative():
    """Longer lines/rows are clipped; shorter ones padded"""
    art = FishArt(art="abcdef\nxy\nextra", width=3, height=2)
    assert normalized_rows(art) == ["abc", "xy "]

    tall = FishArt(art="ab", width=4, height=3)
    assert normalized_rows(tall) == ["ab  ", "    ", "    "]


def test_art_cells_shape_and_read_only():
    art = make_art(" ,\\\n>=('>\n '/")
    cells = art_cells(art)
    mirrored = art_cells(art, True)
    assert cells.shape == (art.height, art.width)
    assert mirrored.shape == cells.shape
    assert not cells.flags.writeable
    with pytest.raises(ValueError):
        cells[0, 0] = 'x'
    # Same object on repeat lookups (cached)
    assert art_cells(art) is cells
    assert ''.join(mirrored[1]) == mirror_line(''.join(cells[1]))


def test_zero_size_art_cells():
    art = FishArt(art="", width=0, height=0)
    assert art_cells(art).shape == (0, 0)
    assert isinstance(art_cells(art), np.ndarray)
