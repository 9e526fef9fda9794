"""
Test the color mapper.

Verifies:
- Run texts join to the plain frame when no mask glyph is present
- Adjacent same-color cells merge; rows end with a newline except the last
- Mask glyphs become background cells in the trail color
- Themes without color (or without a palette) fall back to plain text
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from asciiquarium.color import ColoredRun, render_colored, render_for_theme
from asciiquarium.compositor import render_to_string
from asciiquarium.data_types import GlyphClass, Palette, Theme
from asciiquarium.entity import Bubble, SeaweedStalk, Waterline

from helpers import fish_at, make_state, tiny_assets


PALETTE = Palette(body="#ffffff", water="#0000ff", seaweed="#00ff00", bubble="#00ffff", trail="#111111")


def test_runs_match_plain_frame():
    """Joining run texts reproduces the plain frame"""
    print("=" * 60)
    print("Test: Colored runs")
    print("=" * 60)

    assets = tiny_assets("><>")
    state = make_state((6, 3), [
        Waterline(layer=0, row=0),
        fish_at(0.0, 2.0, vx=1.0),
        Bubble(position=[5.0, 1.0]),
    ])
    runs = render_colored(state, assets, PALETTE)
    for run in runs:
        print(f"  {run.text!r:12} {run.color}")

    assert ''.join(run.text for run in runs) == render_to_string(state, assets)
    assert runs == [
        ColoredRun("~~~~~~\n", PALETTE.water),
        ColoredRun("     ", PALETTE.body),
        ColoredRun(".\n", PALETTE.bubble),
        ColoredRun("><>   ", PALETTE.body),
    ]
    print("[OK] Runs merge per color and rows are newline-terminated\n")


def test_adjacent_runs_never_share_color():
    assets = tiny_assets("><>")
    state = make_state((12, 6), [
        SeaweedStalk(x=2, height=4),
        fish_at(5.0, 3.0, vx=-1.0),
        Waterline(layer=1, row=0),
        Bubble(position=[9.0, 2.0], age=13.0),
    ])
    runs = render_colored(state, assets, PALETTE)
    for a, b in zip(runs, runs[1:]):
        assert a.color != b.color or a.text.endswith("\n")
    assert ''.join(r.text for r in runs) == render_to_string(state, assets)


def test_mask_becomes_trail():
    """'?' hides what is under it and takes the trail color"""
    assets = tiny_assets("xxx", "A?B")
    state = make_state((3, 1), [fish_at(0.0, 0.0, art_index=0), fish_at(0.0, 0.0, art_index=1)])

    runs = render_colored(state, assets, PALETTE)
    assert runs == [
        ColoredRun("A", PALETTE.body),
        ColoredRun(" ", PALETTE.trail),
        ColoredRun("B", PALETTE.body),
    ]
    assert render_to_string(state, assets) == "AxB"


def test_empty_grid_has_no_runs():
    assert render_colored(make_state((0, 5)), tiny_assets(), PALETTE) == []


def test_palette_lookup():
    assert PALETTE.color_for(GlyphClass.WATER) == "#0000ff"
    assert PALETTE.color_for(GlyphClass.TRAIL) == "#111111"


def test_render_for_theme_routing():
    assets = tiny_assets("><>")
    state = make_state((4, 1), [fish_at(0.0, 0.0)])

    plain = render_for_theme(state, assets, Theme())
    assert plain == "><> "

    no_palette = render_for_theme(state, assets, Theme(enable_color=True))
    assert no_palette == "><> "

    disabled = render_for_theme(state, assets, Theme(enable_color=False, palette=PALETTE))
    assert disabled == "><> "

    colored = render_for_theme(state, assets, Theme(enable_color=True, palette=PALETTE))
    assert colored == [ColoredRun("><> ", PALETTE.body)]
