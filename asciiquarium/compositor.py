"""
Grid compositor.

Rasterizes the entity collection into a (height, width) glyph array.
Entities are painted in collection order (later entries on top), each
footprint is floor-projected, mirrored for leftward motion, and clipped to
the grid. Spaces in art are always transparent; the mask glyph is
transparent here and opaque ("trail") only in the colored path.

The same pass also records a glyph class per cell, which the color mapper
turns into styled runs.
"""

import math
from functools import lru_cache
from typing import List, Tuple

import numpy as np

from .assets import AssetTable, art_cells, text_cells
from .constants import (
    BACKGROUND_GLYPH,
    BUBBLE_GLYPHS,
    BUBBLE_GROW_AGE,
    MASK_GLYPH,
    TRANSPARENT_GLYPH,
    WATERLINE_SEGMENTS,
)
from .data_types import GlyphClass
from .entity import EntityKind
from .geometry import cell_origin, clip_rect
from .state import AquariumState


# ============================================================================
# Blitting
# ============================================================================

def blit(
    chars: np.ndarray,
    classes: np.ndarray,
    cells: np.ndarray,
    x0: int,
    y0: int,
    glyph_class: GlyphClass,
    opaque_mask: bool = False
):
    """
    Paint a glyph block at (x0, y0), keeping only the part inside the grid.

    Parameters
    - chars, classes: (H, W) destination arrays, modified in place
    - cells: (h, w) source glyphs
    - x0, y0: top-left cell of the block (may be negative or past the grid)
    - glyph_class: class written for every opaque source cell
    - opaque_mask: draw mask glyphs as background-colored TRAIL cells
      instead of leaving them see-through
    """
    grid_h, grid_w = chars.shape
    h, w = cells.shape
    rect = clip_rect(x0, y0, w, h, grid_w, grid_h)
    if rect is None:
        return
    left, top, right, bottom = rect

    src = cells[top - y0:bottom - y0, left - x0:right - x0]
    dst_chars = chars[top:bottom, left:right]
    dst_classes = classes[top:bottom, left:right]

    solid = (src != TRANSPARENT_GLYPH) & (src != MASK_GLYPH)
    dst_chars[solid] = src[solid]
    dst_classes[solid] = glyph_class

    if opaque_mask:
        trail = src == MASK_GLYPH
        dst_chars[trail] = BACKGROUND_GLYPH
        dst_classes[trail] = GlyphClass.TRAIL


# ============================================================================
# Procedural Glyphs
# ============================================================================

def bubble_glyph(age: float) -> str:
    """'.' -> 'o' -> 'O' as the bubble ages"""
    if not math.isfinite(age) or age < 0.0:
        return BUBBLE_GLYPHS[0]
    stage = int(age // BUBBLE_GROW_AGE)
    return BUBBLE_GLYPHS[min(stage, len(BUBBLE_GLYPHS) - 1)]


@lru_cache(maxsize=8)
def _glyph_cell(glyph: str) -> np.ndarray:
    return text_cells([glyph], 1)


def seaweed_rows(height: int, frame: int) -> List[str]:
    """
    Stalk rows for one sway frame.

    Rows alternate ' (' and ')' top to bottom; the other frame swaps them.
    """
    return [' (' if row % 2 == frame else ') ' for row in range(height)]


@lru_cache(maxsize=64)
def _seaweed_cells(height: int, frame: int) -> np.ndarray:
    return text_cells(seaweed_rows(height, frame), 2)


def waterline_row(layer: int, width: int, offset: int) -> str:
    """Layer pattern tiled across `width` columns, scrolled by `offset`"""
    segment = WATERLINE_SEGMENTS[layer % len(WATERLINE_SEGMENTS)]
    offset %= len(segment)
    repeat = (width + offset) // len(segment) + 1
    return (segment * repeat)[offset:offset + width]


@lru_cache(maxsize=64)
def _waterline_cells(layer: int, width: int, offset: int) -> np.ndarray:
    return text_cells([waterline_row(layer, width, offset)], width)


def _phase_step(phase: float) -> int:
    """floor(phase), with non-finite phases pinned to 0"""
    return math.floor(phase) if math.isfinite(phase) else 0


# ============================================================================
# Per-kind Drawing
# ============================================================================

def _draw_fish(chars, classes, assets: AssetTable, fish, opaque_mask: bool):
    art = assets.get(fish.art_index)
    origin = cell_origin(fish.position)
    if art is None or origin is None:
        return
    blit(chars, classes, art_cells(art, fish.facing_left), origin[0], origin[1],
         GlyphClass.BODY, opaque_mask)


def _draw_creature(chars, classes, assets: AssetTable, creature, opaque_mask: bool):
    if not creature.visible:
        return
    art = assets.named(creature.art_name)
    origin = cell_origin(creature.position)
    if art is None or origin is None:
        return
    blit(chars, classes, art_cells(art, creature.facing_left), origin[0], origin[1],
         GlyphClass.BODY, opaque_mask)


def _draw_castle(chars, classes, assets: AssetTable, castle, opaque_mask: bool):
    art = assets.named(castle.art_name)
    origin = cell_origin(castle.position)
    if art is None or origin is None:
        return
    blit(chars, classes, art_cells(art), origin[0], origin[1], GlyphClass.BODY, opaque_mask)


def _draw_bubble(chars, classes, assets: AssetTable, bubble, opaque_mask: bool):
    origin = cell_origin(bubble.position)
    if origin is None:
        return
    blit(chars, classes, _glyph_cell(bubble_glyph(bubble.age)), origin[0], origin[1],
         GlyphClass.BUBBLE, opaque_mask)


def _draw_seaweed(chars, classes, assets: AssetTable, stalk, opaque_mask: bool):
    height = max(int(stalk.height), 0)
    if height == 0:
        return
    frame = _phase_step(stalk.phase) % 2
    grid_h = chars.shape[0]
    blit(chars, classes, _seaweed_cells(height, frame), int(stalk.x), grid_h - height,
         GlyphClass.SEAWEED, opaque_mask)


def _draw_waterline(chars, classes, assets: AssetTable, waterline, opaque_mask: bool):
    grid_w = chars.shape[1]
    cells = _waterline_cells(int(waterline.layer), grid_w, _phase_step(waterline.phase))
    blit(chars, classes, cells, 0, int(waterline.row), GlyphClass.WATER, opaque_mask)


_DRAWERS = {
    EntityKind.FISH: _draw_fish,
    EntityKind.SCHOOL_MEMBER: _draw_fish,
    EntityKind.SHIP: _draw_creature,
    EntityKind.SHARK: _draw_creature,
    EntityKind.WHALE: _draw_creature,
    EntityKind.BUBBLE: _draw_bubble,
    EntityKind.SEAWEED: _draw_seaweed,
    EntityKind.WATERLINE: _draw_waterline,
    EntityKind.CASTLE: _draw_castle,
}


# ============================================================================
# Public API
# ============================================================================

def composite(state: AquariumState, assets: AssetTable, opaque_mask: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    Paint every entity into fresh glyph and class arrays.

    Returns:
        (chars, classes): (H, W) '<U1' glyphs and int8 GlyphClass values;
        both (0, 0) when either grid dimension is non-positive
    """
    width, height = state.width, state.height
    if width == 0 or height == 0:
        return np.empty((0, 0), dtype='<U1'), np.empty((0, 0), dtype=np.int8)

    chars = np.full((height, width), BACKGROUND_GLYPH, dtype='<U1')
    classes = np.full((height, width), GlyphClass.BODY, dtype=np.int8)
    for entity in state.entities:
        _DRAWERS[entity.kind](chars, classes, assets, entity, opaque_mask)
    return chars, classes


def render(state: AquariumState, assets: AssetTable) -> np.ndarray:
    """(height, width) glyph grid for the plain path"""
    chars, _ = composite(state, assets)
    return chars


def render_lines(state: AquariumState, assets: AssetTable) -> List[str]:
    """Grid rows as strings of exactly `width` characters"""
    return [''.join(row) for row in render(state, assets)]


def render_to_string(state: AquariumState, assets: AssetTable) -> str:
    """Grid as `height` newline-joined lines ('' for an empty grid)"""
    return '\n'.join(render_lines(state, assets))
