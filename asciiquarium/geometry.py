"""
Grid geometry helpers for footprint math and clipping.

This module provides small, focused functions with no simulation
state. Continuous positions are projected to cells with floor()
so fractional drift maps to the same cell until a full unit is crossed.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np


def cell_origin(position: np.ndarray) -> Optional[Tuple[int, int]]:
    """
    Floor-project a continuous top-left position to an integer cell.

    Returns None for non-finite positions (such entities are not drawn).
    """
    x = float(position[0])
    y = float(position[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return math.floor(x), math.floor(y)


def clip_rect(
    x0: int, y0: int, w: int, h: int, grid_w: int, grid_h: int
) -> Optional[Tuple[int, int, int, int]]:
    """
    Intersect a footprint with the grid.

    Parameters
    - x0, y0: footprint top-left cell
    - w, h: footprint size
    - grid_w, grid_h: grid size

    Returns
    - (left, top, right, bottom) in grid cells (right/bottom exclusive),
      or None when nothing of the footprint is visible
    """
    left = max(x0, 0)
    top = max(y0, 0)
    right = min(x0 + w, grid_w)
    bottom = min(y0 + h, grid_h)
    if left >= right or top >= bottom:
        return None
    return left, top, right, bottom


def footprint_intersects(x: float, y: float, w: float, h: float, grid_w: float, grid_h: float) -> bool:
    """True when the continuous footprint overlaps [0, grid_w) x [0, grid_h)"""
    return x < grid_w and x + w > 0.0 and y < grid_h and y + h > 0.0


def outside_margin(x: float, y: float, w: float, h: float, grid_w: float, grid_h: float, margin: float) -> bool:
    """
    True when the footprint lies entirely outside the grid grown by margin.

    Non-finite coordinates count as outside.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
        return True
    return (
        x + w < -margin
        or x > grid_w + margin
        or y + h < -margin
        or y > grid_h + margin
    )
