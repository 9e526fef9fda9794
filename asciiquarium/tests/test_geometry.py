"""
Unit tests for grid geometry helpers.
"""

import sys
from pathlib import Path

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from asciiquarium.geometry import cell_origin, clip_rect, footprint_intersects, outside_margin


def test_cell_origin_floors():
    assert cell_origin(np.array([2.9, 0.1])) == (2, 0)
    assert cell_origin(np.array([-0.5, -1.0])) == (-1, -1)
    assert cell_origin(np.array([np.nan, 1.0])) is None
    assert cell_origin(np.array([1.0, -np.inf])) is None


def test_clip_rect_inside_and_partial():
    assert clip_rect(1, 1, 2, 2, 10, 5) == (1, 1, 3, 3)
    assert clip_rect(-1, 0, 3, 1, 4, 1) == (0, 0, 2, 1)
    assert clip_rect(3, 4, 5, 5, 4, 5) == (3, 4, 4, 5)


def test_clip_rect_outside():
    assert clip_rect(4, 0, 2, 1, 4, 1) is None
    assert clip_rect(-2, 0, 2, 1, 4, 1) is None
    assert clip_rect(0, 0, 0, 1, 4, 1) is None
    assert clip_rect(0, 0, 2, 2, 0, 0) is None


def test_footprint_intersects():
    assert footprint_intersects(-2.5, 0.0, 3, 1, 10, 3)
    assert not footprint_intersects(-3.0, 0.0, 3, 1, 10, 3)
    assert not footprint_intersects(10.0, 0.0, 3, 1, 10, 3)
    assert not footprint_intersects(2.0, 3.0, 3, 1, 10, 3)


def test_outside_margin():
    # Touching the margin is still inside
    assert not outside_margin(-5.0, 0.0, 3, 1, 10, 3, 2.0)
    assert outside_margin(-5.5, 0.0, 3, 1, 10, 3, 2.0)
    assert not outside_margin(12.0, 0.0, 3, 1, 10, 3, 2.0)
    assert outside_margin(12.5, 0.0, 3, 1, 10, 3, 2.0)
    assert outside_margin(0.0, 5.5, 3, 1, 10, 3, 2.0)
    assert outside_margin(float('nan'), 0.0, 3, 1, 10, 3, 2.0)
