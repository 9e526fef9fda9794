"""
Shared builders for asciiquarium tests.

Small hand-built states keep each test's geometry obvious: a tiny asset
table, bubbles switched off unless a test turns them on.
"""

from typing import List, Optional, Tuple

from asciiquarium.assets import AssetTable, make_art
from asciiquarium.data_types import SimulationConfig
from asciiquarium.entity import Fish
from asciiquarium.state import AquariumState


def tiny_assets(*arts: str) -> AssetTable:
    """Asset table of fish arts (default: a single '><>')"""
    arts = arts or ("><>",)
    return AssetTable([make_art(art, f"fish-{i}", 'fish') for i, art in enumerate(arts)])


def quiet_config(**overrides) -> SimulationConfig:
    """Config with bubbles and jitter disabled"""
    values = dict(bubble_interval=0.0, jitter_amplitude=0.0)
    values.update(overrides)
    return SimulationConfig(**values)


def make_state(
    size: Tuple[int, int],
    entities: Optional[List] = None,
    config: Optional[SimulationConfig] = None
) -> AquariumState:
    return AquariumState(size=size, entities=list(entities or []), config=config or quiet_config())


def fish_at(x: float, y: float, vx: float = 0.0, vy: float = 0.0, art_index: int = 0) -> Fish:
    return Fish(art_index=art_index, position=[x, y], velocity=[vx, vy])
