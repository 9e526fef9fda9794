"""
Entity spawning system.

Builds fish, schools, large creatures and environment decorations with
deterministic placement. Every random value comes from state.rng, drawn in
the order documented on each function, so a given seed always builds the
same aquarium.
"""

import math
from typing import List, Optional, Tuple, Type

from .assets import AssetTable
from .constants import (
    FISH_AREA_PER_FISH,
    FISH_MIN_SPEED,
    SCHOOL_SPACING,
    SEAWEED_COLUMNS_PER_STALK,
    SEAWEED_HEIGHT_RANGE,
    SEAWEED_SWAY_RANGE,
    WATERLINE_DRIFT_RATE,
    WATERLINE_SEGMENTS,
)
from .data_types import SimulationConfig
from .entity import (
    Castle,
    Creature,
    CreatureState,
    Edge,
    EntityKind,
    Fish,
    SchoolMember,
    SeaweedStalk,
    Shark,
    Ship,
    Waterline,
    Whale,
)
from .state import AquariumState


def new_aquarium(
    size: Tuple[int, int],
    assets: AssetTable,
    config: Optional[SimulationConfig] = None,
    populated: bool = True
) -> AquariumState:
    """
    Create an aquarium state, optionally populated with the default scene.

    Args:
        size: Grid (width, height)
        assets: Asset table used for footprints
        config: Simulation tunables (defaults if None)
        populated: Build environment, fish, a school and creatures

    Returns:
        New AquariumState seeded from config.seed
    """
    state = AquariumState(size=size, config=config or SimulationConfig())
    if populated:
        populate(state, assets)
    return state


def populate(state: AquariumState, assets: AssetTable) -> AquariumState:
    """
    Fill a state with the default scene, back to front.

    Z-order: castle, seaweed, fish, schools, waterlines, ship, whale, shark.
    Creatures start offscreen with a drawn respawn delay so they arrive
    one at a time.
    """
    config = state.config

    castle = spawn_castle(state, assets)
    if castle is not None:
        state.add(castle)

    for _ in range(max(1, state.width // SEAWEED_COLUMNS_PER_STALK)):
        state.add(spawn_seaweed(state))

    fish_count = config.fish_count
    if fish_count is None:
        water_top = config.waterline_row + len(WATERLINE_SEGMENTS)
        underwater_area = max(1, state.height - water_top) * state.width
        fish_count = max(1, underwater_area // FISH_AREA_PER_FISH)
    for _ in range(fish_count):
        fish = spawn_random_fish(state, assets)
        if fish is not None:
            state.add(fish)

    school_count = 1 if config.school_count is None else config.school_count
    for _ in range(school_count):
        for member in spawn_school(state, assets):
            state.add(member)

    for waterline in spawn_waterlines(state):
        state.add(waterline)

    for cls in (Ship, Whale, Shark):
        state.add(spawn_creature(state, assets, cls, start_offscreen=True))

    return state


# ============================================================================
# Fish
# ============================================================================

def _art_size(assets: AssetTable, art_index: int) -> Tuple[int, int]:
    """Footprint of an art index (1x1 when it does not resolve)"""
    art = assets.get(art_index)
    if art is None:
        return 1, 1
    return art.width, art.height


def _named_size(assets: AssetTable, name: str) -> Tuple[int, int]:
    art = assets.named(name)
    if art is None:
        return 1, 1
    return art.width, art.height


def underwater_rows(state: AquariumState, art_height: int) -> Tuple[int, int]:
    """
    Row range (inclusive) where an art of the given height fits under water.

    Degrades to row 0 on grids too short to hold the waterline.
    """
    water_top = state.config.waterline_row + len(WATERLINE_SEGMENTS)
    max_y = max(state.height - art_height, 0)
    min_y = min(water_top, max_y)
    return min_y, max_y


def _draw_fish_speed(state: AquariumState) -> float:
    low, high = state.config.fish_speed_range
    return max(state.rng.uniform(low, high), FISH_MIN_SPEED)


def spawn_fish(
    state: AquariumState,
    assets: AssetTable,
    art_index: Optional[int] = None,
    edge: Optional[Edge] = None
) -> Optional[Fish]:
    """
    Spawn a fish just outside an edge, heading inward.

    Draw order: art (if not given), edge (if not given), row, speed,
    vertical drift, jitter phase, bubble phase.

    Returns:
        New Fish (not yet added to state), or None when the table has no fish
    """
    if art_index is None:
        if not assets.fish_indices:
            return None
        art_index = assets.fish_indices[state.rng.choice(len(assets.fish_indices))]
    if edge is None:
        edge = Edge.LEFT if state.rng.coin() else Edge.RIGHT

    width, height = _art_size(assets, art_index)
    min_y, max_y = underwater_rows(state, height)
    y = state.rng.integers(min_y, max_y)
    speed = _draw_fish_speed(state)
    drift = state.config.fish_vertical_speed
    vy = state.rng.uniform(-drift, drift)

    x = -float(width) if edge is Edge.LEFT else float(state.width)
    vx = speed if edge is Edge.LEFT else -speed

    return Fish(
        art_index=art_index,
        position=[x, float(y)],
        velocity=[vx, vy],
        jitter_phase=state.rng.uniform(0.0, math.tau),
        bubble_phase=state.rng.uniform(0.0, state.config.bubble_interval),
    )


def spawn_random_fish(state: AquariumState, assets: AssetTable) -> Optional[Fish]:
    """
    Spawn a fish anywhere inside the grid with a random heading.

    Draw order: art, column, row, vx, vy, jitter phase, bubble phase.
    Horizontal speed is kept at least FISH_MIN_SPEED so no fish stands still.
    """
    if not assets.fish_indices:
        return None
    art_index = assets.fish_indices[state.rng.choice(len(assets.fish_indices))]
    width, height = _art_size(assets, art_index)

    x = state.rng.integers(0, max(state.width - width, 0))
    min_y, max_y = underwater_rows(state, height)
    y = state.rng.integers(min_y, max_y)

    low, high = state.config.fish_speed_range
    vx = state.rng.uniform(-high, high)
    if abs(vx) < max(low, FISH_MIN_SPEED):
        vx = -max(low, FISH_MIN_SPEED) if vx < 0 else max(low, FISH_MIN_SPEED)
    drift = state.config.fish_vertical_speed
    vy = state.rng.uniform(-drift, drift)

    return Fish(
        art_index=art_index,
        position=[float(x), float(y)],
        velocity=[vx, vy],
        jitter_phase=state.rng.uniform(0.0, math.tau),
        bubble_phase=state.rng.uniform(0.0, state.config.bubble_interval),
    )


def _next_school_id(state: AquariumState) -> int:
    ids = [e.school_id for e in state.entities if e.kind is EntityKind.SCHOOL_MEMBER]
    return max(ids, default=0) + 1


def spawn_school(
    state: AquariumState,
    assets: AssetTable,
    size: Optional[int] = None,
    art_index: Optional[int] = None,
    edge: Optional[Edge] = None
) -> List[SchoolMember]:
    """
    Spawn a school entering from an edge in trailing formation.

    All members share one velocity. Draw order: art, edge, lead row, speed,
    then per member: row offset, jitter phase, bubble phase.

    Returns:
        New members (not yet added to state); empty when the table has no fish
    """
    if art_index is None:
        if not assets.fish_indices:
            return []
        art_index = assets.fish_indices[state.rng.choice(len(assets.fish_indices))]
    if edge is None:
        edge = Edge.LEFT if state.rng.coin() else Edge.RIGHT

    count = state.config.school_size if size is None else max(int(size), 1)
    school_id = _next_school_id(state)
    width, height = _art_size(assets, art_index)
    min_y, max_y = underwater_rows(state, height)
    lead_y = state.rng.integers(min_y, max_y)
    speed = _draw_fish_speed(state)

    stride = width + SCHOOL_SPACING
    if edge is Edge.LEFT:
        lead_x, vx, step = -float(width), speed, -stride
    else:
        lead_x, vx, step = float(state.width), -speed, stride

    members = []
    for i in range(count):
        offset = state.rng.integers(-1, 1)
        y = min(max(lead_y + offset, min_y), max_y)
        members.append(SchoolMember(
            art_index=art_index,
            position=[lead_x + i * step, float(y)],
            velocity=[vx, 0.0],
            jitter_phase=state.rng.uniform(0.0, math.tau),
            bubble_phase=state.rng.uniform(0.0, state.config.bubble_interval),
            school_id=school_id,
        ))
    return members


def count_live_fish(state: AquariumState) -> Tuple[int, int]:
    """(lone fish, distinct schools) currently in the collection"""
    fish = sum(1 for e in state.entities if e.kind is EntityKind.FISH)
    schools = {e.school_id for e in state.entities if e.kind is EntityKind.SCHOOL_MEMBER}
    return fish, len(schools)


# ============================================================================
# Large Creatures
# ============================================================================

def creature_row(state: AquariumState, assets: AssetTable, cls: Type[Creature]) -> int:
    """
    Row for a creature kind.

    Ships ride with their hull on the top waterline, whales surface just
    above it, sharks draw a row under water (one draw).
    """
    _, height = _named_size(assets, cls.art_name)
    waterline = state.config.waterline_row
    if cls is Ship:
        return max(waterline - height + 1, 0)
    if cls is Whale:
        return max(waterline - 1, 0)
    min_y, max_y = underwater_rows(state, height)
    return state.rng.integers(min_y, max_y)


def place_creature(
    state: AquariumState,
    assets: AssetTable,
    cls: Type[Creature],
    edge: Edge,
    instance_id: str = ""
) -> Creature:
    """
    Build a SWIMMING creature just outside `edge`, heading inward.

    Draw order: speed, then row (sharks only).
    """
    width, _ = _named_size(assets, cls.art_name)
    low, high = state.config.speed_range_for(cls.art_name)
    speed = state.rng.uniform(low, high)
    y = creature_row(state, assets, cls)

    x = -float(width) if edge is Edge.LEFT else float(state.width)
    vx = speed if edge is Edge.LEFT else -speed
    return cls(
        position=[x, float(y)],
        velocity=[vx, 0.0],
        state=CreatureState.SWIMMING,
        instance_id=instance_id,
    )


def draw_respawn_delay(state: AquariumState) -> int:
    """Respawn countdown in ticks, drawn from config.respawn_delay_range"""
    low, high = state.config.respawn_delay_range
    return state.rng.integers(low, high)


def spawn_creature(
    state: AquariumState,
    assets: AssetTable,
    cls: Type[Creature],
    edge: Optional[Edge] = None,
    start_offscreen: bool = False
) -> Creature:
    """
    Create a large creature.

    Draw order: edge (if not given), then either the respawn delay
    (start_offscreen) or speed and row (place_creature).

    When start_offscreen is set the creature waits OFFSCREEN as if it had
    just left through the edge opposite `edge`, so it enters from `edge`.
    """
    if edge is None:
        edge = Edge.LEFT if state.rng.coin() else Edge.RIGHT
    if start_offscreen:
        width, _ = _named_size(assets, cls.art_name)
        x = float(state.width) if edge is Edge.LEFT else -float(width)
        return cls(
            position=[x, 0.0],
            velocity=[0.0, 0.0],
            state=CreatureState.OFFSCREEN,
            respawn_remaining=float(draw_respawn_delay(state)),
            exit_edge=edge.opposite,
        )
    return place_creature(state, assets, cls, edge)


# ============================================================================
# Environment
# ============================================================================

def spawn_waterlines(state: AquariumState) -> List[Waterline]:
    """Four stacked water-surface layers starting at config.waterline_row"""
    return [
        Waterline(layer=i, row=state.config.waterline_row + i, drift_rate=WATERLINE_DRIFT_RATE * (i + 1))
        for i in range(len(WATERLINE_SEGMENTS))
    ]


def spawn_seaweed(state: AquariumState) -> SeaweedStalk:
    """
    Seaweed stalk anchored to the bottom row.

    Draw order: height, column, phase, sway rate.
    """
    low, high = SEAWEED_HEIGHT_RANGE
    height = min(state.rng.integers(low, high), max(state.height, 1))
    x = state.rng.integers(1, max(state.width - 3, 1))
    phase = state.rng.uniform(0.0, 2.0)
    sway_low, sway_high = SEAWEED_SWAY_RANGE
    return SeaweedStalk(x=x, height=height, phase=phase, sway_rate=state.rng.uniform(sway_low, sway_high))


def spawn_castle(state: AquariumState, assets: AssetTable) -> Optional[Castle]:
    """Castle near the bottom-right corner (None if the table has no castle art)"""
    art = assets.named(Castle.art_name)
    if art is None:
        return None
    x = max(0, state.width - art.width - 1)
    y = max(0, state.height - art.height)
    return Castle(position=[float(x), float(y)])
