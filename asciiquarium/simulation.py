"""
Aquarium simulation kernel.

advance() moves every entity by one fixed timestep: integration, wall
bounce, bubble emission, despawn/respawn transitions and population top-up.
It is a pure function of (state, assets, dt): the input state is copied,
never mutated, and every random value comes from the copy's RNG.

AquariumSimulation is the host-side driver: it loads a data pack, owns the
state, times each tick and prints console summaries.
"""

import math
import time
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .assets import AssetTable, default_asset_table
from .color import render_for_theme
from .compositor import render_to_string
from .constants import BUBBLE_PHASE_SPACING, DEFAULT_DT, TICK_SUMMARY_INTERVAL, TICK_TIME_WINDOW
from .data_types import SimulationConfig, Theme
from .entity import (
    Bubble,
    Creature,
    CreatureState,
    Edge,
    Entity,
    EntityKind,
    FishInstance,
    FISH_KINDS,
    entity_to_dict,
)
from .geometry import footprint_intersects, outside_margin
from .loader import load_all_data
from .spawning import (
    count_live_fish,
    draw_respawn_delay,
    new_aquarium,
    place_creature,
    spawn_fish,
    spawn_school,
)
from .state import AquariumState


CREATURE_KINDS = (EntityKind.SHIP, EntityKind.SHARK, EntityKind.WHALE)

# Kinds drawn above fish; topped-up fish are inserted below the first of these
_SURFACE_KINDS = (EntityKind.WATERLINE,) + CREATURE_KINDS


# ============================================================================
# Footprints
# ============================================================================

def _footprint(assets: AssetTable, entity: Entity) -> Tuple[int, int]:
    """
    Physics footprint (width, height) of a fish or creature.

    Unresolvable art falls back to 1x1 so the entity still moves and can
    leave the grid.
    """
    if entity.kind in FISH_KINDS:
        art = assets.get(entity.art_index)
    else:
        art = assets.named(entity.art_name)
    if art is None:
        return 1, 1
    return art.width, art.height


# ============================================================================
# Integration
# ============================================================================

def _integrate_fish(state: AquariumState, fish: FishInstance, dt: float):
    fish.update_position(dt)
    if fish.jitter_phase is not None:
        config = state.config
        before = math.sin(fish.jitter_phase)
        fish.jitter_phase = (fish.jitter_phase + dt * config.jitter_frequency) % (2.0 * math.pi)
        fish.position[1] += config.jitter_amplitude * (math.sin(fish.jitter_phase) - before)


def _integrate_creature(state: AquariumState, creature: Creature, dt: float):
    if creature.state is CreatureState.SWIMMING:
        creature.update_position(dt)


def _integrate_bubble(state: AquariumState, bubble: Bubble, dt: float):
    bubble.position[1] -= state.config.bubble_rise_rate * dt
    bubble.age += dt


def _integrate_seaweed(state: AquariumState, stalk, dt: float):
    stalk.phase += dt * stalk.sway_rate


def _integrate_waterline(state: AquariumState, waterline, dt: float):
    waterline.phase += dt * waterline.drift_rate


def _integrate_static(state: AquariumState, entity, dt: float):
    pass


_INTEGRATORS = {
    EntityKind.FISH: _integrate_fish,
    EntityKind.SCHOOL_MEMBER: _integrate_fish,
    EntityKind.SHIP: _integrate_creature,
    EntityKind.SHARK: _integrate_creature,
    EntityKind.WHALE: _integrate_creature,
    EntityKind.BUBBLE: _integrate_bubble,
    EntityKind.SEAWEED: _integrate_seaweed,
    EntityKind.WATERLINE: _integrate_waterline,
    EntityKind.CASTLE: _integrate_static,
}


# ============================================================================
# Wall Bounce
# ============================================================================

def _span_crosses_wall(lo: float, hi: float, vx: float, grid_w: int) -> bool:
    # Wider than the grid: swims straight through
    if hi - lo > grid_w:
        return False
    if not (lo < grid_w and hi > 0):
        return False
    return (vx > 0.0 and hi > grid_w) or (vx < 0.0 and lo < 0.0)


def crosses_wall(assets: AssetTable, fish: FishInstance, grid_w: int) -> bool:
    """
    True when a fish still overlapping the grid horizontally pokes through
    the edge it is swimming toward.

    Fish entirely outside never bounce (they are entering or leaving), and
    neither do fish wider than the grid.
    """
    width, _ = _footprint(assets, fish)
    x = float(fish.position[0])
    if not math.isfinite(x):
        return False
    return _span_crosses_wall(x, x + width, float(fish.velocity[0]), grid_w)


def cohort_crosses_wall(assets: AssetTable, members: List[FishInstance], grid_w: int) -> bool:
    """
    Same rule as crosses_wall, applied to the horizontal span of a whole
    school so the cohort turns as one body.
    """
    spans = []
    for member in members:
        x = float(member.position[0])
        if math.isfinite(x):
            spans.append((x, x + _footprint(assets, member)[0]))
    if not spans:
        return False
    lo = min(s[0] for s in spans)
    hi = max(s[1] for s in spans)
    return _span_crosses_wall(lo, hi, float(members[0].velocity[0]), grid_w)


def _bounce_factor(state: AquariumState) -> float:
    """Speed scale 1 + u, u ~ U(-v, v); v <= 0.9 keeps the result positive"""
    variance = state.config.bounce_variance
    return 1.0 + state.rng.uniform(-variance, variance)


def _resolve_bounces(state: AquariumState, assets: AssetTable):
    """
    Invert vx of fish crossing a side wall.

    Lone fish draw one factor each; a school draws one shared factor at its
    first member (collection order) and flips every member together.
    """
    cohorts: Dict[int, List[FishInstance]] = defaultdict(list)
    for entity in state.entities:
        if entity.kind is EntityKind.SCHOOL_MEMBER:
            cohorts[entity.school_id].append(entity)

    handled = set()
    for entity in state.entities:
        if entity.kind is EntityKind.FISH:
            if crosses_wall(assets, entity, state.width):
                entity.velocity[0] = -entity.velocity[0] * _bounce_factor(state)
        elif entity.kind is EntityKind.SCHOOL_MEMBER and entity.school_id not in handled:
            handled.add(entity.school_id)
            cohort = cohorts[entity.school_id]
            if cohort_crosses_wall(assets, cohort, state.width):
                factor = _bounce_factor(state)
                for member in cohort:
                    member.velocity[0] = -member.velocity[0] * factor


# ============================================================================
# Bubbles
# ============================================================================

def _emit_bubble(state: AquariumState, assets: AssetTable, fish: FishInstance, slot: int, dt: float) -> Optional[Bubble]:
    """
    Advance a fish's bubble timer; return a new bubble when it fires.

    Fish without a bubble phase get a golden-ratio offset from their slot,
    so neighbours never breathe in sync.
    """
    interval = state.config.bubble_interval
    if interval <= 0.0:
        return None
    if assets.get(fish.art_index) is None:
        return None
    if fish.bubble_phase is None:
        fish.bubble_phase = ((slot + 1) * BUBBLE_PHASE_SPACING % 1.0) * interval

    fish.bubble_phase += dt
    if fish.bubble_phase < interval:
        return None
    fish.bubble_phase %= interval

    width, height = _footprint(assets, fish)
    x, y = float(fish.position[0]), float(fish.position[1])
    if not footprint_intersects(x, y, width, height, state.width, state.height):
        return None

    mouth_x = math.floor(x) - 1 if fish.facing_left else math.floor(x) + width
    mouth_y = math.floor(y) + height // 2
    return Bubble(
        position=[float(mouth_x), float(mouth_y)],
        instance_id=state.next_instance_id(EntityKind.BUBBLE),
    )


def _emit_bubbles(state: AquariumState, assets: AssetTable, dt: float):
    """Insert each new bubble directly above (after) the fish that blew it"""
    entities = []
    for slot, entity in enumerate(state.entities):
        entities.append(entity)
        if entity.kind in FISH_KINDS:
            bubble = _emit_bubble(state, assets, entity, slot, dt)
            if bubble is not None:
                entities.append(bubble)
    state.entities = entities


# ============================================================================
# Lifecycle
# ============================================================================

def _fish_out_of_bounds(state: AquariumState, assets: AssetTable, fish: FishInstance) -> bool:
    width, height = _footprint(assets, fish)
    return outside_margin(
        float(fish.position[0]), float(fish.position[1]), width, height,
        state.width, state.height, state.config.despawn_margin
    )


def _bubble_popped(state: AquariumState, bubble: Bubble) -> bool:
    y = float(bubble.position[1])
    if not math.isfinite(y):
        return True
    return math.floor(y) <= state.config.bubble_ceiling_row or bubble.age >= state.config.bubble_max_age


def exit_edge(creature: Creature, width: int, height: int, grid_w: int, grid_h: int) -> Optional[Edge]:
    """
    Edge a SWIMMING creature has left through, or None while it is visible
    or still heading in.

    A footprint that misses the grid only vertically exits on the side it
    is heading toward.
    """
    x, y = float(creature.position[0]), float(creature.position[1])
    vx = float(creature.velocity[0])
    if not (math.isfinite(x) and math.isfinite(y)):
        return Edge.RIGHT if vx >= 0.0 else Edge.LEFT
    if footprint_intersects(x, y, width, height, grid_w, grid_h):
        return None
    if x >= grid_w and vx >= 0.0:
        return Edge.RIGHT
    if x + width <= 0 and vx <= 0.0:
        return Edge.LEFT
    if x < grid_w and x + width > 0:
        return Edge.RIGHT if vx >= 0.0 else Edge.LEFT
    return None


def _step_creature(state: AquariumState, assets: AssetTable, creature: Creature, dt: float) -> Creature:
    """
    Run the Swimming -> Offscreen -> Swimming state machine for one step.

    Draws the respawn delay on exit; on respawn a new instance replaces the
    old one at the edge opposite the exit.
    """
    if creature.state is CreatureState.SWIMMING:
        width, height = _footprint(assets, creature)
        edge = exit_edge(creature, width, height, state.width, state.height)
        if edge is not None:
            creature.state = CreatureState.OFFSCREEN
            creature.exit_edge = edge
            creature.respawn_remaining = float(draw_respawn_delay(state))
        return creature

    creature.respawn_remaining -= dt
    if creature.respawn_remaining > 0.0:
        return creature

    entry = creature.exit_edge.opposite if creature.exit_edge is not None else Edge.LEFT
    return place_creature(
        state, assets, type(creature), entry,
        instance_id=state.next_instance_id(creature.kind),
    )


def _apply_lifecycle(state: AquariumState, assets: AssetTable, dt: float):
    """Despawn fish, schools and bubbles; advance creature state machines"""
    cohort_out: Dict[int, bool] = {}
    for entity in state.entities:
        if entity.kind is EntityKind.SCHOOL_MEMBER:
            out = _fish_out_of_bounds(state, assets, entity)
            cohort_out[entity.school_id] = cohort_out.get(entity.school_id, True) and out

    survivors = []
    for entity in state.entities:
        kind = entity.kind
        if kind is EntityKind.FISH:
            if _fish_out_of_bounds(state, assets, entity):
                continue
        elif kind is EntityKind.SCHOOL_MEMBER:
            if cohort_out[entity.school_id]:
                continue
        elif kind is EntityKind.BUBBLE:
            if _bubble_popped(state, entity):
                continue
        elif kind in CREATURE_KINDS:
            entity = _step_creature(state, assets, entity, dt)
        survivors.append(entity)
    state.entities = survivors


def _insert_below_surface(state: AquariumState, entity: Entity):
    """Insert under the waterline and creatures, or on top if there are none"""
    if not entity.instance_id:
        entity.instance_id = state.next_instance_id(entity.kind)
    for index, other in enumerate(state.entities):
        if other.kind in _SURFACE_KINDS:
            state.entities.insert(index, entity)
            return
    state.entities.append(entity)


def _top_up_population(state: AquariumState, assets: AssetTable):
    """Respawn fish and schools up to config.fish_count / config.school_count"""
    config = state.config
    if config.fish_count is None and config.school_count is None:
        return

    fish_alive, schools_alive = count_live_fish(state)
    if config.fish_count is not None:
        for _ in range(max(config.fish_count - fish_alive, 0)):
            fish = spawn_fish(state, assets)
            if fish is None:
                break
            _insert_below_surface(state, fish)
    if config.school_count is not None:
        for _ in range(max(config.school_count - schools_alive, 0)):
            members = spawn_school(state, assets)
            if not members:
                break
            for member in members:
                _insert_below_surface(state, member)


# ============================================================================
# Step
# ============================================================================

def effective_dt(dt, config: SimulationConfig) -> float:
    """
    Timestep actually integrated: 0.0 for non-positive or non-finite dt,
    otherwise dt clamped to config.max_dt.
    """
    try:
        value = float(dt)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value <= 0.0:
        return 0.0
    return min(value, config.max_dt)


def advance(state: AquariumState, assets: AssetTable, dt: float) -> AquariumState:
    """
    Advance the aquarium by one timestep.

    Step order: integrate, bounce, emit bubbles, lifecycle, population
    top-up. RNG draws happen in collection order within each phase.

    Args:
        state: Current state (not modified)
        assets: Shared asset table
        dt: Timestep in ticks; <= 0 / NaN / inf is a no-op, values above
            config.max_dt are clamped

    Returns:
        The next state (the input object itself when dt is a no-op)
    """
    dt = effective_dt(dt, state.config)
    if dt == 0.0:
        return state

    nxt = state.copy()
    for entity in nxt.entities:
        _INTEGRATORS[entity.kind](nxt, entity, dt)
    _resolve_bounces(nxt, assets)
    _emit_bubbles(nxt, assets, dt)
    _apply_lifecycle(nxt, assets, dt)
    _top_up_population(nxt, assets)

    nxt.elapsed += dt
    nxt.tick_count += 1
    return nxt


# ============================================================================
# Host Driver
# ============================================================================

class AquariumSimulation:
    """
    Host-side driver around advance() and the compositors.

    Loads an optional data pack, builds the initial scene, and keeps tick
    timing statistics. All console output lives here, never in advance().
    """

    def __init__(
        self,
        data_root: Optional[Path] = None,
        schema_dir: Optional[Path] = None,
        size: Optional[Tuple[int, int]] = None,
        config: Optional[SimulationConfig] = None,
        assets: Optional[AssetTable] = None,
        theme: Optional[Theme] = None,
        dt: Optional[float] = None,
        populated: bool = True
    ):
        """
        Initialize simulation from a data pack or explicit arguments.

        Args:
            data_root: Optional data directory (aquarium.yaml, themes, asset packs)
            schema_dir: Optional path to JSON schemas
            size: Grid size override (width, height)
            config: SimulationConfig override
            assets: AssetTable override
            theme: Theme override
            dt: Tick length override
            populated: Build the default scene
        """
        data = {}
        if data_root is not None:
            print("Loading data pack...")
            data = load_all_data(data_root, schema_dir)

        if assets is None:
            assets = data.get('assets') or default_asset_table()
        self.assets: AssetTable = assets
        self.config: SimulationConfig = config or data.get('config') or SimulationConfig()
        self.theme: Theme = theme or data.get('theme') or Theme()
        self.dt: float = dt if dt is not None else data.get('dt', DEFAULT_DT)
        grid = size or data.get('size') or (80, 24)

        self.state: AquariumState = new_aquarium(grid, self.assets, self.config, populated=populated)

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window

        print(f"[OK] Simulation initialized: {len(self.state.entities)} entities, "
              f"size={self.state.width}x{self.state.height}, dt={self.dt}, seed={self.config.seed}")

    @property
    def tick_count(self) -> int:
        return self.state.tick_count

    @property
    def entities(self) -> List[Entity]:
        return self.state.entities

    def tick(self, dt: Optional[float] = None):
        """Advance one tick (host dt unless overridden) and record timing"""
        start = time.perf_counter()
        self.state = advance(self.state, self.assets, self.dt if dt is None else dt)
        self._record_tick_time(time.perf_counter() - start)

    def run(self, ticks: int, summary_interval: int = TICK_SUMMARY_INTERVAL):
        """
        Tick repeatedly, printing a summary every `summary_interval` ticks.

        Args:
            ticks: Number of ticks to run
            summary_interval: Ticks between summaries (<= 0 disables them)
        """
        for i in range(ticks):
            self.tick()
            if summary_interval > 0 and (i + 1) % summary_interval == 0:
                self.print_tick_summary()

    def render(self) -> str:
        """Plain text frame"""
        return render_to_string(self.state, self.assets)

    def render_themed(self):
        """Plain text, or colored runs when the theme enables color"""
        return render_for_theme(self.state, self.assets, self.theme)

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with tick_count, elapsed, size, entities, rng state, timing
        """
        return {
            'tick_count': self.tick_count,
            'elapsed': self.state.elapsed,
            'size': list(self.state.size),
            'entity_count': len(self.entities),
            'entities': [entity_to_dict(e) for e in self.entities],
            'rng': self.state.rng.get_state(),
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        visible = sum(
            1 for e in self.entities
            if e.kind not in CREATURE_KINDS or e.state is CreatureState.SWIMMING
        )
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Entities: {len(self.entities)} ({visible} visible)")
