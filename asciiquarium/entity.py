"""
Entity runtime representation.

Entities are tagged variants: every class carries a `kind` tag and the
simulation step and compositors dispatch on it. Positions are top-left
corners in character units; velocities are characters per tick.
"""

import numpy as np
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, Optional, Union


class EntityKind(Enum):
    FISH = "fish"
    SCHOOL_MEMBER = "school_member"
    SHIP = "ship"
    SHARK = "shark"
    WHALE = "whale"
    BUBBLE = "bubble"
    SEAWEED = "seaweed"
    WATERLINE = "waterline"
    CASTLE = "castle"


class CreatureState(Enum):
    """Lifecycle of a large creature"""
    SWIMMING = "swimming"
    OFFSCREEN = "offscreen"


class Edge(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> 'Edge':
        return Edge.RIGHT if self is Edge.LEFT else Edge.LEFT


def _vec2(value) -> np.ndarray:
    """Coerce to a float64 [x, y] array"""
    if not isinstance(value, np.ndarray):
        return np.array(value, dtype=np.float64)
    return value.astype(np.float64, copy=False)


# ============================================================================
# Fish
# ============================================================================

@dataclass
class FishInstance:
    """
    A single moving fish.

    Attributes:
        art_index: Index into the AssetTable (unresolvable indices are skipped
            when drawing, never an error)
        position: [x, y] top-left in character units
        velocity: [vx, vy] in characters/tick
        jitter_phase: Vertical bob phase (None = no bob)
        bubble_phase: Bubble timer in ticks (None = derived from slot on first step)
        instance_id: Identifier (format: "{kind}-{serial:04d}")
    """
    art_index: int
    position: np.ndarray
    velocity: np.ndarray
    jitter_phase: Optional[float] = None
    bubble_phase: Optional[float] = None
    instance_id: str = ""

    kind: ClassVar[EntityKind] = EntityKind.FISH

    def __post_init__(self):
        """Ensure position and velocity are float64 arrays"""
        self.position = _vec2(self.position)
        self.velocity = _vec2(self.velocity)

    def update_position(self, dt: float):
        """
        Update position using current velocity.

        Args:
            dt: Time step in ticks
        """
        self.position += self.velocity * dt

    @property
    def facing_left(self) -> bool:
        return float(self.velocity[0]) < 0.0


@dataclass
class Fish(FishInstance):
    """A lone fish patrolling side to side"""
    kind: ClassVar[EntityKind] = EntityKind.FISH


@dataclass
class SchoolMember(FishInstance):
    """A fish moving, bouncing and despawning with its school (cohort)"""
    school_id: int = 0

    kind: ClassVar[EntityKind] = EntityKind.SCHOOL_MEMBER


# ============================================================================
# Large Creatures
# ============================================================================

@dataclass
class Creature:
    """
    Large transient creature crossing the grid.

    Attributes:
        position: [x, y] top-left in character units
        velocity: [vx, vy] in characters/tick (vy is normally 0)
        state: SWIMMING (visible) or OFFSCREEN (waiting to respawn)
        respawn_remaining: Ticks left before respawn while OFFSCREEN
        exit_edge: Edge most recently exited (respawn uses the opposite edge)
        instance_id: Identifier (format: "{kind}-{serial:04d}")
    """
    position: np.ndarray
    velocity: np.ndarray
    state: CreatureState = CreatureState.SWIMMING
    respawn_remaining: float = 0.0
    exit_edge: Optional[Edge] = None
    instance_id: str = ""

    kind: ClassVar[EntityKind]
    art_name: ClassVar[str]

    def __post_init__(self):
        self.position = _vec2(self.position)
        self.velocity = _vec2(self.velocity)

    def update_position(self, dt: float):
        self.position += self.velocity * dt

    @property
    def facing_left(self) -> bool:
        return float(self.velocity[0]) < 0.0

    @property
    def visible(self) -> bool:
        return self.state is CreatureState.SWIMMING


@dataclass
class Ship(Creature):
    kind: ClassVar[EntityKind] = EntityKind.SHIP
    art_name: ClassVar[str] = "ship"


@dataclass
class Shark(Creature):
    kind: ClassVar[EntityKind] = EntityKind.SHARK
    art_name: ClassVar[str] = "shark"


@dataclass
class Whale(Creature):
    kind: ClassVar[EntityKind] = EntityKind.WHALE
    art_name: ClassVar[str] = "whale"


CREATURE_TYPES = {
    EntityKind.SHIP: Ship,
    EntityKind.SHARK: Shark,
    EntityKind.WHALE: Whale,
}


# ============================================================================
# Environment
# ============================================================================

@dataclass
class Bubble:
    """Rising bubble; grows with age and pops at the ceiling or max age"""
    position: np.ndarray
    age: float = 0.0
    instance_id: str = ""

    kind: ClassVar[EntityKind] = EntityKind.BUBBLE

    def __post_init__(self):
        self.position = _vec2(self.position)


@dataclass
class SeaweedStalk:
    """Swaying stalk anchored to the bottom row"""
    x: int
    height: int
    phase: float = 0.0
    sway_rate: float = 0.25
    instance_id: str = ""

    kind: ClassVar[EntityKind] = EntityKind.SEAWEED


@dataclass
class Waterline:
    """One layer of the tiled water surface; the pattern scrolls with phase"""
    layer: int
    row: int
    phase: float = 0.0
    drift_rate: float = 0.1
    instance_id: str = ""

    kind: ClassVar[EntityKind] = EntityKind.WATERLINE


@dataclass
class Castle:
    """Static decoration drawn from the 'castle' catalog art"""
    position: np.ndarray
    instance_id: str = ""

    kind: ClassVar[EntityKind] = EntityKind.CASTLE
    art_name: ClassVar[str] = "castle"

    def __post_init__(self):
        self.position = _vec2(self.position)


Entity = Union[Fish, SchoolMember, Ship, Shark, Whale, Bubble, SeaweedStalk, Waterline, Castle]

ENTITY_TYPES: Dict[EntityKind, type] = {
    EntityKind.FISH: Fish,
    EntityKind.SCHOOL_MEMBER: SchoolMember,
    EntityKind.SHIP: Ship,
    EntityKind.SHARK: Shark,
    EntityKind.WHALE: Whale,
    EntityKind.BUBBLE: Bubble,
    EntityKind.SEAWEED: SeaweedStalk,
    EntityKind.WATERLINE: Waterline,
    EntityKind.CASTLE: Castle,
}

FISH_KINDS = (EntityKind.FISH, EntityKind.SCHOOL_MEMBER)


# ============================================================================
# Serialization
# ============================================================================

def entity_to_dict(entity: Entity) -> dict:
    """
    Serialize an entity to a JSON-compatible dict.

    Returns:
        Dict with a 'kind' tag plus every dataclass field
    """
    data = {'kind': entity.kind.value}
    for f in fields(entity):
        value = getattr(entity, f.name)
        if isinstance(value, np.ndarray):
            value = value.tolist()
        elif isinstance(value, Enum):
            value = value.value
        data[f.name] = value
    return data


def entity_from_dict(data: dict) -> Entity:
    """
    Deserialize an entity produced by entity_to_dict().

    Args:
        data: Dict with 'kind' and entity fields

    Returns:
        Entity instance of the tagged variant
    """
    cls = ENTITY_TYPES[EntityKind(data['kind'])]
    kwargs = {k: v for k, v in data.items() if k != 'kind'}
    if 'state' in kwargs:
        kwargs['state'] = CreatureState(kwargs['state'])
    if kwargs.get('exit_edge') is not None:
        kwargs['exit_edge'] = Edge(kwargs['exit_edge'])
    return cls(**kwargs)
