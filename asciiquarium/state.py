"""
Aquarium state container.

The host owns an AquariumState and hands it to advance() and the
compositors. Everything the simulation needs between ticks lives here,
including the random stream, so a copied state replays identically.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .data_types import SimulationConfig
from .entity import Entity, EntityKind
from .rng import SimRng


@dataclass
class AquariumState:
    """
    Simulation state.

    Attributes:
        size: Grid (width, height) in characters; non-positive renders empty
        entities: Entities in z-order (later entries drawn on top)
        rng: Seeded random stream, advanced only by advance() and spawning
        elapsed: Accumulated simulated time in ticks
        tick_count: Number of effective advance() steps
        config: Simulation tunables
        serial: Counter behind generated instance ids
    """
    size: Tuple[int, int]
    entities: List[Entity] = field(default_factory=list)
    rng: Optional[SimRng] = None
    elapsed: float = 0.0
    tick_count: int = 0
    config: SimulationConfig = field(default_factory=SimulationConfig)
    serial: int = 0

    def __post_init__(self):
        self.size = (int(self.size[0]), int(self.size[1]))
        if self.rng is None:
            self.rng = SimRng(self.config.seed)

    @property
    def width(self) -> int:
        return max(self.size[0], 0)

    @property
    def height(self) -> int:
        return max(self.size[1], 0)

    def copy(self) -> 'AquariumState':
        """Deep copy (entities, generator position and counters)"""
        return copy.deepcopy(self)

    def next_instance_id(self, kind: EntityKind) -> str:
        """Allocate an instance id (format: "{kind}-{serial:04d}")"""
        instance_id = f"{kind.value}-{self.serial:04d}"
        self.serial += 1
        return instance_id

    def add(self, entity: Entity) -> Entity:
        """Append an entity on top of the z-order, assigning an id if missing"""
        if not entity.instance_id:
            entity.instance_id = self.next_instance_id(entity.kind)
        self.entities.append(entity)
        return entity

    def entities_of_kind(self, *kinds: EntityKind) -> List[Entity]:
        return [e for e in self.entities if e.kind in kinds]
