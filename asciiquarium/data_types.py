"""
Data types for assets, themes, and simulation configuration.

These dataclasses are populated by loader.py from YAML files, or built
directly by host code.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional
from enum import IntEnum

from .constants import (
    BOUNCE_VARIANCE_DEFAULT,
    BOUNCE_VARIANCE_MAX,
    BUBBLE_CEILING_ROW,
    BUBBLE_INTERVAL,
    BUBBLE_MAX_AGE,
    BUBBLE_RISE_RATE,
    DEFAULT_PALETTE,
    DEFAULT_TEXT_COLOR,
    DESPAWN_MARGIN,
    FISH_SPEED_RANGE,
    FISH_VERTICAL_SPEED,
    JITTER_AMPLITUDE,
    JITTER_FREQUENCY,
    MAX_DT,
    RESPAWN_DELAY_RANGE,
    SCHOOL_SIZE_DEFAULT,
    SHARK_SPEED_RANGE,
    SHIP_SPEED_RANGE,
    WATERLINE_ROW,
    WHALE_SPEED_RANGE,
)


# ============================================================================
# Assets
# ============================================================================

@dataclass(frozen=True)
class FishArt:
    """
    Immutable ASCII art block with its footprint.

    Attributes:
        art: Multi-line text (no leading/trailing blank lines)
        width: Footprint width in characters (max line length)
        height: Footprint height in rows (line count)
        name: Catalog name (e.g., "fish-small", "shark")
        category: "fish", "creature", or "decoration"
    """
    art: str
    width: int
    height: int
    name: str = ""
    category: str = "fish"


# ============================================================================
# Theme
# ============================================================================

class GlyphClass(IntEnum):
    """Color classes assigned to composited cells"""
    BODY = 0
    WATER = 1
    SEAWEED = 2
    BUBBLE = 3
    TRAIL = 4


@dataclass
class Palette:
    """One color per glyph class (colors as '#rrggbb')"""
    body: str = DEFAULT_PALETTE['body']
    water: str = DEFAULT_PALETTE['water']
    seaweed: str = DEFAULT_PALETTE['seaweed']
    bubble: str = DEFAULT_PALETTE['bubble']
    trail: str = DEFAULT_PALETTE['trail']

    def color_for(self, glyph_class: GlyphClass) -> str:
        """Return the palette entry for a glyph class"""
        return {
            GlyphClass.BODY: self.body,
            GlyphClass.WATER: self.water,
            GlyphClass.SEAWEED: self.seaweed,
            GlyphClass.BUBBLE: self.bubble,
            GlyphClass.TRAIL: self.trail,
        }[glyph_class]


@dataclass
class Theme:
    """
    Display theme handed to the host's text surface.

    Only enable_color and palette are consumed by the core; text_color,
    background and wrap are passed through to the display layer.
    """
    text_color: str = DEFAULT_TEXT_COLOR
    background: Optional[str] = None
    wrap: bool = False
    enable_color: bool = False
    palette: Optional[Palette] = None


# ============================================================================
# Simulation Configuration
# ============================================================================

@dataclass
class SimulationConfig:
    """Tunables consumed by the simulation step and spawning helpers"""
    seed: int = 12345
    max_dt: float = MAX_DT
    bounce_variance: float = BOUNCE_VARIANCE_DEFAULT
    despawn_margin: float = DESPAWN_MARGIN

    # Population targets (None = host manages population, no top-up)
    fish_count: Optional[int] = None
    school_count: Optional[int] = None
    school_size: int = SCHOOL_SIZE_DEFAULT

    fish_speed_range: List[float] = field(default_factory=lambda: list(FISH_SPEED_RANGE))
    fish_vertical_speed: float = FISH_VERTICAL_SPEED
    jitter_amplitude: float = JITTER_AMPLITUDE
    jitter_frequency: float = JITTER_FREQUENCY

    respawn_delay_range: List[int] = field(default_factory=lambda: list(RESPAWN_DELAY_RANGE))
    ship_speed_range: List[float] = field(default_factory=lambda: list(SHIP_SPEED_RANGE))
    shark_speed_range: List[float] = field(default_factory=lambda: list(SHARK_SPEED_RANGE))
    whale_speed_range: List[float] = field(default_factory=lambda: list(WHALE_SPEED_RANGE))

    bubble_interval: float = BUBBLE_INTERVAL
    bubble_rise_rate: float = BUBBLE_RISE_RATE
    bubble_max_age: float = BUBBLE_MAX_AGE
    bubble_ceiling_row: int = BUBBLE_CEILING_ROW

    waterline_row: int = WATERLINE_ROW

    def __post_init__(self):
        """Clamp values that would break the step's invariants"""
        self.bounce_variance = min(max(float(self.bounce_variance), 0.0), BOUNCE_VARIANCE_MAX)
        self.max_dt = max(float(self.max_dt), 0.0)
        self.despawn_margin = max(float(self.despawn_margin), 0.0)
        self.school_size = max(int(self.school_size), 1)
        lo, hi = sorted(int(v) for v in self.respawn_delay_range)
        self.respawn_delay_range = [max(lo, 0), max(hi, 0)]

    def speed_range_for(self, kind_name: str) -> List[float]:
        """Speed range for a large creature kind ('ship', 'shark', 'whale')"""
        ranges: Dict[str, List[float]] = {
            'ship': self.ship_speed_range,
            'shark': self.shark_speed_range,
            'whale': self.whale_speed_range,
        }
        return ranges[kind_name]
