"""
Central configuration constants for the asciiquarium simulation.

Defines default values, glyphs, and tuning parameters used across the
simulation step, the compositors, and the data-pack loader.
"""

# ============================================================================
# Glyphs
# ============================================================================

# Fill for cells no entity writes to
BACKGROUND_GLYPH = ' '

# Spaces inside art never overwrite what lies beneath
TRANSPARENT_GLYPH = ' '

# Placeholder from the original color layer: transparent in the plain path,
# drawn as an opaque "trail" cell in the colored path
MASK_GLYPH = '?'

# Directional glyph pairs swapped when art is mirrored for leftward motion
MIRROR_PAIRS = [('<', '>'), ('(', ')'), ('[', ']'), ('{', '}'), ('/', '\\')]

# Bubble glyphs by growth stage (small -> large)
BUBBLE_GLYPHS = ('.', 'o', 'O')
BUBBLE_GROW_AGE = 6.0  # Ticks spent in each growth stage


# ============================================================================
# Timestep Configuration
# ============================================================================

# Largest dt a single advance() call integrates; larger values are clamped
MAX_DT = 4.0

# Default host tick (one logical tick = one character-unit of velocity)
DEFAULT_DT = 1.0


# ============================================================================
# Fish Movement Configuration
# ============================================================================

# Bounce speed variance as a fraction of |vx| (u ~ U(-v, v), scale = 1 + u)
BOUNCE_VARIANCE_DEFAULT = 0.2

# Upper bound on variance so a bounce can never collapse vx to zero
BOUNCE_VARIANCE_MAX = 0.9

# Extra cells beyond the grid a footprint may drift before despawn
DESPAWN_MARGIN = 2.0

# Horizontal cruise speed range for spawned fish (characters/tick)
FISH_SPEED_RANGE = [0.08, 0.5]

# Minimum |vx| for spawned fish (avoids stationary fish)
FISH_MIN_SPEED = 0.05

# Max vertical drift for spawned fish (characters/tick)
FISH_VERTICAL_SPEED = 0.05

# Vertical bob applied through jitter_phase
JITTER_AMPLITUDE = 0.3
JITTER_FREQUENCY = 0.2

# School formation
SCHOOL_SIZE_DEFAULT = 4
SCHOOL_SPACING = 2  # Columns between consecutive members


# ============================================================================
# Large Creature Configuration
# ============================================================================

# Respawn countdown range in ticks (inclusive)
RESPAWN_DELAY_RANGE = [20, 80]

# Speed ranges (characters/tick); sign is set by the entry edge
SHIP_SPEED_RANGE = [0.5, 1.0]
SHARK_SPEED_RANGE = [1.0, 2.0]
WHALE_SPEED_RANGE = [0.5, 1.0]


# ============================================================================
# Bubble Configuration
# ============================================================================

BUBBLE_INTERVAL = 12.0    # Ticks between bubbles for one fish
BUBBLE_RISE_RATE = 0.5    # Rows/tick
BUBBLE_MAX_AGE = 30.0     # Ticks before a bubble pops on its own
BUBBLE_CEILING_ROW = 0    # Bubbles pop on reaching this row

# Golden-ratio spacing for fish that start without a bubble phase
BUBBLE_PHASE_SPACING = 0.6180339887498949


# ============================================================================
# Environment Configuration
# ============================================================================

# First waterline row; four layers stack downward from here
WATERLINE_ROW = 5

# Tiled waterline patterns, top layer first
WATERLINE_SEGMENTS = [
    "~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~",
    "^^^^ ^^^  ^^^   ^^^     ^^^^     ",
    "^^^^      ^^^^     ^^^     ^^    ",
    "^^      ^^^^       ^^^     ^^^^^^",
]

WATERLINE_DRIFT_RATE = 0.1   # Columns/tick the pattern scrolls

# Seaweed
SEAWEED_HEIGHT_RANGE = [3, 6]
SEAWEED_SWAY_RANGE = [0.25, 0.30]  # Frame flips per tick
SEAWEED_COLUMNS_PER_STALK = 15     # One stalk per N columns

# Fish density: one fish per N underwater cells
FISH_AREA_PER_FISH = 350


# ============================================================================
# Theme Defaults
# ============================================================================

DEFAULT_TEXT_COLOR = "#a0a0a0"

DEFAULT_PALETTE = {
    'body': "#b4dcff",
    'water': "#00aaff",
    'seaweed': "#2e8b57",
    'bubble': "#e0ffff",
    'trail': "#0a1a2a",
}


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100  # Print summary every 100 ticks
