"""
Asset table: the built-in ASCII art catalog plus measuring and mirroring.

All art is authored facing right; the compositor mirrors it for leftward
motion. Width is the maximum character count across lines, height is the
line count, and both are at least 1. Leading and trailing blank lines of
authored blocks are stripped before measuring.
"""

from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .constants import MIRROR_PAIRS, TRANSPARENT_GLYPH
from .data_types import FishArt


# ============================================================================
# Built-in Art
# ============================================================================

FISH_ART = {
    'fish-tiny': r"""
><>
""",
    'fish-arrow': r"""
><(((o>
""",
    'fish-stripe': r"""
      \
    ...\..,
\  /'      \
 >=    (  ' >
/  \     / /
   `"'"'/''
""",
    'fish-round': r"""
  \
\ /--\
>=  (o>
/ \__/
   /
""",
    'fish-dart': r"""
 __
><_'>
   '
""",
    'fish-puffer': r"""
  ..\,
>='  (' >
  '''/''
""",
    'fish-fin': r"""
  \
 / \
>=_('>
 \_/
  /
""",
    'fish-small': r"""
 ,\
>=('>
 '/
""",
    'fish-box': r"""
 __
\/ o\
/\__/
""",
    'fish-big': r"""
   __
><(o )___
 ( .__> /
  `----'
""",
    'fish-pair': r"""
><>
<__>
""",
    'fish-lure': r"""
  __
q(==)p
  \/
""",
}

# '?' cells are the mask glyph: see-through in plain text, trail in color
CREATURE_ART = {
    'ship': r"""
     |    |    |
    )_)  )_)  )_)
   )___))___))___)\
  )____)____)_____)\\
_____|____|____|____\\\__
\                   /
""",
    'shark': r"""
                             __
                           ( `\
 ,??????????????????????????)   `\
;' `.????????????????????????(     `\__
 ;   `.?????????????__..---''         `~~~~-._
  `.   `.____...--''                         (b `--._
    >                                _.-'     .((     ._    )
  .`.-`--...__             .-'    -.___.....-(|/|/|/|/'
 ;.'?????????`. ...----`.___.',,,_______......---'
 '???????????'-'
""",
    'whale': r"""
      .-----:
     .'      `.
,????/      (o) \
\`._/         ,__)
""",
}

DECORATION_ART = {
    'castle': r"""
                T~~
                |
               /^\
              /   \
  _   _   _  /     \  _   _   _
 [ ]_[ ]_[ ]/ _   _ \[ ]_[ ]_[ ]
 |_=__-_ =_|_[ ]_[ ]_|_=-___-__|
  | _- =  | =_ = _    |= _=   |
  |= -[]  |- = _ =    |_-=_[] |
  | =_    |= - ___    | =_ =  |
  |=  []- |-  /| |\   |=_ =[] |
  |- =_   | =| | | |  |- = -  |
  |_______|__|_|_|_|__|_______|
""",
}


# ============================================================================
# Measuring
# ============================================================================

def _clean(art: str) -> str:
    """Normalize line endings and drop leading/trailing blank lines"""
    return art.replace("\r\n", "\n").strip("\n")


def measure_art(art: str) -> Tuple[int, int]:
    """
    Measure an ASCII art block as (width, height).

    Width is the maximum character count of any line and height is the
    number of lines. Guarantees a minimum size of 1x1.
    """
    lines = _clean(art).split("\n")
    width = max((len(line) for line in lines), default=0)
    return max(width, 1), max(len(lines), 1)


def make_art(art: str, name: str = "", category: str = "fish") -> FishArt:
    """Build a FishArt with auto-measured width/height"""
    text = _clean(art)
    width, height = measure_art(text)
    return FishArt(art=text, width=width, height=height, name=name, category=category)


def get_fish_assets() -> List[FishArt]:
    """Built-in fish, auto-measured, in catalog order"""
    return [make_art(art, name, 'fish') for name, art in FISH_ART.items()]


def get_all_assets() -> List[FishArt]:
    """Built-in fish followed by large creatures and decorations"""
    arts = get_fish_assets()
    arts += [make_art(art, name, 'creature') for name, art in CREATURE_ART.items()]
    arts += [make_art(art, name, 'decoration') for name, art in DECORATION_ART.items()]
    return arts


# ============================================================================
# Asset Table
# ============================================================================

class AssetTable:
    """
    Immutable catalog of FishArt shared by every entity.

    Entities refer to art by index (fish) or by name (creatures, castle).
    Lookups never raise: unknown references resolve to None.
    """

    def __init__(self, arts: Iterable[FishArt]):
        self._arts: Tuple[FishArt, ...] = tuple(arts)
        self._by_name = {}
        for index, art in enumerate(self._arts):
            # First definition of a name wins
            if art.name and art.name not in self._by_name:
                self._by_name[art.name] = index
        self._fish_indices = tuple(
            i for i, art in enumerate(self._arts) if art.category == 'fish'
        )

    def __len__(self) -> int:
        return len(self._arts)

    def __iter__(self) -> Iterator[FishArt]:
        return iter(self._arts)

    def get(self, index) -> Optional[FishArt]:
        """Art at index, or None for anything that does not resolve"""
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            return None
        if 0 <= index < len(self._arts):
            return self._arts[index]
        return None

    def index_of(self, name: str) -> Optional[int]:
        return self._by_name.get(name)

    def named(self, name: str) -> Optional[FishArt]:
        index = self._by_name.get(name)
        return None if index is None else self._arts[index]

    @property
    def fish_indices(self) -> Tuple[int, ...]:
        """Indices of arts usable for fish and school members"""
        return self._fish_indices

    def extended(self, arts: Iterable[FishArt]) -> 'AssetTable':
        """New table with extra arts appended (indices of existing arts kept)"""
        return AssetTable(self._arts + tuple(arts))


def default_asset_table() -> AssetTable:
    """Asset table holding the complete built-in catalog"""
    return AssetTable(get_all_assets())


# ============================================================================
# Glyph Cells and Mirroring
# ============================================================================

_MIRROR_TABLE = str.maketrans(
    ''.join(a + b for a, b in MIRROR_PAIRS),
    ''.join(b + a for a, b in MIRROR_PAIRS),
)


def mirror_line(line: str) -> str:
    """Reverse a line and swap directional glyphs ('<' <-> '>', '/' <-> '\\', ...)"""
    return line[::-1].translate(_MIRROR_TABLE)


def normalized_rows(art: FishArt) -> List[str]:
    """
    Rows of the art clipped/padded to its declared footprint.

    Declared width/height are authoritative: longer lines and extra rows
    are cut, short lines and missing rows are padded with transparent cells.
    """
    width = max(art.width, 0)
    height = max(art.height, 0)
    lines = art.art.split("\n")[:height]
    rows = [line[:width].ljust(width, TRANSPARENT_GLYPH) for line in lines]
    rows += [TRANSPARENT_GLYPH * width] * (height - len(rows))
    return rows


def mirror_art(art: FishArt) -> List[str]:
    """Mirrored rows of the art (each row padded to width before reversal)"""
    return [mirror_line(row) for row in normalized_rows(art)]


@lru_cache(maxsize=256)
def art_cells(art: FishArt, mirrored: bool = False) -> np.ndarray:
    """
    Read-only (height, width) glyph array for an art block.

    Cached per (art, mirrored); FishArt is frozen so it is a safe key.
    """
    rows = mirror_art(art) if mirrored else normalized_rows(art)
    return text_cells(rows, max(art.width, 0))


def text_cells(rows: List[str], width: int) -> np.ndarray:
    """Read-only glyph array from equal-width rows"""
    cells = np.array([list(row) for row in rows], dtype='<U1').reshape(len(rows), width)
    cells.flags.writeable = False
    return cells
