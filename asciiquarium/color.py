"""
Color mapper.

Runs the same compositing pass as the plain renderer, but keeps each
cell's glyph class and turns rows into (text, color) runs. The mask glyph
is opaque here: it hides whatever lies beneath with a background cell in
the palette's trail color, while the plain path lets it show through.
"""

from typing import List, NamedTuple, Union

from .assets import AssetTable
from .compositor import composite, render_to_string
from .data_types import GlyphClass, Palette, Theme
from .state import AquariumState


class ColoredRun(NamedTuple):
    """Consecutive glyphs sharing one color"""
    text: str
    color: str


def render_colored(state: AquariumState, assets: AssetTable, palette: Palette) -> List[ColoredRun]:
    """
    Render the grid as colored runs.

    Adjacent cells with the same color merge into one run. Every row's last
    run ends with a newline except the final row, so joining the run texts
    yields a (height x width) block.

    Returns:
        Runs in reading order; empty for a non-positive grid size
    """
    chars, classes = composite(state, assets, opaque_mask=True)
    colors = {glyph_class: palette.color_for(glyph_class) for glyph_class in GlyphClass}

    runs: List[ColoredRun] = []
    last_row = chars.shape[0] - 1
    for row_index, (row_chars, row_classes) in enumerate(zip(chars, classes)):
        text = []
        color = None
        for char, glyph_class in zip(row_chars, row_classes):
            cell_color = colors[GlyphClass(int(glyph_class))]
            if cell_color != color and text:
                runs.append(ColoredRun(''.join(text), color))
                text = []
            color = cell_color
            text.append(str(char))
        if row_index < last_row:
            text.append('\n')
        if text:
            runs.append(ColoredRun(''.join(text), color if color is not None else palette.body))
    return runs


def render_for_theme(state: AquariumState, assets: AssetTable, theme: Theme) -> Union[str, List[ColoredRun]]:
    """
    Plain string unless the theme enables color and supplies a palette.

    The color layer is never invoked without a palette.
    """
    if theme.enable_color and theme.palette is not None:
        return render_colored(state, assets, theme.palette)
    return render_to_string(state, assets)
