"""Pillow renderer for the visibility window.

Draws the square neighborhood around the player: one circle per visible cache
labelled with its current value, blue when the cache is interactive, gray when
it is out of reach or already emptied, and the player marker at the center.
Rows are drawn north-up, so larger ``i`` appears higher in the image.
"""

import colorsys
from functools import lru_cache
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from coin_grid.state import State
from coin_grid.visibility import CellView, visible_views

DEFAULT_RESOLUTION = 640

RGBA = Tuple[int, int, int, int]

BACKGROUND_COLOR: RGBA = (240, 236, 226, 255)
GRID_COLOR: RGBA = (220, 214, 200, 255)
INTERACTIVE_OUTLINE: RGBA = (0, 0, 255, 255)
READ_ONLY_FILL: RGBA = (204, 204, 204, 160)
READ_ONLY_OUTLINE: RGBA = (128, 128, 128, 255)
EMPTY_FILL: RGBA = (170, 170, 170, 255)
PLAYER_COLOR: RGBA = (220, 40, 40, 255)
RANGE_COLOR: RGBA = (220, 40, 40, 90)
TEXT_COLOR: RGBA = (20, 20, 20, 255)


@lru_cache(maxsize=64)
def value_to_color(value: int) -> RGBA:
    """Deterministically map a coin value to a fill color.

    Each doubling rotates the hue, so equal values share a color and merge
    candidates are easy to spot.
    """
    exponent = max(value, 1).bit_length() - 1
    h = (0.62 + 0.11 * exponent) % 1.0
    r, g, b = colorsys.hsv_to_rgb(h, 0.65, 0.95)
    return int(r * 255), int(g * 255), int(b * 255), 255


def _cell_box(
    view: CellView, state: State, radius: int, cell_size: int
) -> Tuple[int, int, int, int]:
    player = state.player.position
    col = view.cell.j - player.j + radius
    row = player.i - view.cell.i + radius
    x0, y0 = col * cell_size, row * cell_size
    return x0, y0, x0 + cell_size - 1, y0 + cell_size - 1


def _style(view: CellView) -> Tuple[RGBA, RGBA]:
    if view.value == 0:
        return EMPTY_FILL, READ_ONLY_OUTLINE
    if view.interactive:
        return value_to_color(view.value), INTERACTIVE_OUTLINE
    return READ_ONLY_FILL, READ_ONLY_OUTLINE


def render(
    state: State,
    resolution: int = DEFAULT_RESOLUTION,
    radius: Optional[int] = None,
    views: Optional[Iterable[CellView]] = None,
    show_grid: bool = True,
) -> Image.Image:
    """Render the window around the player as an RGBA image.

    Args:
        state: State whose player centers the image.
        resolution: Target width/height in pixels (rounded down to whole cells).
        radius: Chebyshev radius in cells; defaults to the configured
            neighborhood size.
        views: Precomputed views (e.g. from a live ``VisibilityWindow``);
            computed from ``state`` when omitted.
        show_grid: Draw faint cell boundaries.
    """
    if radius is None:
        radius = state.config.neighborhood_size
    span = 2 * radius + 1
    cell_size = max(resolution // span, 1)
    size = span * cell_size
    img = Image.new("RGBA", (size, size), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(img, "RGBA")
    font = ImageFont.load_default()

    if show_grid and cell_size >= 4:
        for k in range(span + 1):
            offset = k * cell_size
            draw.line([(offset, 0), (offset, size)], fill=GRID_COLOR)
            draw.line([(0, offset), (size, offset)], fill=GRID_COLOR)

    if views is None:
        views = visible_views(state, radius)

    margin = max(cell_size // 8, 1)
    for view in views:
        x0, y0, x1, y1 = _cell_box(view, state, radius, cell_size)
        if x0 < 0 or y0 < 0 or x1 >= size or y1 >= size:
            continue
        fill, outline = _style(view)
        draw.ellipse((x0 + margin, y0 + margin, x1 - margin, y1 - margin), fill=fill, outline=outline)
        if cell_size >= 12:
            draw.text(((x0 + x1) / 2, (y0 + y1) / 2), str(view.value), fill=TEXT_COLOR, font=font, anchor="mm")

    center = radius * cell_size + cell_size / 2
    reach = state.config.player_range_meters / 111_320.0 / state.config.cell_degrees * cell_size
    draw.ellipse((center - reach, center - reach, center + reach, center + reach), outline=RANGE_COLOR)
    marker = max(cell_size / 3, 2)
    draw.ellipse((center - marker, center - marker, center + marker, center + marker), fill=PLAYER_COLOR)
    return img


class TextureRenderer:
    resolution: int
    radius: Optional[int]
    show_grid: bool

    def __init__(
        self,
        resolution: int = DEFAULT_RESOLUTION,
        radius: Optional[int] = None,
        show_grid: bool = True,
    ):
        self.resolution = resolution
        self.radius = radius
        self.show_grid = show_grid

    def render(self, state: State, views: Optional[Iterable[CellView]] = None) -> Image.Image:
        return render(
            state,
            resolution=self.resolution,
            radius=self.radius,
            views=views,
            show_grid=self.show_grid,
        )
