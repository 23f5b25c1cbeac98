# mapgen/renderer.py
from __future__ import annotations

from typing import List, Sequence

from PIL import Image, ImageDraw, ImageFont

from mapgen.font_cache import FONT_NAME_FOR_MAP, FontProvider
from rpgmap.chit import Chit
from rpgmap.colors import BACKGROUND_COLOR, GRID_COLOR, RGB, TEXT_COLOR
from rpgmap.errors import FontNotLoaded, RenderFailure
from rpgmap.square_map import SquareMap

DEFAULT_GRID_SIZE = 32
IMAGE_MODE = "RGB"


class SquareMapImage:
    """
    Everything needed to draw one SquareMap: the board (grid + chits) with a
    legend stacked underneath, one row per chit in insertion order.
    """

    def __init__(
        self,
        square_map: SquareMap,
        grid_width: int = DEFAULT_GRID_SIZE,
        grid_height: int = DEFAULT_GRID_SIZE,
        background_color: RGB = BACKGROUND_COLOR,
        grid_color: RGB = GRID_COLOR,
        text_color: RGB = TEXT_COLOR,
        font_name: str = FONT_NAME_FOR_MAP,
    ):
        self.map = square_map
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.background_color = background_color
        self.grid_color = grid_color
        self.text_color = text_color
        self.font_name = font_name

    @property
    def width(self) -> int:
        return self.grid_width * self.map.width

    @property
    def height(self) -> int:
        return self.grid_height * self.map.height

    @property
    def chit_size(self) -> int:
        """Diameter of a chit circle."""
        return min(self.grid_width, self.grid_height) // 2

    def legend_height(self, num_of_chits: int) -> int:
        return num_of_chits * self.grid_height

    def render(self, fonts: FontProvider) -> Image.Image:
        # One locked read; everything below works on this snapshot
        chits = self.map.chits()

        try:
            font = fonts.load(self.font_name, 0.8 * self.chit_size)

            map_img = Image.new(IMAGE_MODE, (self.width, self.height), self.background_color)
            drw = ImageDraw.Draw(map_img)
            self._draw_grid(drw)
            self._draw_chits(drw, chits)

            legend = self._draw_legend(chits, font)

            dest = Image.new(IMAGE_MODE, (self.width, self.height + legend.height), self.background_color)
            dest.paste(map_img, (0, 0))
            if legend.height > 0:
                dest.paste(legend, (0, self.height))
            return dest
        except FontNotLoaded:
            raise
        except Exception as e:
            # oversized canvases raise OverflowError or MemoryError inside Pillow
            raise RenderFailure(f"failed to render {self.map}: {e}") from e

    # ------------------------- drawing steps -------------------------
    def _draw_grid(self, drw: ImageDraw.ImageDraw) -> None:
        w, h = self.width, self.height
        for i in range(self.map.height):
            y = i * self.grid_height
            drw.line([(0, y), (w, y)], fill=self.grid_color, width=1)
        for j in range(self.map.width):
            x = j * self.grid_width
            drw.line([(x, 0), (x, h)], fill=self.grid_color, width=1)

    def _draw_chits(self, drw: ImageDraw.ImageDraw, chits: Sequence[Chit]) -> None:
        # Chits sharing a cell are drawn over one another, later ones on top
        r = self.chit_size / 2.0
        for c in chits:
            cx = c.x * self.grid_width + self.grid_width / 2.0
            cy = c.y * self.grid_height + self.grid_height / 2.0
            _draw_circle(drw, cx, cy, r, c.color)

    def _draw_legend(self, chits: List[Chit], font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> Image.Image:
        img = Image.new(IMAGE_MODE, (self.width, self.legend_height(len(chits))), self.background_color)
        if not chits:
            return img

        drw = ImageDraw.Draw(img)
        x = self.grid_width / 2.0
        x_label = self.grid_width
        r = self.chit_size / 2.0
        for i, c in enumerate(chits):
            y = i * self.grid_height + self.grid_height / 2.0
            _draw_circle(drw, x, y, r, c.color)
            drw.text((x_label, y), c.name, fill=self.text_color, font=font, anchor="lm")
        return img


def _draw_circle(drw: ImageDraw.ImageDraw, cx: float, cy: float, r: float, color: RGB) -> None:
    drw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=color)


def render_square_map(square_map: SquareMap, fonts: FontProvider, **layout) -> Image.Image:
    return SquareMapImage(square_map, **layout).render(fonts)
