# rpgmap/colors.py
import random
from typing import List, Optional, Tuple

from PIL import ImageColor

RGB = Tuple[int, int, int]

# Chit palette, in display order
CHIT_COLOR_NAMES: List[str] = [
    "deeppink",
    "red",
    "orange",
    "gold",
    "chocolate",
    "limegreen",
    "forestgreen",
    "dodgerblue",
    "darkorchid",
    "slategray",
]


def css3_name_to_rgb(name: str) -> RGB:
    """Resolve a CSS3 colour name (e.g. "dimgray") to an RGB triple."""
    return ImageColor.getrgb(name)[:3]


CHIT_COLORS: List[RGB] = [css3_name_to_rgb(n) for n in CHIT_COLOR_NAMES]

BACKGROUND_COLOR: RGB = css3_name_to_rgb("white")
GRID_COLOR: RGB = css3_name_to_rgb("dimgray")
TEXT_COLOR: RGB = css3_name_to_rgb("black")


def random_chit_color(rng: Optional[random.Random] = None) -> RGB:
    return (rng or random).choice(CHIT_COLORS)
