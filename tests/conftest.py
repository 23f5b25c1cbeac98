from typing import List, Tuple

import pytest
from PIL import ImageFont

from rpgmap.errors import FontNotLoaded
from rpgmap.registry import MapRegistry
from rpgmap.square_map import SquareMap


class DefaultFonts:
    """FontProvider backed by Pillow's bundled font; records what was asked for."""

    def __init__(self):
        self.requests: List[Tuple[str, float]] = []

    def load(self, name: str, size: float) -> ImageFont.ImageFont:
        self.requests.append((name, size))
        return ImageFont.load_default(size=max(1, int(size)))


class NoFonts:
    def load(self, name: str, size: float) -> ImageFont.ImageFont:
        raise FontNotLoaded(name)


@pytest.fixture
def fonts() -> DefaultFonts:
    return DefaultFonts()


@pytest.fixture
def no_fonts() -> NoFonts:
    return NoFonts()


@pytest.fixture
def square_map() -> SquareMap:
    return SquareMap(10, 10)


@pytest.fixture
def registry() -> MapRegistry:
    return MapRegistry()
