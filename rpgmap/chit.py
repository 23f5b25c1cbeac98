# rpgmap/chit.py
from __future__ import annotations

from dataclasses import dataclass, replace

from rpgmap.colors import RGB


@dataclass(frozen=True)
class Chit:
    """
    A named token on the board. Coordinates are 0-based; everything shown to
    users is 1-based.
    """
    name: str
    x: int
    y: int
    color: RGB

    def coord_str(self) -> str:
        return f"({self.x + 1}, {self.y + 1})"

    def moved_to(self, x: int, y: int) -> Chit:
        return replace(self, x=x, y=y)

    def __str__(self) -> str:
        return f"{self.name} {self.coord_str()}"
