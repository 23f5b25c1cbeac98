# rpgmap/square_map.py
from __future__ import annotations

import threading
from typing import Callable, Dict, List, Optional

from rpgmap.chit import Chit
from rpgmap.colors import RGB, random_chit_color
from rpgmap.errors import ChitNotFound, DuplicateName, InvalidDimension, OutOfRange

MIN_SIZE = 2


class SquareMap:
    """
    A fixed-size rectangular board and the chits placed on it.

    Chits live in one insertion-ordered dict keyed by name, which serves as
    both the ordered sequence and the name index. Every mutation and every
    multi-chit read holds `_lock` for its whole duration. Width and height
    never change; a resize is a new map.
    """

    def __init__(self, width: int, height: int):
        if width < MIN_SIZE:
            raise InvalidDimension("width", width)
        if height < MIN_SIZE:
            raise InvalidDimension("height", height)

        self._width = width
        self._height = height
        self._chits: Dict[str, Chit] = {}
        self._lock = threading.Lock()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def size_str(self) -> str:
        return f"{self._width} x {self._height}"

    def __str__(self) -> str:
        return f"SquareMap ({self.size_str()})"

    def num_of_chits(self) -> int:
        return len(self._chits)

    def __len__(self) -> int:
        return self.num_of_chits()

    def x_in_range(self, x: int) -> bool:
        return 0 <= x < self._width

    def y_in_range(self, y: int) -> bool:
        return 0 <= y < self._height

    def _check_in_range(self, x: int, y: int) -> None:
        if not self.x_in_range(x):
            raise OutOfRange("x", x, self._width)
        if not self.y_in_range(y):
            raise OutOfRange("y", y, self._height)

    # ---------------------------- queries ----------------------------
    def find_chit(self, name: str) -> Optional[Chit]:
        with self._lock:
            return self._chits.get(name)

    def chits(self) -> List[Chit]:
        """Snapshot of every chit, in insertion order."""
        with self._lock:
            return list(self._chits.values())

    def for_each_chit(self, f: Callable[[int, Chit], None]) -> None:
        # Visit a snapshot so `f` may call back into the map without deadlocking
        for i, c in enumerate(self.chits()):
            f(i, c)

    # --------------------------- mutations ---------------------------
    def add_chit(self, name: str, x: int, y: int, color: Optional[RGB] = None) -> Chit:
        with self._lock:
            if name in self._chits:
                raise DuplicateName(name)
            self._check_in_range(x, y)

            chit = Chit(name=name, x=x, y=y, color=color if color is not None else random_chit_color())
            self._chits[name] = chit
            return chit

    def delete_chit(self, name: str) -> None:
        with self._lock:
            if name not in self._chits:
                raise ChitNotFound(name)
            del self._chits[name]

    def move_chit(self, name: str, new_x: int, new_y: int) -> Chit:
        with self._lock:
            chit = self._chits.get(name)
            if chit is None:
                raise ChitNotFound(name)
            self._check_in_range(new_x, new_y)

            # Re-assigning an existing key keeps its insertion position
            moved = chit.moved_to(new_x, new_y)
            self._chits[name] = moved
            return moved
