# rpgmap/registry.py
from __future__ import annotations

import threading
from typing import Dict, Optional

from rpgmap.square_map import SquareMap


class MapRegistry:
    """
    Session key (e.g. a channel id) -> SquareMap.

    The table has its own lock, never held together with a map's lock, so
    replacing one channel's map does not block work on another's.
    """

    def __init__(self):
        self._maps: Dict[str, SquareMap] = {}
        self._lock = threading.Lock()

    def initialize(self, key: str, width: int, height: int) -> SquareMap:
        """Create a fresh map for `key`, discarding any previous one."""
        # Built outside the lock; InvalidDimension leaves the table untouched
        new_map = SquareMap(width, height)
        with self._lock:
            self._maps[key] = new_map
        return new_map

    def clear(self, key: str) -> bool:
        with self._lock:
            return self._maps.pop(key, None) is not None

    def get(self, key: str) -> Optional[SquareMap]:
        with self._lock:
            return self._maps.get(key)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._maps)
