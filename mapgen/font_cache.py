# mapgen/font_cache.py
from __future__ import annotations

import io
import threading
from pathlib import Path
from typing import Dict, Protocol

from PIL import ImageFont

from rpgmap.errors import FontNotLoaded

# Logical font name the map legend is drawn with
FONT_NAME_FOR_MAP = "normal"


class FontProvider(Protocol):
    def load(self, name: str, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont: ...


class FontCache:
    """
    Logical font name -> TrueType data, read once at startup.

    Pillow binds a size when it opens a font, so `load` opens the stored data
    at the requested size. Each call gets its own font object, which keeps
    concurrent renders from sharing a FreeType face.
    """

    def __init__(self):
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def store(self, name: str, data: bytes) -> None:
        with self._lock:
            self._data[name] = data

    def store_font_data_from_file(self, font_path: str, name: str = FONT_NAME_FOR_MAP) -> None:
        """Read a TrueType file and store it under `name`. Raises OSError if unreadable."""
        data = Path(font_path).read_bytes()
        # Parse once now so a broken file fails at startup, not on first render
        ImageFont.truetype(io.BytesIO(data), 10)
        self.store(name, data)

    def load(self, name: str, size: float) -> ImageFont.FreeTypeFont:
        with self._lock:
            data = self._data.get(name)
        if data is None:
            raise FontNotLoaded(name)
        return ImageFont.truetype(io.BytesIO(data), max(1, int(round(size))))

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._data
