# rpgmap/errors.py
from __future__ import annotations


class MapError(Exception):
    """Base class for every error raised by the map core."""


class InvalidDimension(MapError):
    def __init__(self, axis: str, value: int):
        self.axis = axis
        self.value = value
        super().__init__(f"{axis} must be greater than or equal to 2 ({value})")


class DuplicateName(MapError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'chit "{name}" already exists')


class OutOfRange(MapError):
    """
    A coordinate fell outside the map. `value` is 0-based; the message shows
    it the way users type it (1-based).
    """
    def __init__(self, axis: str, value: int, limit: int):
        self.axis = axis
        self.value = value
        self.limit = limit
        super().__init__(f"{axis} is out of range: {value + 1} (1-{limit})")


class NotFound(MapError):
    pass


class ChitNotFound(NotFound):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"chit not found: {name}")


class MapNotFound(NotFound):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"map not found: {key}")


class FontNotLoaded(MapError):
    def __init__(self, font_name: str):
        self.font_name = font_name
        super().__init__(f"font not found: {font_name}")


class RenderFailure(MapError):
    pass
