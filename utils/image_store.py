# utils/image_store.py
import io
import logging
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)


def to_png_bytes(image: Image.Image) -> io.BytesIO:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    buf.seek(0)
    return buf


class ImageStore:
    """
    Keeps the latest rendered map of each channel as <image_dir>/<key>.png.
    Files are written for upload and never read back.
    """

    def __init__(self, image_dir: str):
        self.image_dir = Path(image_dir)

    def path_for(self, key: str) -> Path:
        return self.image_dir / f"{key}.png"

    def save(self, key: str, image: Image.Image) -> Path:
        self.image_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        image.save(path, format="PNG")
        logger.debug(f"Saved map image for {key} -> {path}")
        return path

    def remove(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug(f"Removed map image for {key} ({path})")
        return True
