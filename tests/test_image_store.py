from pathlib import Path

from PIL import Image

from utils.image_store import ImageStore, to_png_bytes


def test_path_for(tmp_path: Path) -> None:
    store = ImageStore(str(tmp_path / "maps"))
    assert store.path_for("1234") == tmp_path / "maps" / "1234.png"


def test_save_and_remove(tmp_path: Path) -> None:
    store = ImageStore(str(tmp_path / "maps"))
    img = Image.new("RGB", (4, 3), (255, 0, 0))

    path = store.save("chan1", img)

    assert path.is_file()
    with Image.open(path) as saved:
        assert saved.format == "PNG"
        assert saved.size == (4, 3)

    assert store.remove("chan1") is True
    assert not path.exists()
    assert store.remove("chan1") is False


def test_to_png_bytes() -> None:
    buf = to_png_bytes(Image.new("RGB", (2, 2)))
    assert buf.tell() == 0
    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"
