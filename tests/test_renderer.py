import pytest
from PIL import Image

from mapgen.font_cache import FONT_NAME_FOR_MAP
from mapgen.renderer import SquareMapImage, render_square_map
from rpgmap.colors import BACKGROUND_COLOR, GRID_COLOR
from rpgmap.errors import FontNotLoaded, RenderFailure
from rpgmap.square_map import SquareMap

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def _two_chit_map() -> SquareMap:
    m = SquareMap(4, 3)
    m.add_chit("A", 0, 0, color=RED)
    m.add_chit("B", 1, 1, color=BLUE)
    return m


def test_layer_sizes(fonts) -> None:
    m = _two_chit_map()
    smi = SquareMapImage(m, grid_width=20, grid_height=30)
    assert (smi.width, smi.height) == (80, 90)
    assert smi.legend_height(m.num_of_chits()) == 60

    img = smi.render(fonts)
    assert isinstance(img, Image.Image)
    assert img.mode == "RGB"
    assert img.size == (80, 90 + 60)


def test_deleting_a_chit_halves_the_legend(fonts) -> None:
    m = _two_chit_map()
    before = render_square_map(m, fonts)
    m.delete_chit("B")
    after = render_square_map(m, fonts)

    map_height = 32 * 3
    assert before.height - map_height == 2 * 32
    assert after.height - map_height == 32
    assert before.width == after.width == 32 * 4


def test_empty_map_has_no_legend(fonts) -> None:
    img = render_square_map(SquareMap(3, 2), fonts)
    assert img.size == (96, 64)


def test_background_and_grid(fonts) -> None:
    img = render_square_map(SquareMap(3, 3), fonts)
    # cell interiors are background
    assert img.getpixel((16, 16)) == BACKGROUND_COLOR
    # row and column boundaries are grid lines
    assert img.getpixel((16, 32)) == GRID_COLOR
    assert img.getpixel((32, 16)) == GRID_COLOR
    assert img.getpixel((16, 0)) == GRID_COLOR
    assert img.getpixel((0, 16)) == GRID_COLOR


def test_chits_are_drawn_in_their_cells(fonts) -> None:
    img = render_square_map(_two_chit_map(), fonts)
    assert img.getpixel((16, 16)) == RED
    assert img.getpixel((48, 48)) == BLUE
    # diameter is half the cell: the cell corner area stays background
    assert img.getpixel((4, 4)) == BACKGROUND_COLOR
    assert img.getpixel((36, 36)) == BACKGROUND_COLOR


def test_later_chit_covers_earlier_one_in_same_cell(fonts) -> None:
    m = SquareMap(2, 2)
    m.add_chit("under", 0, 0, color=RED)
    m.add_chit("over", 0, 0, color=BLUE)
    img = render_square_map(m, fonts)
    assert img.getpixel((16, 16)) == BLUE


def test_legend_rows_follow_insertion_order(fonts) -> None:
    img = render_square_map(_two_chit_map(), fonts)
    map_height = 32 * 3
    # swatch of row i sits at (grid_width / 2, map_height + i * grid_height + grid_height / 2)
    assert img.getpixel((16, map_height + 16)) == RED
    assert img.getpixel((16, map_height + 32 + 16)) == BLUE
    # legend has no grid lines
    assert img.getpixel((16, map_height + 32)) == BACKGROUND_COLOR


def test_legend_text_is_drawn_right_of_swatch(fonts) -> None:
    m = SquareMap(6, 2)
    m.add_chit("WWWWWW", 0, 0, color=RED)
    img = render_square_map(m, fonts)
    legend = img.crop((32, 64, img.width, 96))
    assert any(px != BACKGROUND_COLOR for px in legend.getdata())


def test_font_is_requested_by_logical_name(fonts) -> None:
    render_square_map(_two_chit_map(), fonts)
    name, size = fonts.requests[0]
    assert name == FONT_NAME_FOR_MAP
    assert size == pytest.approx(0.8 * 16)


def test_missing_font_fails_the_render(no_fonts) -> None:
    with pytest.raises(FontNotLoaded):
        render_square_map(_two_chit_map(), no_fonts)


def test_missing_font_fails_even_without_chits(no_fonts) -> None:
    with pytest.raises(FontNotLoaded):
        render_square_map(SquareMap(2, 2), no_fonts)


def test_drawing_errors_become_render_failure(fonts) -> None:
    m = SquareMap(2, 2)
    m.add_chit("A", 0, 0, color=RED)
    smi = SquareMapImage(m, background_color="not-a-colour")  # type: ignore[arg-type]
    with pytest.raises(RenderFailure):
        smi.render(fonts)


def test_render_does_not_mutate_map(fonts) -> None:
    m = _two_chit_map()
    before = m.chits()
    render_square_map(m, fonts)
    assert m.chits() == before


def test_oversized_canvas_becomes_render_failure(fonts) -> None:
    # valid dimensions, but far wider than any Pillow canvas
    m = SquareMap(70_000_000, 2)
    with pytest.raises(RenderFailure):
        render_square_map(m, fonts)


class BrokenFonts:
    def load(self, name: str, size: float):
        raise OSError("cannot open resource")


def test_font_provider_errors_become_render_failure() -> None:
    with pytest.raises(RenderFailure) as exc_info:
        render_square_map(_two_chit_map(), BrokenFonts())
    assert isinstance(exc_info.value.__cause__, OSError)
