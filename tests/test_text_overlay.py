from PIL import Image, ImageDraw

from campaign_creatives.imaging.text_overlay import (
    BOTTOM_MARGIN_PX,
    draw_campaign_message,
    layout_message,
    load_message_font,
)

LONG_MESSAGE = (
    "Your cozy fall ritual starts here with warm drinks, soft light, crisp air "
    "and everything you need to make the season feel like home again this year"
)


def _draw(size: tuple[int, int]) -> ImageDraw.ImageDraw:
    return ImageDraw.Draw(Image.new("RGB", size))


def test_single_line_message_is_centered_and_bottom_anchored() -> None:
    size = (1024, 1024)
    layout = layout_message(_draw(size), "Hello", load_message_font(), size)

    assert layout is not None
    assert layout.lines == ["Hello"]
    assert abs((layout.x + layout.width / 2) - size[0] / 2) <= 1
    assert layout.y + layout.height == size[1] - BOTTOM_MARGIN_PX


def test_long_message_wraps_within_canvas_width() -> None:
    size = (1024, 1024)
    draw = _draw(size)
    font = load_message_font()
    layout = layout_message(draw, LONG_MESSAGE, font, size)

    assert layout is not None
    assert len(layout.lines) > 1
    assert " ".join(layout.lines) == LONG_MESSAGE
    for line in layout.lines:
        left, _, right, _ = draw.textbbox((0, 0), line, font=font)
        assert right - left <= size[0]
    assert layout.x >= 0
    assert layout.y + layout.height == size[1] - BOTTOM_MARGIN_PX


def test_oversized_word_is_split_instead_of_overflowing() -> None:
    size = (200, 400)
    draw = _draw(size)
    font = load_message_font()
    layout = layout_message(draw, "Supercalifragilisticexpialidocious", font, size)

    assert layout is not None
    assert len(layout.lines) > 1
    assert "".join(layout.lines) == "Supercalifragilisticexpialidocious"
    assert layout.width <= size[0]


def test_blank_message_draws_nothing() -> None:
    canvas = Image.new("RGB", (100, 100), (0, 0, 0))
    assert draw_campaign_message(canvas, "   ") is None
    assert canvas.getbbox() is None


def test_draw_places_white_ink_inside_layout_box() -> None:
    canvas = Image.new("RGB", (1024, 1024), (0, 0, 0))
    layout = draw_campaign_message(canvas, "Hello")

    assert layout is not None
    ink = canvas.convert("L").getbbox()
    assert ink is not None
    left, top, right, bottom = ink
    assert left >= layout.x - 2
    assert right <= layout.x + layout.width + 2
    assert top >= layout.y - 2
    assert bottom <= layout.y + layout.height + 2
    assert [band_max for _, band_max in canvas.getextrema()] == [255, 255, 255]
