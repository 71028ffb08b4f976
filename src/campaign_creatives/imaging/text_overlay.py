from __future__ import annotations

from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

MESSAGE_FONT_SIZE_PX = 64
BOTTOM_MARGIN_PX = 40
LINE_SPACING_RATIO = 0.35
TEXT_COLOR: tuple[int, int, int] = (255, 255, 255)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@dataclass(slots=True)
class TextLayout:
    """Visible bounding box of the wrapped message on the canvas."""

    lines: list[str]
    x: float
    y: float
    width: int
    height: int
    spacing: int


def load_message_font(size: int = MESSAGE_FONT_SIZE_PX) -> Font:
    """Pillow's built-in face. Scalable when Pillow has FreeType, bitmap otherwise."""
    return ImageFont.load_default(size=size)


def _wrap_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: Font,
    max_width: int,
) -> list[str]:
    if max_width <= 0:
        return [text] if text else []

    def split_oversized_word(word: str) -> list[str]:
        chunks: list[str] = []
        current = ""
        for character in word:
            candidate = current + character
            candidate_bbox = draw.textbbox((0, 0), candidate, font=font)
            candidate_width = candidate_bbox[2] - candidate_bbox[0]
            if candidate_width <= max_width or not current:
                current = candidate
            else:
                chunks.append(current)
                current = character
        if current:
            chunks.append(current)
        return chunks

    words = text.split()
    lines: list[str] = []
    current_line: list[str] = []

    for word in words:
        candidate = " ".join([*current_line, word])
        bbox = draw.textbbox((0, 0), candidate, font=font)
        width = bbox[2] - bbox[0]
        if width <= max_width:
            current_line.append(word)
            continue

        if current_line:
            lines.append(" ".join(current_line))
            current_line = []

        word_bbox = draw.textbbox((0, 0), word, font=font)
        if word_bbox[2] - word_bbox[0] <= max_width:
            current_line = [word]
        else:
            *full_chunks, tail = split_oversized_word(word)
            lines.extend(full_chunks)
            current_line = [tail]

    if current_line:
        lines.append(" ".join(current_line))
    return lines


def _line_height(draw: ImageDraw.ImageDraw, font: Font) -> int:
    bbox = draw.textbbox((0, 0), "Ag", font=font)
    return int(bbox[3] - bbox[1])


def layout_message(
    draw: ImageDraw.ImageDraw,
    message: str,
    font: Font,
    canvas_size: tuple[int, int],
    margin_px: int = BOTTOM_MARGIN_PX,
) -> TextLayout | None:
    """Wrap *message* to the canvas width and anchor it bottom-center.

    The returned box is centered horizontally and its bottom edge sits
    *margin_px* above the canvas bottom. Returns ``None`` for a blank message.
    """
    width, height = canvas_size
    lines = _wrap_text(draw, message, font, width)
    if not lines:
        return None

    spacing = int(_line_height(draw, font) * LINE_SPACING_RATIO)
    left, top, right, bottom = draw.multiline_textbbox(
        (0, 0), "\n".join(lines), font=font, spacing=spacing, align="center"
    )
    text_width = int(right - left)
    text_height = int(bottom - top)
    return TextLayout(
        lines=lines,
        x=(width - text_width) / 2,
        y=height - text_height - margin_px,
        width=text_width,
        height=text_height,
        spacing=spacing,
    )


def draw_campaign_message(
    canvas: Image.Image,
    message: str,
    font: Font | None = None,
    text_color: tuple[int, int, int] = TEXT_COLOR,
    margin_px: int = BOTTOM_MARGIN_PX,
) -> TextLayout | None:
    """Rasterize *message* onto *canvas* in place and return where it landed."""
    font = font or load_message_font()
    draw = ImageDraw.Draw(canvas)
    layout = layout_message(draw, message, font, canvas.size, margin_px)
    if layout is None:
        return None

    # multiline_textbbox reports the ink offset from the anchor; shift so the ink box lands on (x, y).
    left, top, _, _ = draw.multiline_textbbox(
        (0, 0), "\n".join(layout.lines), font=font, spacing=layout.spacing, align="center"
    )
    draw.multiline_text(
        (layout.x - left, layout.y - top),
        "\n".join(layout.lines),
        fill=text_color,
        font=font,
        spacing=layout.spacing,
        align="center",
    )
    return layout
