"""Creative composition: cover-fit a source photo to an aspect canvas and burn in the message."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from campaign_creatives.exceptions import DecodeError, EncodeError
from campaign_creatives.imaging.text_overlay import draw_campaign_message
from campaign_creatives.imaging.variants import cover_fit, dimensions_for

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Creative:
    aspect_key: str
    width: int
    height: int
    data: bytes


def decode_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Source image could not be decoded: {exc}") from exc
    return image


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Creative could not be encoded as PNG: {exc}") from exc
    return buffer.getvalue()


def compose(source: bytes, aspect_key: str, message: str) -> Creative:
    width, height = dimensions_for(aspect_key)
    source_image = decode_image(source)

    canvas = cover_fit(source_image, (width, height))
    layout = draw_campaign_message(canvas, message)
    if layout is not None:
        logger.debug(
            "Placed %d message line(s) at (%.1f, %.1f) on %s canvas",
            len(layout.lines),
            layout.x,
            layout.y,
            aspect_key,
        )

    return Creative(aspect_key=aspect_key, width=width, height=height, data=encode_png(canvas))
