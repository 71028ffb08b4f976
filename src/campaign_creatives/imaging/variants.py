from __future__ import annotations

from PIL import Image, ImageOps

from campaign_creatives.exceptions import UnknownAspectError

# Declaration order is the order creatives are produced and listed in.
ASPECT_RATIOS: dict[str, tuple[int, int]] = {
    "1_1": (1024, 1024),
    "16_9": (2688, 1536),
    "9_16": (1440, 2560),
}


def aspect_keys() -> list[str]:
    return list(ASPECT_RATIOS)


def dimensions_for(aspect_key: str) -> tuple[int, int]:
    try:
        return ASPECT_RATIOS[aspect_key]
    except KeyError:
        raise UnknownAspectError(aspect_key) from None


def cover_fit(image: Image.Image, target_size: tuple[int, int]) -> Image.Image:
    """Scale *image* to cover *target_size* and center-crop the overflow.

    Always returns a new RGB image of exactly *target_size*; the input is not modified.
    """
    return ImageOps.fit(
        image.convert("RGB"),
        target_size,
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )
