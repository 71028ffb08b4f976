from __future__ import annotations

from abc import ABC, abstractmethod

# Generation is always square; the compositor's cover-fit adapts it to each aspect.
GENERATION_SIZE: tuple[int, int] = (1024, 1024)


class ImageProvider(ABC):
    @abstractmethod
    def generate_image(self, prompt: str, size: tuple[int, int] = GENERATION_SIZE) -> bytes:
        """Return the encoded bytes of exactly one image for *prompt*."""
        raise NotImplementedError
