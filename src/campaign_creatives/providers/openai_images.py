from __future__ import annotations

import base64
import os

from campaign_creatives.exceptions import ConfigurationError, GenerationError

from .base import GENERATION_SIZE, ImageProvider


class OpenAIImageProvider(ImageProvider):
    def __init__(self, model: str = "dall-e-3", api_key_env: str = "OPENAI_API_KEY"):
        self.model = model
        self.api_key = os.getenv(api_key_env)
        if not self.api_key:
            raise ConfigurationError(f"Missing API key environment variable: {api_key_env}")

        try:
            from openai import OpenAI  # type: ignore
        except ImportError as exc:
            raise ConfigurationError("OpenAI mode requires optional dependency: openai") from exc

        self._client = OpenAI(api_key=self.api_key)

    def generate_image(self, prompt: str, size: tuple[int, int] = GENERATION_SIZE) -> bytes:
        try:
            response = self._client.images.generate(
                model=self.model,
                prompt=prompt,
                n=1,
                size=f"{size[0]}x{size[1]}",
                response_format="b64_json",
            )
        except Exception as exc:
            raise GenerationError(
                f"OpenAI Images API call failed for model '{self.model}': {exc}. "
                "Check your OPENAI_API_KEY and that the model supports the requested size."
            ) from exc

        b64 = response.data[0].b64_json if response.data else None
        if not b64:
            raise GenerationError(f"OpenAI response from model '{self.model}' did not contain image data.")
        return base64.b64decode(b64)
