from __future__ import annotations

import os

from campaign_creatives.exceptions import ConfigurationError, GenerationError

from .base import GENERATION_SIZE, ImageProvider


class GeminiDeveloperProvider(ImageProvider):
    def __init__(self, model: str, api_key_env: str = "GEMINI_API_KEY"):
        self.model = model
        self.api_key = os.getenv(api_key_env)
        if not self.api_key:
            raise ConfigurationError(f"Missing API key environment variable: {api_key_env}")

        try:
            from google import genai  # type: ignore
        except ImportError as exc:
            raise ConfigurationError("Developer Gemini mode requires optional dependency: google-genai") from exc

        self._client = genai.Client(api_key=self.api_key)

    def generate_image(self, prompt: str, size: tuple[int, int] = GENERATION_SIZE) -> bytes:
        merged_prompt = f"{prompt}\nRequired output size target: {size[0]}x{size[1]}"

        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=[merged_prompt],
            )
        except Exception as exc:
            raise GenerationError(
                f"Gemini Developer API call failed for model '{self.model}': {exc}. "
                "Check your GEMINI_API_KEY, network connectivity, and that the model name is correct."
            ) from exc

        parts = getattr(response, "parts", None) or []
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            raw_bytes = getattr(inline_data, "data", None) if inline_data is not None else None
            if raw_bytes:
                return raw_bytes

        raise GenerationError(
            f"Gemini response from model '{self.model}' did not contain image data. "
            "Use an image-capable model such as gemini-2.5-flash-image."
        )
