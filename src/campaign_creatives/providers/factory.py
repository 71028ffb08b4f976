from __future__ import annotations

from .base import ImageProvider
from .gemini_developer import GeminiDeveloperProvider
from .gemini_vertex import GeminiVertexProvider
from .mock import MockImageProvider
from .openai_images import OpenAIImageProvider

DEFAULT_MODELS: dict[str, str] = {
    "developer": "gemini-2.5-flash-image",
    "vertex": "gemini-2.5-flash-image",
    "openai": "dall-e-3",
}


def create_provider(provider: str, backend: str, model: str | None = None) -> ImageProvider:
    if provider == "mock":
        return MockImageProvider()
    if provider != "real":
        raise ValueError(f"Unknown provider mode: {provider}")
    if backend not in DEFAULT_MODELS:
        raise ValueError(f"Unknown image backend: {backend}")

    model = model or DEFAULT_MODELS[backend]
    if backend == "developer":
        return GeminiDeveloperProvider(model=model)
    if backend == "vertex":
        return GeminiVertexProvider(model=model)
    return OpenAIImageProvider(model=model)
