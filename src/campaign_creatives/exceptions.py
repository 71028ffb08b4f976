"""
Domain-specific exceptions for the campaign creatives pipeline.

Catching these at the CLI entry point allows clean exit codes and targeted error
messages.  All exceptions inherit from ``CreativeAutomationError`` so callers can
also use a single broad catch when needed.
"""

from __future__ import annotations


class CreativeAutomationError(Exception):
    """Base exception for all pipeline errors."""


class InvalidCampaignError(CreativeAutomationError, ValueError):
    """Raised when a brief cannot be parsed or breaks a campaign rule
    (for example, fewer than two products)."""


class UnknownAspectError(CreativeAutomationError, KeyError):
    """Raised when an aspect key is not part of the canvas table."""

    def __init__(self, aspect_key: str) -> None:
        super().__init__(aspect_key)
        self.aspect_key = aspect_key

    def __str__(self) -> str:
        return f"Unknown aspect ratio key: {self.aspect_key!r}"


class AssetListError(CreativeAutomationError):
    """Raised when the asset collection cannot be listed."""


class AssetFetchError(CreativeAutomationError):
    """Raised when a matched asset cannot be downloaded from the collection."""


class GenerationError(CreativeAutomationError):
    """Raised when a GenAI backend (Gemini, Vertex AI, OpenAI) fails or returns no image."""


class DecodeError(CreativeAutomationError):
    """Raised when source image bytes cannot be parsed as an image."""


class EncodeError(CreativeAutomationError):
    """Raised when a composed creative cannot be encoded."""


class ConfigurationError(CreativeAutomationError):
    """Raised when required configuration (env vars, optional SDKs) is missing."""
