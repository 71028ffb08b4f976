from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from campaign_creatives.storage.asset_store import AssetStore, join_asset_path

logger = logging.getLogger(__name__)


class OutputSink(ABC):
    @abstractmethod
    def write(self, logical_path: str, data: bytes) -> str:
        """Persist *data* under *logical_path* and return where it was written."""
        raise NotImplementedError


class LocalOutputSink(OutputSink):
    """Writes creatives under *output_root*, optionally mirroring them to a remote store.

    Mirror uploads overwrite and are best-effort: failures are logged, never raised.
    """

    def __init__(self, output_root: Path, mirror: AssetStore | None = None):
        self.output_root = output_root
        self._mirror = mirror

    def write(self, logical_path: str, data: bytes) -> str:
        output_path = self.output_root / logical_path
        if not output_path.resolve().is_relative_to(self.output_root.resolve()):
            raise ValueError(f"Refusing to write {logical_path!r} outside {self.output_root}")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)

        if self._mirror is not None:
            remote_path = join_asset_path(self.output_root.name, logical_path)
            try:
                self._mirror.put(remote_path, data, overwrite=True)
                logger.info("Uploaded creative to %s", remote_path)
            except Exception as exc:
                logger.warning("Failed to upload creative %s: %s", remote_path, exc)
        return str(output_path)


def write_json(payload: dict, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def write_text(content: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
