"""Asset collections the pipeline reads source images from and caches generated images into.

Paths are POSIX-style strings relative to the store root (``"assets/coffee.png"``),
so the same resolver code runs against a local folder or an S3 prefix.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AssetEntry:
    name: str
    is_file: bool


def join_asset_path(folder: str, name: str) -> str:
    folder = folder.strip("/")
    return f"{folder}/{name}" if folder else name


def autorename_candidates(path: str) -> Iterator[str]:
    """Yield ``path``, then ``stem (1).ext``, ``stem (2).ext``, ... in the same folder."""
    yield path
    posix = PurePosixPath(path)
    counter = 1
    while True:
        yield str(posix.with_name(f"{posix.stem} ({counter}){posix.suffix}"))
        counter += 1


class AssetStore(ABC):
    @abstractmethod
    def list(self, folder: str) -> list[AssetEntry]:
        raise NotImplementedError

    @abstractmethod
    def get(self, path: str) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def put(self, path: str, data: bytes, overwrite: bool = False) -> str:
        """Store *data* at *path* and return the path actually written.

        With ``overwrite=False`` an existing entry is never replaced: the new
        entry is auto-renamed instead.
        """
        raise NotImplementedError


class LocalAssetStore(AssetStore):
    def __init__(self, root: Path):
        self.root = root

    def _local_path(self, path: str) -> Path:
        return self.root / path.strip("/")

    def list(self, folder: str) -> list[AssetEntry]:
        return [AssetEntry(name=entry.name, is_file=entry.is_file()) for entry in self._local_path(folder).iterdir()]

    def get(self, path: str) -> bytes:
        return self._local_path(path).read_bytes()

    def put(self, path: str, data: bytes, overwrite: bool = False) -> str:
        self._local_path(path).parent.mkdir(parents=True, exist_ok=True)
        if overwrite:
            self._local_path(path).write_bytes(data)
            return path

        for candidate in autorename_candidates(path):
            try:
                with self._local_path(candidate).open("xb") as handle:
                    handle.write(data)
            except FileExistsError:
                continue
            if candidate != path:
                logger.debug("Asset %s exists, stored as %s", path, candidate)
            return candidate
