from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from campaign_creatives.exceptions import AssetFetchError, AssetListError, GenerationError
from campaign_creatives.models.brief import ProductBrief
from campaign_creatives.prompts.builder import build_generation_prompt
from campaign_creatives.providers.base import GENERATION_SIZE, ImageProvider
from campaign_creatives.storage.asset_store import AssetEntry, AssetStore, join_asset_path

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg"})

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass(slots=True)
class ResolvedSource:
    product: ProductBrief
    data: bytes
    provenance: str
    asset_name: str | None = None


def is_image_name(name: str) -> bool:
    return PurePosixPath(name).suffix.lower() in IMAGE_EXTENSIONS


def normalize_product_name(name: str) -> str:
    return _WHITESPACE.sub("", name)


def generated_asset_name(product_name: str) -> str:
    safe_name = _UNSAFE_FILENAME_CHARS.sub("", _WHITESPACE.sub("_", product_name.strip()))
    return f"{safe_name or 'product'}_gen.png"


def find_matching_asset(entries: list[AssetEntry], product_name: str) -> str | None:
    """Return the first image whose stem contains the whitespace-free product name.

    Matching is case-insensitive; candidates are tried in lexicographic order
    so the result does not depend on how the store orders its listing.
    """
    needle = normalize_product_name(product_name).lower()
    if not needle:
        return None

    candidates = sorted(
        (entry.name for entry in entries if entry.is_file and is_image_name(entry.name)),
        key=lambda name: (name.lower(), name),
    )
    for name in candidates:
        if needle in PurePosixPath(name).stem.lower():
            return name
    return None


class AssetResolver:
    """Find a product's source image in the asset collection, or generate one."""

    def __init__(
        self,
        store: AssetStore,
        provider: ImageProvider,
        assets_dir: str = "",
        write_back: bool = True,
    ) -> None:
        self.store = store
        self.provider = provider
        self.assets_dir = assets_dir
        self.write_back = write_back

    def _fetch(self, name: str) -> bytes:
        path = join_asset_path(self.assets_dir, name)
        try:
            return self.store.get(path)
        except Exception as exc:
            raise AssetFetchError(f"Failed to download asset {path}: {exc}") from exc

    def _list_assets(self) -> list[AssetEntry]:
        try:
            return self.store.list(self.assets_dir)
        except Exception as exc:
            raise AssetListError(f"Failed to list assets in {self.assets_dir or '/'}: {exc}") from exc

    def _generate(self, product: ProductBrief) -> bytes:
        try:
            return self.provider.generate_image(build_generation_prompt(product), GENERATION_SIZE)
        except GenerationError:
            raise
        except Exception as exc:
            raise GenerationError(f"Image generation failed for product {product.name}: {exc}") from exc

    def _store_generated(self, product: ProductBrief, data: bytes) -> str | None:
        path = join_asset_path(self.assets_dir, generated_asset_name(product.name))
        try:
            stored_path = self.store.put(path, data, overwrite=False)
        except Exception as exc:
            logger.warning("Failed to store generated asset for %s at %s: %s", product.name, path, exc)
            return None
        logger.info("Stored generated asset for %s at %s", product.name, stored_path)
        return PurePosixPath(stored_path).name

    def resolve(self, product: ProductBrief) -> ResolvedSource:
        if product.asset:
            logger.info("Using brief-assigned asset %s for product %s", product.asset, product.name)
            return ResolvedSource(product, self._fetch(product.asset), "found", product.asset)

        match = find_matching_asset(self._list_assets(), product.name)
        if match is not None:
            logger.info("Reusing asset %s for product %s", match, product.name)
            return ResolvedSource(product, self._fetch(match), "found", match)

        logger.info("No asset found for product %s. Generating one.", product.name)
        data = self._generate(product)
        stored_name = self._store_generated(product, data) if self.write_back else None
        return ResolvedSource(product, data, "generated", stored_name)
