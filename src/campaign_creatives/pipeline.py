from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from campaign_creatives.assets.resolver import AssetResolver
from campaign_creatives.brief_loader import load_and_validate_brief
from campaign_creatives.exceptions import ConfigurationError, InvalidCampaignError
from campaign_creatives.imaging.compositor import Creative, compose
from campaign_creatives.imaging.variants import ASPECT_RATIOS, aspect_keys
from campaign_creatives.models.brief import CampaignBrief
from campaign_creatives.output.manifest import CampaignManifest, ProductManifestEntry, utc_now_iso
from campaign_creatives.output.metrics import RunMetrics, Timer
from campaign_creatives.output.writer import LocalOutputSink, OutputSink, write_json, write_text
from campaign_creatives.providers.factory import create_provider
from campaign_creatives.storage.asset_store import AssetStore, LocalAssetStore
from campaign_creatives.storage.s3_store import S3AssetStore

logger = logging.getLogger(__name__)

MIN_PRODUCTS = 2
DEFAULT_CAMPAIGN_MESSAGE = "Your Campaign Message Here"
CREATIVE_FILENAME = "creative.png"

Compositor = Callable[[bytes, str, str], Creative]


@dataclass(slots=True)
class RunConfig:
    brief_path: Path
    assets: str
    output_root: Path
    provider_mode: str = "mock"
    image_backend: str = "developer"
    image_model: str | None = None
    asset_store: str = "local"
    mirror_output: bool = False
    write_back: bool = True


def product_dir_name(product_name: str) -> str:
    """Spaces become underscores; path separators too, so each product is exactly one directory."""
    name = re.sub(r"[\s/\\]+", "_", product_name.strip())
    if name.strip(".") == "":
        return "product"
    return name


def creative_path(product_name: str, aspect_key: str) -> str:
    return f"{product_dir_name(product_name)}/{aspect_key}/{CREATIVE_FILENAME}"


def campaign_message(brief: CampaignBrief) -> str:
    message = (brief.campaign_message or "").strip()
    return message or DEFAULT_CAMPAIGN_MESSAGE


def validate_campaign(brief: CampaignBrief) -> None:
    if len(brief.products) < MIN_PRODUCTS:
        raise InvalidCampaignError(
            f"At least {MIN_PRODUCTS} products are required in the brief, got {len(brief.products)}."
        )


def run_campaign(
    brief: CampaignBrief,
    resolver: AssetResolver,
    sink: OutputSink,
    compositor: Compositor = compose,
) -> CampaignManifest:
    """Produce one creative per product per aspect ratio, strictly in order.

    Products follow brief order and aspects follow :data:`ASPECT_RATIOS` order.
    The first error from the resolver or compositor aborts the run; creatives
    already handed to *sink* stay where they are.
    """
    validate_campaign(brief)
    message = campaign_message(brief)

    manifest = CampaignManifest(
        campaign_message=message,
        started_at=utc_now_iso(),
        campaign_id=brief.campaign_id,
        target_region=brief.target_region,
        target_audience=brief.target_audience,
        extra=dict(brief.model_extra or {}),
    )

    for product in brief.products:
        source = resolver.resolve(product)
        entry = ProductManifestEntry(
            product_name=product.name,
            provenance=source.provenance,
            source_asset=source.asset_name,
        )

        for aspect_key in aspect_keys():
            creative = compositor(source.data, aspect_key, message)
            logical_path = creative_path(product.name, aspect_key)
            entry.output_files[aspect_key] = sink.write(logical_path, creative.data)
            logger.info("Saved %s creative for %s: %s", aspect_key, product.name, logical_path)

        manifest.products.append(entry)

    manifest.finished_at = utc_now_iso()
    return manifest


def _build_asset_store(config: RunConfig) -> tuple[AssetStore, str]:
    """Return the asset store and the folder inside it that holds product images."""
    if config.asset_store == "local":
        return LocalAssetStore(Path(config.assets)), ""
    if config.asset_store == "s3":
        s3_store = S3AssetStore.from_env()
        if s3_store is None:
            raise ConfigurationError(
                "--asset-store s3 requires AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and CREATIVES_S3_BUCKET."
            )
        return s3_store, config.assets.strip("/")
    raise ConfigurationError(f"Unknown asset store: {config.asset_store}")


def _build_output_mirror(config: RunConfig, asset_store: AssetStore) -> AssetStore | None:
    if not config.mirror_output:
        return None
    if isinstance(asset_store, S3AssetStore):
        return asset_store
    mirror = S3AssetStore.from_env()
    if mirror is None:
        raise ConfigurationError(
            "--mirror-output requires AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and CREATIVES_S3_BUCKET."
        )
    return mirror


def _output_readme(manifest: CampaignManifest) -> str:
    lines = [
        "# Campaign Creatives",
        "",
        f"Campaign message: {manifest.campaign_message}",
        "",
        "Creatives are organized as `<Product_Name>/<aspect>/creative.png`:",
        "",
    ]
    for aspect_key, (width, height) in ASPECT_RATIOS.items():
        lines.append(f"- `{aspect_key}`: {width}x{height}")
    lines.extend(["", "## Products", ""])
    for entry in manifest.products:
        source = f" ({entry.source_asset})" if entry.source_asset else ""
        lines.append(f"- {entry.product_name}: source image {entry.provenance}{source}")
    lines.extend(["", "See `manifest.json` and `metrics.json` for run details.", ""])
    return "\n".join(lines)


def run_pipeline(config: RunConfig) -> tuple[dict, dict]:
    timer = Timer()
    brief = load_and_validate_brief(config.brief_path)
    validate_campaign(brief)

    provider = create_provider(config.provider_mode, config.image_backend, config.image_model)
    asset_store, assets_dir = _build_asset_store(config)
    resolver = AssetResolver(asset_store, provider, assets_dir=assets_dir, write_back=config.write_back)
    sink = LocalOutputSink(config.output_root, mirror=_build_output_mirror(config, asset_store))

    logger.info("Campaign %s started with %d products", brief.campaign_id or config.brief_path.stem, len(brief.products))
    manifest = run_campaign(brief, resolver, sink)
    manifest.provider = config.provider_mode if config.provider_mode == "mock" else config.image_backend

    metrics = RunMetrics(
        total_products_processed=len(manifest.products),
        assets_reused=sum(1 for entry in manifest.products if entry.provenance == "found"),
        assets_generated=sum(1 for entry in manifest.products if entry.provenance == "generated"),
        total_creatives_produced=sum(len(entry.output_files) for entry in manifest.products),
        execution_time_seconds=round(timer.elapsed(), 3),
    )

    write_json(manifest.to_dict(), config.output_root / "manifest.json")
    write_json(metrics.to_dict(), config.output_root / "metrics.json")
    write_text(_output_readme(manifest), config.output_root / "README.md")

    logger.info("Campaign %s completed", brief.campaign_id or config.brief_path.stem)
    return manifest.to_dict(), metrics.to_dict()
