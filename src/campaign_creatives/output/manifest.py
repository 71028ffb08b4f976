from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(slots=True)
class ProductManifestEntry:
    product_name: str
    provenance: str
    source_asset: str | None = None
    output_files: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class CampaignManifest:
    campaign_message: str
    started_at: str
    campaign_id: str | None = None
    target_region: str | None = None
    target_audience: str | None = None
    provider: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    finished_at: str | None = None
    products: list[ProductManifestEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
