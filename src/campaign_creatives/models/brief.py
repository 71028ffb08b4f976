from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductBrief(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str | None = None
    prompt: str | None = None
    asset: str | None = None


class CampaignBrief(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    campaign_id: str | None = None
    products: list[ProductBrief] = Field(default_factory=list)
    campaign_message: str | None = None
    target_region: str | None = None
    target_audience: str | None = None
