from __future__ import annotations

from campaign_creatives.models.brief import ProductBrief


def build_generation_prompt(product: ProductBrief) -> str:
    """Always names the product; a per-product ``prompt`` adds direction after the description."""
    parts = [f"Product photo: {product.name}.", product.description or "", product.prompt or ""]
    return " ".join(part.strip() for part in parts if part.strip())
