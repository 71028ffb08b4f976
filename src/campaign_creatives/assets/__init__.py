from .resolver import AssetResolver, ResolvedSource, find_matching_asset

__all__ = ["AssetResolver", "ResolvedSource", "find_matching_asset"]
