from .asset_store import AssetEntry, AssetStore, LocalAssetStore
from .s3_store import S3AssetStore

__all__ = ["AssetEntry", "AssetStore", "LocalAssetStore", "S3AssetStore"]
