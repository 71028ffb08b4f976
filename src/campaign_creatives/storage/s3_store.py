"""AWS S3-backed asset collection.

Activated by ``--asset-store s3`` when ``AWS_ACCESS_KEY_ID``,
``AWS_SECRET_ACCESS_KEY`` and ``CREATIVES_S3_BUCKET`` are found in the process
environment (loaded from ``.env`` by the CLI before the pipeline runs).

Unlike a mirror, this store is the source of truth for assets, so errors
propagate to the caller; the resolver decides which ones are fatal.

S3 key scheme
-------------
Every store path is prefixed with the optional key *prefix*:
  ``{prefix}/assets/coffee_mug.png``
  ``{prefix}/output/Coffee/1_1/creative.png``
"""

from __future__ import annotations

import logging
import os

from campaign_creatives.storage.asset_store import AssetEntry, AssetStore, autorename_candidates, join_asset_path

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}


class S3AssetStore(AssetStore):
    def __init__(self, client: object, bucket: str, prefix: str = "") -> None:
        self._client = client
        self.bucket = bucket
        self.prefix = prefix.strip("/")

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> S3AssetStore | None:
        """Return an :class:`S3AssetStore` if AWS credentials and a bucket are
        present in the environment, otherwise ``None``.

        Read from:

        * ``AWS_ACCESS_KEY_ID``
        * ``AWS_SECRET_ACCESS_KEY``
        * ``AWS_DEFAULT_REGION`` (optional, defaults to ``us-east-1``)
        * ``CREATIVES_S3_BUCKET``
        * ``CREATIVES_S3_PREFIX`` (optional)
        """
        access_key = os.getenv("AWS_ACCESS_KEY_ID")
        secret_key = os.getenv("AWS_SECRET_ACCESS_KEY")
        bucket = os.getenv("CREATIVES_S3_BUCKET")
        if not access_key or not secret_key or not bucket:
            logger.debug("AWS credentials or CREATIVES_S3_BUCKET missing — S3 store disabled.")
            return None

        try:
            import boto3  # type: ignore[import-untyped]
        except ImportError:
            logger.warning(
                "AWS credentials are set but boto3 is not installed — S3 store disabled. "
                "Install with: pip install -e .[s3]"
            )
            return None

        region = os.getenv("AWS_DEFAULT_REGION", "us-east-1")
        client = boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )
        logger.info("S3 asset store active — bucket: %s, region: %s", bucket, region)
        return cls(client, bucket, prefix=os.getenv("CREATIVES_S3_PREFIX", ""))

    # ------------------------------------------------------------------
    # AssetStore
    # ------------------------------------------------------------------

    def _key(self, path: str) -> str:
        return join_asset_path(self.prefix, path.strip("/"))

    def list(self, folder: str) -> list[AssetEntry]:
        """List the direct children of *folder*: objects as files, common prefixes as folders."""
        folder_key = self._key(folder)
        list_prefix = f"{folder_key}/" if folder_key else ""
        paginator = self._client.get_paginator("list_objects_v2")  # type: ignore[attr-defined]
        entries: list[AssetEntry] = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=list_prefix, Delimiter="/"):
            for common in page.get("CommonPrefixes", []):
                name = common["Prefix"][len(list_prefix) :].rstrip("/")
                entries.append(AssetEntry(name=name, is_file=False))
            for obj in page.get("Contents", []):
                name = obj["Key"][len(list_prefix) :]
                if name:
                    entries.append(AssetEntry(name=name, is_file=True))
        return entries

    def get(self, path: str) -> bytes:
        response = self._client.get_object(Bucket=self.bucket, Key=self._key(path))  # type: ignore[attr-defined]
        return response["Body"].read()

    def _exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)  # type: ignore[attr-defined]
        except Exception as exc:
            error_code = str(getattr(exc, "response", {}).get("Error", {}).get("Code", ""))
            if error_code in _MISSING_KEY_CODES:
                return False
            raise
        return True

    def put(self, path: str, data: bytes, overwrite: bool = False) -> str:
        stored_path = path
        if not overwrite:
            stored_path = next(candidate for candidate in autorename_candidates(path) if not self._exists(self._key(candidate)))

        key = self._key(stored_path)
        self._client.put_object(Bucket=self.bucket, Key=key, Body=data)  # type: ignore[attr-defined]
        logger.debug("S3 ↑ s3://%s/%s (%d bytes)", self.bucket, key, len(data))
        return stored_path
