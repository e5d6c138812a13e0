"""S3 persistence backend: stores profile documents in AWS S3."""

from __future__ import annotations

import logging
from typing import Any

log = logging.getLogger(__name__)


class S3PersistenceBackend:
    """Stores data as objects in an S3 bucket.

    A single ``put_object`` replaces the whole document, so a profile is
    never partially written.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "profiles/",
        region: str = "us-east-2",
        kms_key_id: str = "",
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._kms_key_id = kms_key_id
        if client is None:
            try:
                import boto3 as _boto3
            except ImportError as e:
                raise ImportError(
                    "boto3 is required for S3 persistence. "
                    "Install with: pip install clarity-canvas[s3]"
                ) from e
            client = _boto3.client("s3", region_name=region)
        self._s3 = client

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}.json"

    def save(self, key: str, data: str) -> None:
        put_kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": self._full_key(key),
            "Body": data.encode("utf-8"),
            "ContentType": "application/json",
        }
        if self._kms_key_id:
            put_kwargs["ServerSideEncryption"] = "aws:kms"
            put_kwargs["SSEKMSKeyId"] = self._kms_key_id
        self._s3.put_object(**put_kwargs)
        log.debug("Saved %s to s3://%s/%s", key, self._bucket, self._full_key(key))

    def load(self, key: str) -> str:
        try:
            response = self._s3.get_object(
                Bucket=self._bucket,
                Key=self._full_key(key),
            )
            return response["Body"].read().decode("utf-8")
        except self._s3.exceptions.NoSuchKey:
            raise KeyError(f"Not found in S3: {key}")

    def exists(self, key: str) -> bool:
        try:
            self._s3.head_object(
                Bucket=self._bucket,
                Key=self._full_key(key),
            )
            return True
        except self._s3.exceptions.ClientError:
            return False

    def delete(self, key: str) -> None:
        self._s3.delete_object(
            Bucket=self._bucket,
            Key=self._full_key(key),
        )

    def list_keys(self, prefix: str = "") -> list[str]:
        full_prefix = f"{self._prefix}{prefix}"
        paginator = self._s3.get_paginator("list_objects_v2")
        keys = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=full_prefix):
            for obj in page.get("Contents", []):
                key = obj["Key"]
                if key.startswith(self._prefix):
                    key = key[len(self._prefix):]
                if key.endswith(".json"):
                    key = key[:-5]
                keys.append(key)
        return sorted(keys)
