"""S3 storage.

Serves a repository stored as objects in S3 with optional key prefix::

    s3://{bucket}/{prefix}/podspec.yaml
    s3://{bucket}/{prefix}/views/partials/hero.html

When prefix is None, repository paths map directly to object keys.

Uses ``anyio.to_thread.run_sync`` to run boto3 calls in the thread pool,
matching the same async pattern as LocalStorage.  S3 has no directories: a
listing with no objects is reported as a missing directory.
"""

from __future__ import annotations

from functools import partial
from typing import Any

import boto3
from anyio import to_thread
from botocore.config import Config
from botocore.exceptions import ClientError

from editor_server.api.models.editor import FileData
from editor_server.api.storage.base import normalize_path, to_editor_path

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _create_s3_client(
    endpoint_url: str,
    access_key: str,
    secret_key: str,
    region: str | None = None,
    path_style: bool = False,
) -> Any:
    """Create a boto3 S3 client.

    Args:
        endpoint_url: S3 endpoint URL.
        access_key: AWS access key ID.
        secret_key: AWS secret access key.
        region: AWS region name (optional, some endpoints require it).
        path_style: Use path-style addressing instead of virtual-hosted.
            Required by MinIO and some S3-compatible services.
    """
    config = Config(
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
        s3={"addressing_style": "path" if path_style else "auto"},
    )

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name=region,
        config=config,
    )


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3Storage:
    """S3 implementation of the ConnectorStorage protocol."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        prefix: str | None = None,
        region: str | None = None,
        path_style: bool = False,
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._client = client or _create_s3_client(
            endpoint_url, access_key, secret_key, region=region, path_style=path_style
        )
        self._key_prefix = f"{prefix.strip('/')}/" if prefix else ""

    def __repr__(self) -> str:
        return f"S3Storage(bucket={self._bucket!r}, prefix={self._key_prefix!r})"

    def _object_key(self, path: str) -> str:
        return f"{self._key_prefix}{normalize_path(path)}"

    # -- Read ------------------------------------------------------------------

    async def read_file(self, path: str) -> bytes:
        key = self._object_key(path)
        return await to_thread.run_sync(partial(self._get_object_body, key))

    def _get_object_body(self, key: str) -> bytes:
        """Get object and read body in the same thread.

        Reading the streaming body must happen in the same thread as
        get_object to avoid issues with chunked transfer encoding.
        """
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                msg = f"File not found: {key}"
                raise FileNotFoundError(msg) from None
            raise
        return resp["Body"].read()

    async def read_dir(self, path: str) -> list[FileData]:
        relative = normalize_path(path)
        key_prefix = f"{self._key_prefix}{relative}/" if relative else self._key_prefix
        keys = await to_thread.run_sync(partial(self._list_keys, key_prefix))
        if not keys:
            msg = f"Directory not found: {key_prefix}"
            raise FileNotFoundError(msg)
        strip = len(self._key_prefix)
        return [FileData(path=to_editor_path(key[strip:])) for key in sorted(keys)]

    def _list_keys(self, key_prefix: str) -> list[str]:
        paginator = self._client.get_paginator("list_objects_v2")
        keys: list[str] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=key_prefix):
            keys.extend(obj["Key"] for obj in page.get("Contents", []) if not obj["Key"].endswith("/"))
        return keys

    async def exists_file(self, path: str) -> bool:
        key = self._object_key(path)
        try:
            await to_thread.run_sync(partial(self._client.head_object, Bucket=self._bucket, Key=key))
        except ClientError as e:
            if _is_not_found(e):
                return False
            raise
        else:
            return True

    # -- Write -----------------------------------------------------------------

    async def write_file(self, path: str, content: bytes | str) -> None:
        key = self._object_key(path)
        data = content.encode("utf-8") if isinstance(content, str) else content
        await to_thread.run_sync(partial(self._client.put_object, Bucket=self._bucket, Key=key, Body=data))

    async def delete_file(self, path: str) -> None:
        # S3 delete is idempotent, so check first to report missing files.
        if not await self.exists_file(path):
            msg = f"File not found: {self._object_key(path)}"
            raise FileNotFoundError(msg)
        key = self._object_key(path)
        await to_thread.run_sync(partial(self._client.delete_object, Bucket=self._bucket, Key=key))
