"""Thin adapter for the Supabase Storage S3-compatible endpoint."""

from collections.abc import Mapping
import os
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.constants import (
    DEFAULT_S3_REGION,
    ENV_SUPABASE_S3_ACCESS_KEY_ID,
    ENV_SUPABASE_S3_ENDPOINT_URL,
    ENV_SUPABASE_S3_REGION,
    ENV_SUPABASE_S3_SECRET_ACCESS_KEY,
    ENV_SUPABASE_URL,
    S3_ENDPOINT_PATH,
)


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (store-facing only)."""

    def put_object(self, **kwargs: Any) -> Any: ...

    def delete_objects(
        self,
        *,
        Bucket: str,
        Delete: Mapping[str, Any],
    ) -> Mapping[str, Any]: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str,
        if_none_match: str | None = None,
    ) -> None: ...

    def delete_objects(self, *, bucket: str, keys: list[str]) -> Mapping[str, Any]: ...


def resolve_endpoint_url() -> str:
    """Return the S3 endpoint from the override or `<SUPABASE_URL>/storage/v1/s3`."""
    override = os.getenv(ENV_SUPABASE_S3_ENDPOINT_URL)
    if override:
        return override

    root = os.getenv(ENV_SUPABASE_URL)
    if not root:
        raise RuntimeError(
            f"{ENV_SUPABASE_URL} or {ENV_SUPABASE_S3_ENDPOINT_URL} environment variable is not set"
        )

    return f"{root.rstrip('/')}{S3_ENDPOINT_PATH}"


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client pointed at Supabase Storage
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, client: _Boto3S3Client | None = None) -> None:
        """Create S3 client from environment configuration."""
        if client is not None:
            self._client = client
            return

        self._client = boto3.client(
            "s3",
            endpoint_url=resolve_endpoint_url(),
            region_name=os.getenv(ENV_SUPABASE_S3_REGION, DEFAULT_S3_REGION),
            aws_access_key_id=os.getenv(ENV_SUPABASE_S3_ACCESS_KEY_ID),
            aws_secret_access_key=os.getenv(ENV_SUPABASE_S3_SECRET_ACCESS_KEY),
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str,
        if_none_match: str | None = None,
    ) -> None:
        """Store object in the bucket.
        Raises boto3 exceptions - caught by domain implementation.
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
            "CacheControl": cache_control,
        }
        if if_none_match:
            params["IfNoneMatch"] = if_none_match

        self._client.put_object(**params)

    def delete_objects(self, *, bucket: str, keys: list[str]) -> Mapping[str, Any]:
        """Delete objects from the bucket.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
        )
