"""Supabase Storage implementation of ObjectStoreRepository."""

import os
from collections.abc import Mapping
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import ObjectStoreError
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import ENV_SUPABASE_URL
from core.utils.storage_paths import build_public_url

logger = Logger(UTC=True)


def _client_error_status(exc: ClientError) -> int | None:
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return int(status) if status else None


def _client_error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", "Unknown"))


def _client_error_message(exc: ClientError) -> str:
    error = exc.response.get("Error", {})
    return str(error.get("Message") or error.get("Code") or exc)


class SupabaseObjectStore(ObjectStoreRepository):
    """Object store backed by Supabase Storage.

    Writes and deletes go through the S3-compatible endpoint. Public URLs are
    built from the project root, which is where Supabase serves objects of
    public buckets.
    """

    def __init__(
        self,
        adapter: S3AdapterProtocol | None = None,
        *,
        public_root_url: str | None = None,
    ) -> None:
        """Create the store using the provided S3 adapter and project root."""
        self._s3 = adapter or S3Adapter()
        self._public_root_url = public_root_url or os.getenv(ENV_SUPABASE_URL)

    def upload_object(
        self,
        *,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        upsert: bool,
        cache_control_seconds: int,
    ) -> None:
        """Upload bytes to the bucket."""
        logger.debug(
            "Uploading object",
            extra={"bucket": bucket, "key": key, "size": len(data)},
        )

        try:
            self._s3.put_object(
                bucket=bucket,
                key=key,
                body=data,
                content_type=content_type,
                cache_control=f"max-age={cache_control_seconds}",
                if_none_match=None if upsert else "*",
            )
            logger.info("Object uploaded successfully", extra={"bucket": bucket, "key": key})

        except ClientError as exc:
            logger.error(
                "Object store upload failed",
                extra={"bucket": bucket, "key": key, "code": _client_error_code(exc)},
            )
            raise ObjectStoreError(
                message=_client_error_message(exc),
                status_code=_client_error_status(exc),
                details={"bucket": bucket, "key": key, "code": _client_error_code(exc)},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error uploading object")
            raise ObjectStoreError(
                message=str(exc),
                details={"bucket": bucket, "key": key},
            ) from exc

    def get_public_url(self, *, bucket: str, key: str) -> str | None:
        """Return the public URL of an object, or None without a project root."""
        if not self._public_root_url:
            logger.warning(
                "No public root URL configured",
                extra={"bucket": bucket, "key": key},
            )
            return None

        return build_public_url(self._public_root_url, bucket, key)

    def remove_objects(self, *, bucket: str, keys: list[str]) -> None:
        """Delete objects from the bucket."""
        logger.debug("Deleting objects", extra={"bucket": bucket, "keys": keys})

        try:
            response: Mapping[str, Any] = self._s3.delete_objects(bucket=bucket, keys=keys)

        except ClientError as exc:
            logger.error(
                "Object store deletion failed",
                extra={"bucket": bucket, "keys": keys, "code": _client_error_code(exc)},
            )
            raise ObjectStoreError(
                message=_client_error_message(exc),
                status_code=_client_error_status(exc),
                details={"bucket": bucket, "keys": keys, "code": _client_error_code(exc)},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error deleting objects")
            raise ObjectStoreError(
                message=str(exc),
                details={"bucket": bucket, "keys": keys},
            ) from exc

        # DeleteObjects reports per-key failures inside a successful response
        errors = response.get("Errors") or []
        if errors:
            first = errors[0]
            raise ObjectStoreError(
                message=str(first.get("Message") or first.get("Code") or "Delete failed"),
                details={"bucket": bucket, "keys": keys, "code": first.get("Code")},
            )

        logger.info("Objects deleted successfully", extra={"bucket": bucket, "keys": keys})
