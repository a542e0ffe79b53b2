"""Business logic for storing images in the object store.

This module owns the upload/delete contract against the remote store:
storage key naming, content-type negotiation, the authentication
precondition, failure classification and URL <-> key round-tripping.
"""

import asyncio
import os

from aws_lambda_powertools import Logger

from core.models.errors import (
    AuthRequiredError,
    BucketNotFoundError,
    ImageServiceError,
    ObjectStoreError,
    PermissionDeniedError,
    UploadFailedError,
    UrlUnavailableError,
)
from core.models.image import CompactAsset, CurrentUser, SourceAsset
from core.repositories.identity_repository import IdentityProvider
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import (
    DEFAULT_BUCKET,
    DEFAULT_CACHE_CONTROL_SECONDS,
    ENV_IMAGE_STORAGE_BUCKET,
    OUTPUT_EXTENSION,
)
from core.utils.mime import content_type_for, extension_from_name
from core.utils.storage_paths import extract_storage_key, generate_storage_key
from core.utils.validators import validate_bucket_name

logger = Logger(UTC=True)

Asset = CompactAsset | SourceAsset

_PERMISSION_STATUSES = {401, 403}
_PERMISSION_CODES = {"AccessDenied", "Unauthorized", "InvalidAccessKeyId", "SignatureDoesNotMatch"}


def classify_store_error(exc: ObjectStoreError, *, bucket: str, key: str) -> ImageServiceError:
    """Translate an object store failure into a caller-facing upload error."""
    code = str(exc.details.get("code") or "")
    details = {"bucket": bucket, "key": key, "status_code": exc.status_code, "code": code or None}

    if code == "NoSuchBucket" or (exc.status_code == 404 and "bucket" in exc.message.lower()):
        return BucketNotFoundError(
            message=f"Storage bucket '{bucket}' does not exist",
            details=details,
        )

    if exc.status_code in _PERMISSION_STATUSES or code in _PERMISSION_CODES:
        return PermissionDeniedError(
            message=f"Not allowed to upload to storage bucket '{bucket}'",
            details=details,
        )

    return UploadFailedError(
        message=f"Upload failed: {exc.message}",
        details=details,
    )


def resolve_extension(asset: Asset, desired_name: str | None) -> str:
    """Pick the key extension: asset filename, then desired name, then WebP."""
    filename = asset.filename if isinstance(asset, SourceAsset) else None
    return (
        extension_from_name(filename)
        or extension_from_name(desired_name)
        or OUTPUT_EXTENSION
    )


def resolve_content_type(asset: Asset, extension: str) -> str:
    """Use the asset's own MIME type when present, else infer one."""
    if asset.mime_type:
        return asset.mime_type
    return content_type_for(extension, asset.data)


class StorageGateway:
    """Application service responsible for image upload and deletion.

    This service orchestrates:
    - The authentication precondition
    - Storage key and content type resolution
    - Uploading to the object store and retrieving the public URL
    - Best-effort deletion by public URL
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        object_store: ObjectStoreRepository,
        *,
        default_bucket: str | None = None,
        cache_control_seconds: int = DEFAULT_CACHE_CONTROL_SECONDS,
    ) -> None:
        """Initialize the gateway with its collaborators."""
        self.identity = identity_provider
        self.store = object_store
        self.default_bucket = validate_bucket_name(
            default_bucket or os.getenv(ENV_IMAGE_STORAGE_BUCKET) or DEFAULT_BUCKET
        )
        self.cache_control_seconds = cache_control_seconds

    async def _current_user(self) -> CurrentUser | None:
        try:
            return await asyncio.to_thread(self.identity.get_current_user)
        except Exception:
            logger.exception("Identity lookup failed")
            return None

    async def upload(
        self,
        asset: Asset,
        *,
        desired_name: str | None = None,
        bucket: str | None = None,
    ) -> str:
        """Upload an image and return its public URL.

        The upload flow is:
        1. Require an authenticated user
        2. Resolve extension and content type
        3. Generate a fresh storage key
        4. Upload the payload
        5. Retrieve the public URL

        Args:
            asset: Normalized or raw image
            desired_name: Optional name; only its extension is used
            bucket: Target bucket, defaults to the gateway's bucket

        Returns:
            Public URL of the stored object

        Raises:
            ValidationError: If the bucket name is invalid
            AuthRequiredError: If nobody is signed in
            BucketNotFoundError: If the bucket does not exist
            PermissionDeniedError: If the store refuses the write
            UploadFailedError: For any other store failure
            UrlUnavailableError: If no public URL could be obtained
        """
        bucket = validate_bucket_name(bucket or self.default_bucket)

        # Step 1: Fail fast before touching the store
        user = await self._current_user()
        if user is None:
            logger.warning("Upload attempted without an authenticated user", extra={"bucket": bucket})
            raise AuthRequiredError(
                message="Please sign in before uploading images",
                details={"bucket": bucket},
            )

        # Step 2: Resolve extension and content type
        extension = resolve_extension(asset, desired_name)
        content_type = resolve_content_type(asset, extension)

        # Step 3: Fresh key; the desired name never becomes part of it
        key = generate_storage_key(extension)

        logger.debug(
            "Starting image upload",
            extra={
                "user_id": user.id,
                "bucket": bucket,
                "key": key,
                "content_type": content_type,
                "size": len(asset.data),
            },
        )

        # Step 4: Upload
        try:
            await asyncio.to_thread(
                self.store.upload_object,
                bucket=bucket,
                key=key,
                data=asset.data,
                content_type=content_type,
                upsert=True,
                cache_control_seconds=self.cache_control_seconds,
            )
        except ObjectStoreError as exc:
            logger.error(
                "Image upload rejected by store",
                extra={"bucket": bucket, "key": key, "status_code": exc.status_code},
            )
            raise classify_store_error(exc, bucket=bucket, key=key) from exc
        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise UploadFailedError(
                message=f"Upload failed: {exc}",
                details={"bucket": bucket, "key": key},
            ) from exc

        # Step 5: Public URL
        url = await asyncio.to_thread(self.store.get_public_url, bucket=bucket, key=key)
        if not url:
            logger.error("Public URL unavailable", extra={"bucket": bucket, "key": key})
            raise UrlUnavailableError(
                message="Image was uploaded but no public URL is available",
                details={"bucket": bucket, "key": key},
            )

        logger.info(
            "Image uploaded successfully",
            extra={"user_id": user.id, "bucket": bucket, "key": key},
        )
        return url

    def extract_key(self, url: str | None, bucket: str | None = None) -> str | None:
        """Return the storage key inside a public URL of `bucket`, or None."""
        return extract_storage_key(url, bucket or self.default_bucket)

    async def delete(self, url: str | None, bucket: str | None = None) -> bool:
        """Delete the object behind a public URL.

        Deletion is best effort: failures are logged and reported as False
        so callers can continue their own cleanup.

        Returns:
            True if the store confirmed the removal, False otherwise
        """
        bucket = bucket or self.default_bucket
        key = self.extract_key(url, bucket)
        if key is None:
            logger.debug("URL is not a storage URL for bucket", extra={"bucket": bucket, "url": url})
            return False

        try:
            await asyncio.to_thread(self.store.remove_objects, bucket=bucket, keys=[key])
        except Exception:
            logger.exception("Error deleting file", extra={"bucket": bucket, "key": key})
            return False

        logger.info("Image deleted successfully", extra={"bucket": bucket, "key": key})
        return True
