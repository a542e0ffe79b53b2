"""
Pytest configuration and fixtures for image pipeline tests.
Provides S3 mocking, generated images and in-memory collaborators.
"""

import io
import os
import random
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from core.models.errors import ObjectStoreError
from core.models.image import CurrentUser
from core.repositories.identity_repository import IdentityProvider
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.storage_paths import build_public_url

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

TEST_BUCKET = "school-images"
TEST_ROOT_URL = "https://project.supabase.co"


@pytest.fixture(autouse=True)
def _clean_pipeline_env(monkeypatch):
    """Keep developer Supabase settings from leaking into tests."""
    for name in (
        "IMAGE_STORAGE_BUCKET",
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_S3_ENDPOINT_URL",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# S3 (moto)
# ============================================================================


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name="us-east-1")


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create the default public bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    s3_client.create_bucket(Bucket=TEST_BUCKET)

    yield TEST_BUCKET

    _cleanup_s3_objects(s3_client, TEST_BUCKET)


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], dict[str, Any]]:
    """
    Helper to fetch an object (body bytes plus headers) from the test bucket.

    Usage:
        obj = s3_get_object("1700000000000_ab12cd34.webp")
    """

    def _get(key: str) -> dict[str, Any]:
        response: dict[str, Any] = s3_client.get_object(Bucket=TEST_BUCKET, Key=key)
        return {
            "body": response["Body"].read(),
            "content_type": response.get("ContentType"),
            "cache_control": response.get("CacheControl"),
        }

    return _get


# ============================================================================
# Images
# ============================================================================


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Helper to build an encoded image of a given size.

    Usage:
        data = make_image(3000, 2000, fmt="JPEG")
    """

    def _make(
        width: int,
        height: int,
        *,
        fmt: str = "PNG",
        mode: str = "RGB",
        color: Any = (200, 120, 40),
        exif: bytes | None = None,
    ) -> bytes:
        image = Image.new(mode, (width, height), color)
        buffer = io.BytesIO()
        params: dict[str, Any] = {}
        if exif is not None:
            params["exif"] = exif
        image.save(buffer, format=fmt, **params)
        return buffer.getvalue()

    return _make


@pytest.fixture
def noisy_surface() -> Image.Image:
    """Deterministic noisy RGB image, where encoder quality matters."""
    width, height = 160, 120
    rng = random.Random(42)
    return Image.frombytes("RGB", (width, height), rng.randbytes(width * height * 3))


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    import base64

    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


# ============================================================================
# Collaborator fakes
# ============================================================================


class FakeIdentityProvider(IdentityProvider):
    """Identity provider returning a fixed user or raising a fixed error."""

    def __init__(
        self,
        user: CurrentUser | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.user = user
        self.error = error
        self.calls = 0

    def get_current_user(self) -> CurrentUser | None:
        self.calls += 1
        if self.error:
            raise self.error
        return self.user


class FakeObjectStore(ObjectStoreRepository):
    """In-memory object store with call counters and injectable failures."""

    def __init__(
        self,
        *,
        root_url: str | None = TEST_ROOT_URL,
        upload_exc: Exception | None = None,
        remove_exc: Exception | None = None,
    ) -> None:
        self.root_url = root_url
        self.upload_exc = upload_exc
        self.remove_exc = remove_exc
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.removed: list[tuple[str, str]] = []
        self.upload_calls = 0
        self.url_calls = 0
        self.remove_calls = 0

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
        self.upload_calls += 1
        if self.upload_exc:
            raise self.upload_exc
        self.objects[(bucket, key)] = {
            "data": data,
            "content_type": content_type,
            "upsert": upsert,
            "cache_control_seconds": cache_control_seconds,
        }

    def get_public_url(self, *, bucket: str, key: str) -> str | None:
        self.url_calls += 1
        if not self.root_url:
            return None
        return build_public_url(self.root_url, bucket, key)

    def remove_objects(self, *, bucket: str, keys: list[str]) -> None:
        self.remove_calls += 1
        if self.remove_exc:
            raise self.remove_exc
        for key in keys:
            self.objects.pop((bucket, key), None)
            self.removed.append((bucket, key))


@pytest.fixture
def current_user() -> CurrentUser:
    return CurrentUser(id="user-123", email="admin@school.example")


@pytest.fixture
def identity(current_user) -> FakeIdentityProvider:
    return FakeIdentityProvider(current_user)


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def store_error() -> Callable[..., ObjectStoreError]:
    """
    Helper to build an ObjectStoreError as a store implementation would.

    Usage:
        exc = store_error(404, "NoSuchBucket", "Bucket not found")
    """

    def _build(status_code: int | None, code: str | None, message: str) -> ObjectStoreError:
        return ObjectStoreError(
            message=message,
            status_code=status_code,
            details={"code": code},
        )

    return _build
