"""Global constants used throughout the pipeline.

This module centralizes error codes, storage naming rules, compression
defaults and environment variable names so they can be changed in one place.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNKNOWN_PRESET = "UNKNOWN_COMPRESSION_PRESET"
ERROR_CODE_INVALID_BUCKET = "INVALID_BUCKET_NAME"

# Normalization Errors
ERROR_CODE_IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
ERROR_CODE_IMAGE_ENCODE_FAILED = "IMAGE_ENCODE_FAILED"

# Authentication Errors
ERROR_CODE_AUTH_REQUIRED = "AUTH_REQUIRED"

# Storage Errors
ERROR_CODE_OBJECT_STORE = "OBJECT_STORE_ERROR"
ERROR_CODE_BUCKET_NOT_FOUND = "BUCKET_NOT_FOUND"
ERROR_CODE_PERMISSION_DENIED = "PERMISSION_DENIED"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_PUBLIC_URL_UNAVAILABLE = "PUBLIC_URL_UNAVAILABLE"


# ============================================================================
# Output Format
# ============================================================================

OUTPUT_FORMAT: Final = "WEBP"
OUTPUT_MIME_TYPE: Final = "image/webp"
OUTPUT_EXTENSION: Final = "webp"
FALLBACK_CONTENT_TYPE: Final = "application/octet-stream"


MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
    "image/avif": ("avif",),
    "image/bmp": ("bmp",),
    "image/svg+xml": ("svg",),
}

EXTENSION_MIME_TYPE_MAP: Final[dict[str, str]] = {
    ext: mime for mime, extensions in MIME_TYPE_EXTENSION_MAP.items() for ext in extensions
}


# ============================================================================
# Compression
# ============================================================================

DEFAULT_MAX_WIDTH = 800
DEFAULT_MAX_HEIGHT = 800
DEFAULT_QUALITY = 0.8

COMPRESSION_PRESET_VALUES: Final[dict[str, tuple[int, int, float]]] = {
    "avatar": (400, 400, 0.8),
    "profile": (600, 800, 0.8),
    "cover": (1200, 800, 0.85),
    "gallery": (1600, 1200, 0.85),
    "thumbnail": (300, 300, 0.7),
    "event": (1000, 700, 0.8),
}


# ============================================================================
# Storage Naming
# ============================================================================

DEFAULT_BUCKET = "school-images"
BUCKET_NAME_PATTERN = r"^[a-z0-9][a-z0-9._-]*$"
BUCKET_NAME_MAX_LENGTH = 63

STORAGE_KEY_TOKEN_LENGTH = 8
EXTENSION_PATTERN = r"^[a-z0-9]{1,10}$"

PUBLIC_OBJECT_PATH = "/storage/v1/object/public"
S3_ENDPOINT_PATH = "/storage/v1/s3"
AUTH_USER_PATH = "/auth/v1/user"

DEFAULT_CACHE_CONTROL_SECONDS = 3600
AUTH_REQUEST_TIMEOUT_SECONDS = 10


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_SUPABASE_URL = "SUPABASE_URL"
ENV_SUPABASE_ANON_KEY = "SUPABASE_ANON_KEY"
ENV_SUPABASE_S3_ACCESS_KEY_ID = "SUPABASE_S3_ACCESS_KEY_ID"
ENV_SUPABASE_S3_SECRET_ACCESS_KEY = "SUPABASE_S3_SECRET_ACCESS_KEY"
ENV_SUPABASE_S3_REGION = "SUPABASE_S3_REGION"
ENV_SUPABASE_S3_ENDPOINT_URL = "SUPABASE_S3_ENDPOINT_URL"
ENV_IMAGE_STORAGE_BUCKET = "IMAGE_STORAGE_BUCKET"
DEFAULT_S3_REGION = "us-east-1"

