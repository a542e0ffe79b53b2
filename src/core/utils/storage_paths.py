"""Storage key generation and public URL <-> key round-tripping.

Public URLs have the shape::

    <store-root>/storage/v1/object/public/<bucket>/<key>

Pattern matching on that shape is the only way to recover a key from a URL,
so `build_public_url` and `extract_storage_key` must stay exact inverses.
"""

import uuid

from core.utils.constants import (
    OUTPUT_EXTENSION,
    PUBLIC_OBJECT_PATH,
    STORAGE_KEY_TOKEN_LENGTH,
)
from core.utils.time import epoch_millis


def generate_storage_key(extension: str = OUTPUT_EXTENSION) -> str:
    """Return a fresh `{epoch ms}_{random token}.{extension}` key."""
    token = uuid.uuid4().hex[:STORAGE_KEY_TOKEN_LENGTH]
    return f"{epoch_millis()}_{token}.{extension}"


def public_path_prefix(bucket: str) -> str:
    return f"{PUBLIC_OBJECT_PATH}/{bucket}/"


def build_public_url(root_url: str, bucket: str, key: str) -> str:
    """Build the public URL of `key` inside `bucket`."""
    return f"{root_url.rstrip('/')}{public_path_prefix(bucket)}{key}"


def extract_storage_key(url: str | None, bucket: str) -> str | None:
    """Recover the storage key from a public URL of `bucket`.

    Returns None for anything that is not one of this bucket's public URLs.
    Never raises.
    """
    if not url or not isinstance(url, str) or not bucket:
        return None

    prefix = public_path_prefix(bucket)
    index = url.find(prefix)
    if index == -1:
        return None

    key = url[index + len(prefix):]
    for separator in ("?", "#"):
        key = key.split(separator, 1)[0]

    return key or None
