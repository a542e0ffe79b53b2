from collections.abc import Mapping
from pathlib import PurePosixPath
import re

from core.utils.constants import (
    EXTENSION_MIME_TYPE_MAP,
    EXTENSION_PATTERN,
    FALLBACK_CONTENT_TYPE,
)

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
}

_EXTENSION_RE = re.compile(EXTENSION_PATTERN)


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    # RIFF is shared by several containers; only WEBP carries the tag at offset 8
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def extension_from_name(name: str | None) -> str | None:
    """Return the lowercased extension of a file name, or None.

    Only short alphanumeric extensions are accepted so that nothing unsafe
    from a caller-supplied name reaches a storage key.
    """
    if not name:
        return None

    suffix = PurePosixPath(name.strip()).suffix.lower().lstrip(".")
    if not _EXTENSION_RE.match(suffix):
        return None

    return suffix


def content_type_for(extension: str, file_data: bytes | None = None) -> str:
    """Infer a content type from an extension, then from the bytes."""
    mime = EXTENSION_MIME_TYPE_MAP.get(extension.lower())
    if mime:
        return mime

    if file_data:
        try:
            return detect_mime_type(file_data)
        except ValueError:
            pass

    return FALLBACK_CONTENT_TYPE
