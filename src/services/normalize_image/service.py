"""Business logic for image normalization.

This module decodes an arbitrary source image, bounds its dimensions and
re-encodes it to WebP at a configurable quality. It has no knowledge of
storage or the network.
"""

import asyncio
import io

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.models.errors import DecodeError, EncodeError
from core.models.image import CompactAsset, CompressionConfig, SourceAsset
from core.utils.constants import OUTPUT_EXTENSION, OUTPUT_FORMAT, OUTPUT_MIME_TYPE
from core.utils.presets import DEFAULT_COMPRESSION
from core.utils.time import epoch_millis

logger = Logger(UTC=True)


def compute_target_dimensions(
    width: int,
    height: int,
    config: CompressionConfig,
) -> tuple[int, int]:
    """Return output dimensions that fit inside the configured bounds.

    Images already inside the bounds keep their size; larger images are
    scaled down by a single ratio so the aspect ratio is preserved up to
    rounding.
    """
    if width <= config.max_width and height <= config.max_height:
        return width, height

    ratio = min(config.max_width / width, config.max_height / height)

    # int(x + 0.5) rounds halves up for positive values
    target_width = max(1, int(width * ratio + 0.5))
    target_height = max(1, int(height * ratio + 0.5))

    return target_width, target_height


def generate_webp_filename(prefix: str) -> str:
    """Return `{prefix}_{epoch ms}.webp`, usable as an upload desired name."""
    return f"{prefix}_{epoch_millis()}.{OUTPUT_EXTENSION}"


def _output_mode(image: Image.Image) -> str:
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        return "RGBA"
    return "RGB"


class ImageNormalizer:
    """Application service that turns a source image into a compact asset.

    Every call:
    - Decodes the source inside its own decode handle
    - Applies EXIF orientation
    - Scales down to the configured bounds (never up)
    - Encodes to WebP at the configured quality
    """

    async def normalize(
        self,
        source: SourceAsset,
        config: CompressionConfig = DEFAULT_COMPRESSION,
    ) -> CompactAsset:
        """Normalize an image without blocking the event loop.

        Args:
            source: Caller-supplied image, left untouched
            config: Dimension bounds and encoder quality

        Returns:
            The encoded WebP asset

        Raises:
            DecodeError: If the source cannot be decoded
            EncodeError: If the output cannot be encoded
        """
        return await asyncio.to_thread(self.normalize_sync, source, config)

    def normalize_sync(
        self,
        source: SourceAsset,
        config: CompressionConfig = DEFAULT_COMPRESSION,
    ) -> CompactAsset:
        """Blocking variant of `normalize`."""
        logger.debug(
            "Starting image normalization",
            extra={
                "source_filename": source.filename,
                "size": source.size,
                "max_width": config.max_width,
                "max_height": config.max_height,
                "quality": config.quality,
            },
        )

        if not source.data:
            raise DecodeError(
                message="Image data is empty",
                details={"filename": source.filename},
            )

        # The decode handle is closed by the context manager on every path
        try:
            with Image.open(io.BytesIO(source.data)) as handle:
                handle.load()
                oriented = ImageOps.exif_transpose(handle)
                surface = oriented.convert(_output_mode(oriented))
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as exc:
            logger.warning(
                "Failed to decode image",
                extra={"source_filename": source.filename, "error": str(exc)},
            )
            raise DecodeError(
                message="Unable to read image",
                details={"filename": source.filename, "mime_type": source.mime_type},
            ) from exc

        width, height = compute_target_dimensions(surface.width, surface.height, config)
        if (width, height) != surface.size:
            surface = surface.resize((width, height), Image.Resampling.LANCZOS)

        data = self.encode(surface, config.quality)

        logger.info(
            "Image normalized successfully",
            extra={
                "source_size": source.size,
                "output_size": len(data),
                "width": width,
                "height": height,
            },
        )

        return CompactAsset(
            data=data,
            mime_type=OUTPUT_MIME_TYPE,
            width=width,
            height=height,
        )

    @staticmethod
    def encode(surface: Image.Image, quality: float) -> bytes:
        """Encode a rasterized surface to WebP.

        Raises:
            EncodeError: If the encoder fails or produces no bytes
        """
        buffer = io.BytesIO()
        try:
            surface.save(buffer, format=OUTPUT_FORMAT, quality=int(round(quality * 100)))
        except (OSError, ValueError, KeyError) as exc:
            logger.exception("Failed to encode image")
            raise EncodeError(
                message="Failed to compress image",
                details={"format": OUTPUT_FORMAT},
            ) from exc

        data = buffer.getvalue()
        if not data:
            raise EncodeError(
                message="Failed to compress image",
                details={"format": OUTPUT_FORMAT, "reason": "empty output"},
            )

        return data
