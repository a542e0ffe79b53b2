"""Compress-then-store flow used by forms that attach images to records."""

from aws_lambda_powertools import Logger

from core.models.image import CompressionConfig, SourceAsset
from core.utils.presets import DEFAULT_COMPRESSION, get_compression_preset
from services.normalize_image.service import ImageNormalizer, generate_webp_filename
from services.storage_gateway.service import StorageGateway

logger = Logger(UTC=True)


class UploadService:
    """Application service that normalizes an image and stores it.

    Failures from either step propagate unchanged so the caller can render
    a specific message.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        normalizer: ImageNormalizer | None = None,
    ) -> None:
        self.gateway = gateway
        self.normalizer = normalizer or ImageNormalizer()

    async def upload_image(
        self,
        source: SourceAsset,
        *,
        preset: str | None = None,
        config: CompressionConfig | None = None,
        name_prefix: str | None = None,
        bucket: str | None = None,
    ) -> str:
        """Normalize `source` and upload it, returning the public URL.

        `preset` names one of the compression presets; an explicit `config`
        wins over it. `name_prefix` only feeds the desired name, which
        contributes the extension to the storage key.
        """
        if config is None:
            config = get_compression_preset(preset) if preset else DEFAULT_COMPRESSION

        compact = await self.normalizer.normalize(source, config)
        desired_name = generate_webp_filename(name_prefix) if name_prefix else None

        logger.debug(
            "Normalized image ready for upload",
            extra={"preset": preset, "size": compact.size, "width": compact.width, "height": compact.height},
        )
        return await self.gateway.upload(compact, desired_name=desired_name, bucket=bucket)

    async def replace_image(
        self,
        source: SourceAsset,
        previous_url: str | None,
        *,
        preset: str | None = None,
        config: CompressionConfig | None = None,
        name_prefix: str | None = None,
        bucket: str | None = None,
    ) -> str:
        """Upload a new image, then best-effort delete the one it replaces."""
        url = await self.upload_image(
            source,
            preset=preset,
            config=config,
            name_prefix=name_prefix,
            bucket=bucket,
        )

        if previous_url and previous_url != url:
            removed = await self.gateway.delete(previous_url, bucket)
            if not removed:
                logger.warning("Previous image was not removed", extra={"url": previous_url})

        return url
