"""Named compression presets."""

from collections.abc import Mapping
from types import MappingProxyType

from core.models.errors import ValidationError
from core.models.image import CompressionConfig
from core.utils.constants import COMPRESSION_PRESET_VALUES, ERROR_CODE_UNKNOWN_PRESET
from core.utils.validators import validate_model

DEFAULT_COMPRESSION = CompressionConfig()

COMPRESSION_PRESETS: Mapping[str, CompressionConfig] = MappingProxyType(
    {
        name: validate_model(
            CompressionConfig,
            {"max_width": width, "max_height": height, "quality": quality},
        )
        for name, (width, height, quality) in COMPRESSION_PRESET_VALUES.items()
    }
)


def get_compression_preset(name: str) -> CompressionConfig:
    """Look up a preset by name (avatar, profile, cover, gallery, thumbnail, event)."""
    try:
        return COMPRESSION_PRESETS[name]
    except KeyError as exc:
        raise ValidationError(
            message=f"Unknown compression preset '{name}'",
            error_code=ERROR_CODE_UNKNOWN_PRESET,
            details={"allowed": sorted(COMPRESSION_PRESETS)},
        ) from exc
