"""Shared image and identity models."""

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictInt, StrictStr

from core.utils.constants import (
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
    OUTPUT_MIME_TYPE,
)


class SourceAsset(BaseModel):
    """Raw image supplied by the caller, of unknown origin."""

    model_config = ConfigDict(frozen=True)

    data: StrictBytes = Field(..., description="Raw image bytes")
    mime_type: StrictStr | None = Field(None, description="MIME type hint, may be wrong")
    filename: StrictStr | None = Field(None, description="Original file name from a picker")

    @property
    def size(self) -> int:
        return len(self.data)


class CompressionConfig(BaseModel):
    """Bounds and quality used when normalizing an image."""

    model_config = ConfigDict(frozen=True)

    max_width: StrictInt = Field(DEFAULT_MAX_WIDTH, gt=0, description="Maximum output width")
    max_height: StrictInt = Field(DEFAULT_MAX_HEIGHT, gt=0, description="Maximum output height")
    quality: float = Field(DEFAULT_QUALITY, gt=0, le=1, description="Encoder quality in (0, 1]")


class CompactAsset(BaseModel):
    """Normalized image ready for upload."""

    model_config = ConfigDict(frozen=True)

    data: StrictBytes = Field(..., description="Encoded image bytes")
    mime_type: StrictStr = Field(OUTPUT_MIME_TYPE, description="MIME type of the encoded image")
    width: StrictInt = Field(..., gt=0, description="Output width in pixels")
    height: StrictInt = Field(..., gt=0, description="Output height in pixels")

    @property
    def size(self) -> int:
        return len(self.data)


class CurrentUser(BaseModel):
    """Authenticated principal reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr = Field(..., min_length=1, description="User identifier")
    email: StrictStr | None = Field(None, description="User email address")
