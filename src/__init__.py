"""Image Storage Pipeline Package."""

__version__ = "1.0.0"
__author__ = "Bharat kumar"
__description__ = (
    "Image normalization and Supabase Storage upload/delete pipeline"
)

__all__ = ["services", "core"]
