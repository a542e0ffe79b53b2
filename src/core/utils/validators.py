"""Configuration validation utilities."""

import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from core.models.errors import ValidationError
from core.utils.constants import (
    BUCKET_NAME_MAX_LENGTH,
    BUCKET_NAME_PATTERN,
    ERROR_CODE_INVALID_BUCKET,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

_BUCKET_RE = re.compile(BUCKET_NAME_PATTERN)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for caller-facing messages.

    Removes internal fields like:
    - url
    - ctx
    - input
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "config"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "greater than" in msg_lower or "less than" in msg_lower:
            msg = f"Value out of range: {msg}"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_model(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate data against a Pydantic model.

    Raises:
        ValidationError: With sanitized field errors in `details`
    """
    try:
        return model(**data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message=f"Invalid {model.__name__}",
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc


def validate_bucket_name(bucket: str) -> str:
    """Return the bucket name unchanged if it is usable in a storage path."""
    if (
        not isinstance(bucket, str)
        or len(bucket) > BUCKET_NAME_MAX_LENGTH
        or not _BUCKET_RE.match(bucket)
    ):
        raise ValidationError(
            message="Invalid bucket name",
            error_code=ERROR_CODE_INVALID_BUCKET,
            details={"bucket": bucket},
        )

    return bucket
