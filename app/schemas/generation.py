"""
Image generation schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import field_validator

from app.schemas.base import BaseSchema
from app.schemas.provider import ModelOption


class InlineImageSchema(BaseSchema):
    """Base64 encoded image."""
    mime_type: str
    data: str


class GenerateRequest(BaseSchema):
    """
    Generation request.

    Malformed optional fields are dropped rather than rejected: an
    ``inputImage`` without string ``mimeType`` and ``data`` is ignored, and
    a non-string ``aspectRatio`` or ``imageSize`` is treated as absent.
    """

    prompt: Optional[str] = None
    model_key: Optional[str] = None
    input_image: Optional[InlineImageSchema] = None
    aspect_ratio: Optional[str] = None
    image_size: Optional[str] = None

    @field_validator("input_image", mode="before")
    @classmethod
    def drop_malformed_image(cls, v: Any) -> Any:
        if isinstance(v, InlineImageSchema):
            return v
        if not isinstance(v, dict):
            return None
        mime_type = v.get("mimeType", v.get("mime_type"))
        data = v.get("data")
        if not isinstance(mime_type, str) or not isinstance(data, str):
            return None
        return {"mime_type": mime_type, "data": data}

    @field_validator("aspect_ratio", "image_size", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class UsageSummary(BaseSchema):
    usage_count: int
    last_used_at: Optional[datetime] = None


class GenerateResponse(BaseSchema):
    model: ModelOption
    image: InlineImageSchema
    usage: UsageSummary
