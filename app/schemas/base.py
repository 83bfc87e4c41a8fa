"""
Base Pydantic schemas.

This module contains base schemas with common fields and configurations
that other schemas can inherit from.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All other schemas should inherit from this class. Fields are declared in
    snake_case and exchanged as camelCase JSON.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        # model_key / model_id / model_name are domain fields here
        protected_namespaces=(),
    )


class TimestampSchema(BaseSchema):
    """
    Schema with timestamp fields.
    """

    created_at: datetime
    updated_at: datetime


class IDSchema(BaseSchema):
    """
    Schema with ID field.
    """

    id: int


class OkResponse(BaseSchema):
    ok: bool = True


class SuccessResponse(BaseSchema):
    success: bool = True
