"""
Base Pydantic schemas.

This module contains base schemas with common fields and configurations
that other schemas can inherit from.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, StringConstraints


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All other schemas should inherit from this class.
    """

    model_config = ConfigDict(from_attributes=True)


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


def _reading_to_text(value: Any) -> Any:
    # Forms post numbers as well as strings; readings are stored as typed
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


def reading_field(max_length: int = 20) -> Any:
    """
    An observation value kept as text, exactly as the observer entered it.

    ``max_length`` matches the width of the column the value is stored in.
    """
    return Optional[
        Annotated[str, StringConstraints(max_length=max_length), BeforeValidator(_reading_to_text)]
    ]


Reading = reading_field()
# Codes and indicators stored in narrow columns
ShortReading = reading_field(10)


class PageMeta(BaseModel):
    """Pagination details returned with list endpoints."""
    total: int
    page: int
    per_page: int
    total_pages: int
