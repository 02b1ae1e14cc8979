"""
Form draft schemas.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class DraftUpdate(BaseModel):
    """Draft field values to merge into (PATCH) or replace (PUT) a draft."""
    data: Dict[str, Any] = Field(default_factory=dict)


class Draft(BaseModel):
    form: str
    data: Dict[str, Any]
    last_updated: Optional[float] = Field(None, description="Unix timestamp of the last write")
