from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityCreate(BaseModel):
    """Payload for recording a tracked lead activity.

    Type and subtype are stripped and lower-cased before validation so
    that rule matching is case-insensitive.
    """

    activity_type: str = Field(..., min_length=1, max_length=100)
    activity_subtype: Optional[str] = Field(None, max_length=100)
    page_url: Optional[str] = None
    activity_timestamp: Optional[datetime] = None

    @field_validator("activity_type", "activity_subtype", mode="before")
    @classmethod
    def normalise_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
        return value

    @field_validator("activity_subtype")
    @classmethod
    def blank_subtype_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity_id: UUID
    lead_id: UUID
    activity_type: str
    activity_subtype: Optional[str] = None
    activity_timestamp: datetime
