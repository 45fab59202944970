from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

# "HH:MM" or "HH:MM:SS", as sent by the scheduling forms
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True)

class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""
    created_at: datetime | None = None
    updated_at: datetime | None = None

class UserScoped(BaseSchema):
    """Requests made on behalf of a user of the hosted auth provider."""
    user_id: str = Field(..., min_length=1, max_length=64)
