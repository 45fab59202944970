import datetime as dt
from typing import List, Optional
from pydantic import Field, model_validator

from app.models.enums import LocationType
from .base import BaseSchema, TimestampSchema, UserScoped, TIME_PATTERN
from .assignment import AssignmentResponse


class TemplateBase(BaseSchema):
    """Assignment defaults stored on a template"""
    template_name: str = Field(..., min_length=1, max_length=200)
    assignment_type: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    setting: Optional[str] = Field(None, max_length=100)
    location_type: str = Field(LocationType.IN_PERSON.value, max_length=20)
    location_details: Optional[str] = Field(None, max_length=500)
    duration_minutes: int = Field(60, gt=0, le=24 * 60)
    default_title: Optional[str] = Field(None, max_length=200)
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = Field(None, max_length=20)
    is_team_assignment: bool = False
    team_size: int = Field(1, ge=1)


class TemplateCreate(TemplateBase, UserScoped):
    pass


class TemplateResponse(TemplateBase, TimestampSchema):
    id: int
    user_id: str
    times_used: int
    last_used_at: Optional[dt.datetime] = None


class TemplateCreateResponse(BaseSchema):
    success: bool = True
    template: TemplateResponse


class TemplateListResponse(BaseSchema):
    success: bool = True
    templates: List[TemplateResponse]


class TemplateUse(UserScoped):
    """Apply a saved template starting on ``date``."""
    template_id: int = Field(..., gt=0)
    date: dt.date
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    recurrence_end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def validate_recurrence_window(self) -> "TemplateUse":
        if self.recurrence_end_date is not None and self.recurrence_end_date < self.date:
            raise ValueError("recurrence_end_date must not be before date")
        return self


class TemplateUseResponse(BaseSchema):
    success: bool = True
    message: str
    assignments: List[AssignmentResponse]
    warnings: List[str] = Field(default_factory=list)


class MessageResponse(BaseSchema):
    success: bool = True
    message: str
