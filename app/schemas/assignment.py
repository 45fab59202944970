import datetime as dt
from typing import List, Optional
from pydantic import Field, model_validator

from app.models.enums import AssignmentStatus, LocationType, PrepStatus
from .base import BaseSchema, TimestampSchema, UserScoped, TIME_PATTERN


class TeamMemberSeed(BaseSchema):
    """Team member listed when the assignment is created."""
    user_id: str = Field(..., min_length=1, max_length=64)
    role: str = Field("team", min_length=1, max_length=50)


class AssignmentFields(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    assignment_type: str = Field(..., min_length=1, max_length=50)
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    duration_minutes: int = Field(60, gt=0, le=24 * 60)
    setting: Optional[str] = Field(None, max_length=100)
    location_type: str = Field(LocationType.IN_PERSON.value, max_length=20)
    location_details: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    is_team_assignment: bool = False


class AssignmentCreate(AssignmentFields, UserScoped):
    date: dt.date
    team_members: List[TeamMemberSeed] = Field(default_factory=list)
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = Field(None, max_length=20)
    recurrence_end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def validate_recurrence_window(self) -> "AssignmentCreate":
        if self.recurrence_end_date is not None and self.recurrence_end_date < self.date:
            raise ValueError("recurrence_end_date must not be before date")
        return self

    @property
    def wants_recurrence(self) -> bool:
        return bool(self.is_recurring and self.recurrence_pattern)


class AssignmentStatusUpdate(UserScoped):
    """Move an assignment through its lifecycle. Only the owner can do this."""
    status: Optional[AssignmentStatus] = None
    prep_status: Optional[PrepStatus] = None
    completed: Optional[bool] = None

    @model_validator(mode="after")
    def validate_update(self) -> "AssignmentStatusUpdate":
        if self.status is None and self.prep_status is None and self.completed is None:
            raise ValueError("At least one of status, prep_status or completed must be provided")
        return self


class AssignmentResponse(AssignmentFields, TimestampSchema):
    id: int
    user_id: str
    date: dt.date
    team_size: int
    timezone: str
    status: str
    prep_status: str
    completed: bool


class AssignmentCreateResponse(BaseSchema):
    success: bool = True
    assignment: AssignmentResponse


class AssignmentBatchResponse(BaseSchema):
    success: bool = True
    message: Optional[str] = None
    assignments: List[AssignmentResponse]


class AssignmentListResponse(BaseSchema):
    items: List[AssignmentResponse]
    total: int
