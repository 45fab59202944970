import datetime as dt
from typing import List, Optional
from pydantic import Field, model_validator

from app.models.enums import TeamMemberStatus
from .base import BaseSchema, TimestampSchema


class TeamMemberInvite(BaseSchema):
    """Schema for inviting an interpreter onto an assignment"""
    assignment_id: int = Field(..., gt=0)
    user_id: str = Field(..., min_length=1, max_length=64)
    invited_by: str = Field(..., min_length=1, max_length=64)
    role: str = Field("team", min_length=1, max_length=50)


class TeamMemberUpdate(BaseSchema):
    """Schema for a member accepting or declining, or changing role"""
    team_member_id: int = Field(..., gt=0)
    user_id: str = Field(..., min_length=1, max_length=64)
    status: Optional[str] = Field(
        None,
        pattern=f"^({TeamMemberStatus.CONFIRMED.value}|{TeamMemberStatus.DECLINED.value})$"
    )
    role: Optional[str] = Field(None, min_length=1, max_length=50)

    @model_validator(mode="after")
    def validate_update(self) -> "TeamMemberUpdate":
        if self.status is None and self.role is None:
            raise ValueError("At least one of status or role must be provided")
        return self


class TeamMemberResponse(TimestampSchema):
    id: int
    assignment_id: int
    user_id: str
    role: str
    status: str
    invited_by: str
    invited_at: Optional[dt.datetime] = None
    confirmed_at: Optional[dt.datetime] = None
    can_edit_assignment: bool
    can_invite_others: bool


class TeamMemberResult(BaseSchema):
    success: bool = True
    team_member: TeamMemberResponse
    message: Optional[str] = None


class TeamMemberList(BaseSchema):
    success: bool = True
    team_members: List[TeamMemberResponse]
