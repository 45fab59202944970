from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PermissionDenied, ResourceNotFound, ValidationError
from app.core.logging import team_logger as logger
from app.crud import assignment as crud_assignment
from app.crud import team as crud_team
from app.db.database import get_db
from app.schemas.template import MessageResponse
from app.schemas.team import (
    TeamMemberInvite,
    TeamMemberUpdate,
    TeamMemberResponse,
    TeamMemberResult,
    TeamMemberList,
)

router = APIRouter(
    prefix="/assignments/team",
    tags=["Assignment Team"],
    responses={
        403: {"description": "Not allowed to change this membership"},
        404: {"description": "Assignment or membership not found"},
        500: {"description": "Internal server error"}
    }
)

@router.get(
    "",
    response_model=TeamMemberList,
    summary="List team members"
)
async def list_team_members(
    assignment_id: int = Query(..., gt=0),
    db: AsyncSession = Depends(get_db)
) -> TeamMemberList:
    members = await crud_team.get_team_members(db, assignment_id)
    return TeamMemberList(
        team_members=[TeamMemberResponse.model_validate(m) for m in members]
    )

@router.post(
    "",
    response_model=TeamMemberResult,
    status_code=status.HTTP_201_CREATED,
    summary="Invite team member",
    description="""
    Invite an interpreter onto an assignment.

    The assignment becomes a team assignment if it was not one already, and
    its team size is recounted. A user can only be invited once.
    """
)
async def invite_team_member(
    *,
    db: AsyncSession = Depends(get_db),
    invite_in: TeamMemberInvite
) -> TeamMemberResult:
    assignment = await crud_assignment.get_assignment(db, invite_in.assignment_id)
    if not assignment:
        raise ResourceNotFound("Assignment not found")

    existing = await crud_team.get_membership(db, invite_in.assignment_id, invite_in.user_id)
    if existing:
        raise ValidationError(f"User is already a team member ({existing.status})")

    member = await crud_team.invite_team_member(db, assignment, invite_in)
    logger.info(
        "Invited team member",
        extra={"assignment_id": assignment.id, "user_id": invite_in.user_id, "invited_by": invite_in.invited_by}
    )
    return TeamMemberResult(
        team_member=TeamMemberResponse.model_validate(member),
        message="Team member invited successfully"
    )

@router.put(
    "",
    response_model=TeamMemberResult,
    summary="Respond to an invitation",
    description="Accept or decline an invitation, or change role. Only the invited member can do this."
)
async def update_team_member(
    *,
    db: AsyncSession = Depends(get_db),
    member_in: TeamMemberUpdate
) -> TeamMemberResult:
    member = await crud_team.get_team_member(db, member_in.team_member_id, user_id=member_in.user_id)
    if not member:
        raise ResourceNotFound("Team membership not found")

    member = await crud_team.update_team_member(db, member, member_in)
    return TeamMemberResult(team_member=TeamMemberResponse.model_validate(member))

@router.delete(
    "",
    response_model=MessageResponse,
    summary="Remove team member",
    description="Remove a member. Allowed for the assignment owner and for the member themself."
)
async def remove_team_member(
    team_member_id: int = Query(..., gt=0),
    removed_by: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    member = await crud_team.get_team_member(db, team_member_id)
    if not member:
        raise ResourceNotFound("Team membership not found")

    if removed_by not in (member.assignment.user_id, member.user_id):
        raise PermissionDenied("Not authorized to remove this team member")

    await crud_team.remove_team_member(db, member)
    logger.info(
        "Removed team member",
        extra={"team_member_id": team_member_id, "removed_by": removed_by}
    )
    return MessageResponse(message="Team member removed successfully")
