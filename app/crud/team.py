from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy import select, func, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import PersistenceError, ValidationError
from app.models.assignment import Assignment
from app.models.enums import TeamMemberStatus
from app.models.team_member import AssignmentTeamMember
from app.schemas.team import TeamMemberInvite, TeamMemberUpdate

async def get_team_members(db: AsyncSession, assignment_id: int) -> List[AssignmentTeamMember]:
    """Get all team members of an assignment"""
    result = await db.execute(
        select(AssignmentTeamMember)
        .where(AssignmentTeamMember.assignment_id == assignment_id)
        .order_by(AssignmentTeamMember.id)
    )
    return list(result.scalars().all())

async def get_team_member(
    db: AsyncSession,
    team_member_id: int,
    user_id: Optional[str] = None
) -> Optional[AssignmentTeamMember]:
    """Get a membership with its assignment loaded"""
    query = (
        select(AssignmentTeamMember)
        .options(selectinload(AssignmentTeamMember.assignment))
        .where(AssignmentTeamMember.id == team_member_id)
    )
    if user_id is not None:
        query = query.where(AssignmentTeamMember.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()

async def get_membership(
    db: AsyncSession,
    assignment_id: int,
    user_id: str
) -> Optional[AssignmentTeamMember]:
    result = await db.execute(
        select(AssignmentTeamMember).where(
            and_(
                AssignmentTeamMember.assignment_id == assignment_id,
                AssignmentTeamMember.user_id == user_id
            )
        )
    )
    return result.scalar_one_or_none()

async def _sync_team_size(db: AsyncSession, assignment: Assignment) -> None:
    """Team size counts the assignment owner plus every member row."""
    result = await db.execute(
        select(func.count())
        .select_from(AssignmentTeamMember)
        .where(AssignmentTeamMember.assignment_id == assignment.id)
    )
    assignment.team_size = result.scalar_one() + 1

async def invite_team_member(
    db: AsyncSession,
    assignment: Assignment,
    invite: TeamMemberInvite
) -> AssignmentTeamMember:
    """Invite a user onto an assignment, turning it into a team assignment"""
    member = AssignmentTeamMember(
        assignment_id=assignment.id,
        user_id=invite.user_id,
        role=invite.role,
        status=TeamMemberStatus.INVITED.value,
        invited_by=invite.invited_by,
        invited_at=datetime.now(UTC),
        can_edit_assignment=False,
        can_invite_others=False
    )
    try:
        assignment.is_team_assignment = True
        db.add(member)
        await db.flush()
        await _sync_team_size(db, assignment)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # Lost a race with a concurrent invite for the same user
        raise ValidationError("User is already a team member") from e
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("Failed to invite team member", reason=str(e)) from e

    await db.refresh(member)
    return member

async def update_team_member(
    db: AsyncSession,
    member: AssignmentTeamMember,
    member_in: TeamMemberUpdate
) -> AssignmentTeamMember:
    """Record a member's response to an invitation or a role change"""
    if member_in.status is not None:
        member.status = member_in.status
        if member_in.status == TeamMemberStatus.CONFIRMED.value:
            member.confirmed_at = datetime.now(UTC)
    if member_in.role is not None:
        member.role = member_in.role

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("Failed to update team membership", reason=str(e)) from e

    await db.refresh(member)
    return member

async def remove_team_member(db: AsyncSession, member: AssignmentTeamMember) -> None:
    """Delete a membership and recount the assignment's team"""
    assignment = member.assignment
    try:
        await db.delete(member)
        await db.flush()
        await _sync_team_size(db, assignment)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("Failed to remove team member", reason=str(e)) from e
