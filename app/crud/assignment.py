from datetime import date, datetime, UTC
from typing import Any, Dict, List, Optional, Sequence
import time

from sqlalchemy import Select, select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError
from app.core.logging import db_logger
from app.core.metrics import record_db_operation
from app.models.assignment import Assignment
from app.models.enums import AssignmentStatus, TeamMemberStatus
from app.models.team_member import AssignmentTeamMember
from app.schemas.assignment import AssignmentCreate, AssignmentStatusUpdate
from app.utils.recurrence import build_occurrence, expand_occurrences

# Request-only fields that never land on an assignment row
_NON_ROW_FIELDS = {
    "date",
    "team_members",
    "is_recurring",
    "recurrence_pattern",
    "recurrence_end_date",
}

def assignment_fields(assignment_in: AssignmentCreate, team_size: int) -> Dict[str, Any]:
    """Row fields shared by every occurrence of ``assignment_in``."""
    fields = assignment_in.model_dump(exclude=_NON_ROW_FIELDS)
    fields["team_size"] = team_size
    return fields

async def _persist(
    db: AsyncSession,
    db_assignments: Sequence[Assignment],
    error_message: str
) -> None:
    """Write all rows in one transaction, or none of them."""
    started = time.perf_counter()
    try:
        db.add_all(db_assignments)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        db_logger.error(
            error_message,
            extra={"error": str(e), "error_type": e.__class__.__name__, "rows": len(db_assignments)}
        )
        raise PersistenceError(error_message, reason=str(e)) from e
    record_db_operation("INSERT", time.perf_counter() - started)

    for db_assignment in db_assignments:
        await db.refresh(db_assignment)

async def create_assignments_batch(
    db: AsyncSession,
    rows: List[Dict[str, Any]],
    error_message: str = "Failed to create recurring assignments"
) -> List[Assignment]:
    """Persist a batch of prepared assignment rows atomically"""
    db_assignments = [Assignment(**row) for row in rows]
    await _persist(db, db_assignments, error_message)
    return db_assignments

async def create_assignment(
    db: AsyncSession,
    assignment_in: AssignmentCreate,
    timezone: str
) -> Assignment:
    """Create one assignment, attaching any listed team members as confirmed"""
    team_size = len(assignment_in.team_members) + 1 if assignment_in.is_team_assignment else 1
    row = build_occurrence(
        assignment_fields(assignment_in, team_size),
        assignment_in.date,
        timezone=timezone
    )
    db_assignment = Assignment(**row)

    if assignment_in.is_team_assignment:
        now = datetime.now(UTC)
        db_assignment.team_members = [
            AssignmentTeamMember(
                user_id=member.user_id,
                role=member.role,
                status=TeamMemberStatus.CONFIRMED.value,
                invited_by=assignment_in.user_id,
                invited_at=now,
                confirmed_at=now,
                can_edit_assignment=False,
                can_invite_others=False
            )
            for member in assignment_in.team_members
        ]

    await _persist(db, [db_assignment], "Failed to create assignment")
    return db_assignment

async def create_recurring_assignments(
    db: AsyncSession,
    assignment_in: AssignmentCreate,
    timezone: str
) -> List[Assignment]:
    """Expand a recurring request and persist every occurrence"""
    rows = expand_occurrences(
        assignment_fields(assignment_in, team_size=1),
        assignment_in.date,
        assignment_in.recurrence_pattern,
        assignment_in.recurrence_end_date,
        timezone=timezone
    )
    return await create_assignments_batch(db, rows)

async def get_assignment(
    db: AsyncSession,
    assignment_id: int,
    user_id: Optional[str] = None
) -> Optional[Assignment]:
    """Get an assignment by ID, optionally restricted to its owner"""
    query = select(Assignment).where(Assignment.id == assignment_id)
    if user_id is not None:
        query = query.where(Assignment.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()

def _user_assignments(
    query: Select,
    user_id: str,
    start_date: Optional[date],
    end_date: Optional[date]
) -> Select:
    query = query.where(Assignment.user_id == user_id)
    if start_date is not None:
        query = query.where(Assignment.date >= start_date)
    if end_date is not None:
        query = query.where(Assignment.date <= end_date)
    return query

async def get_assignments_by_user(
    db: AsyncSession,
    user_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
) -> List[Assignment]:
    """Get a user's assignments in date order"""
    query = _user_assignments(select(Assignment), user_id, start_date, end_date)
    result = await db.execute(
        query
        .order_by(Assignment.date, Assignment.time, Assignment.id)
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())

async def count_assignments_by_user(
    db: AsyncSession,
    user_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> int:
    """Count every assignment matching the list filters, ignoring paging"""
    query = _user_assignments(
        select(func.count()).select_from(Assignment),
        user_id,
        start_date,
        end_date
    )
    result = await db.execute(query)
    return result.scalar_one()

async def update_assignment_status(
    db: AsyncSession,
    db_assignment: Assignment,
    update_in: AssignmentStatusUpdate
) -> Assignment:
    """Apply a lifecycle change. Reaching ``completed`` also marks the assignment done."""
    if update_in.status is not None:
        db_assignment.status = update_in.status.value
        if update_in.status == AssignmentStatus.COMPLETED:
            db_assignment.completed = True
    if update_in.prep_status is not None:
        db_assignment.prep_status = update_in.prep_status.value
    if update_in.completed is not None and update_in.status != AssignmentStatus.COMPLETED:
        db_assignment.completed = update_in.completed

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("Failed to update assignment", reason=str(e)) from e

    await db.refresh(db_assignment)
    return db_assignment
