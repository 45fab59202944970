from datetime import date
from typing import Optional, Union
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ResourceNotFound, ValidationError
from app.core.logging import assignments_logger as logger
from app.core.metrics import record_assignments_created
from app.crud import assignment as crud_assignment
from app.db.database import get_db
from app.schemas.assignment import (
    AssignmentCreate,
    AssignmentStatusUpdate,
    AssignmentResponse,
    AssignmentCreateResponse,
    AssignmentBatchResponse,
    AssignmentListResponse,
)

router = APIRouter(
    prefix="/assignments",
    tags=["Assignments"],
    responses={
        404: {"description": "Assignment not found"},
        422: {"description": "Missing or invalid fields"},
        500: {"description": "Internal server error"}
    }
)

@router.post(
    "/",
    response_model=Union[AssignmentBatchResponse, AssignmentCreateResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create assignment",
    description="""
    Create a single assignment, or a recurring series of assignments.

    A series is created when both `is_recurring` and `recurrence_pattern` are
    given. Supported patterns are `daily`, `weekly`, `biweekly` and `monthly`;
    any other value creates only the first occurrence. A series ends on
    `recurrence_end_date` (inclusive) or after 52 occurrences.
    """,
    responses={
        201: {
            "description": "Assignment(s) created",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Created 4 recurring assignments",
                        "assignments": [{
                            "id": 1,
                            "user_id": "6f1c2e1a-interpreter",
                            "title": "Weekly clinic",
                            "assignment_type": "medical",
                            "date": "2025-01-01",
                            "time": "10:00",
                            "duration_minutes": 60,
                            "timezone": "America/New_York",
                            "status": "upcoming",
                            "prep_status": "pending",
                            "completed": False
                        }]
                    }
                }
            }
        }
    }
)
async def create_assignment(
    *,
    db: AsyncSession = Depends(get_db),
    assignment_in: AssignmentCreate
) -> Union[AssignmentBatchResponse, AssignmentCreateResponse]:
    """
    Create an assignment.

    Recurring requests are expanded into one row per occurrence and saved in a
    single transaction: either every occurrence is created or none is.
    """
    if assignment_in.wants_recurrence:
        db_assignments = await crud_assignment.create_recurring_assignments(
            db,
            assignment_in,
            timezone=settings.DEFAULT_TIMEZONE
        )
        record_assignments_created("direct", len(db_assignments))
        logger.info(
            "Created recurring assignments",
            extra={
                "user_id": assignment_in.user_id,
                "count": len(db_assignments),
                "pattern": assignment_in.recurrence_pattern
            }
        )
        return AssignmentBatchResponse(
            message=f"Created {len(db_assignments)} recurring assignments",
            assignments=[AssignmentResponse.model_validate(a) for a in db_assignments]
        )

    db_assignment = await crud_assignment.create_assignment(
        db,
        assignment_in,
        timezone=settings.DEFAULT_TIMEZONE
    )
    record_assignments_created("direct", 1)
    logger.info(
        "Created assignment",
        extra={"user_id": assignment_in.user_id, "assignment_id": db_assignment.id}
    )
    return AssignmentCreateResponse(assignment=AssignmentResponse.model_validate(db_assignment))

@router.get(
    "/",
    response_model=AssignmentListResponse,
    summary="List assignments",
    description="List a user's assignments in date order, optionally within a date range."
)
async def list_assignments(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: str = Query(..., min_length=1, description="Owner of the assignments"),
    start_date: Optional[date] = Query(None, description="Earliest date to include"),
    end_date: Optional[date] = Query(None, description="Latest date to include"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500)
) -> AssignmentListResponse:
    if start_date and end_date and end_date < start_date:
        raise ValidationError("end_date must not be before start_date")

    db_assignments = await crud_assignment.get_assignments_by_user(
        db,
        user_id,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit
    )
    total = await crud_assignment.count_assignments_by_user(
        db,
        user_id,
        start_date=start_date,
        end_date=end_date
    )
    return AssignmentListResponse(
        items=[AssignmentResponse.model_validate(a) for a in db_assignments],
        total=total
    )

@router.get(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    summary="Get assignment by ID"
)
async def get_assignment(
    assignment_id: int,
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db)
) -> AssignmentResponse:
    """Get one assignment owned by ``user_id``."""
    db_assignment = await crud_assignment.get_assignment(db, assignment_id, user_id=user_id)
    if not db_assignment:
        raise ResourceNotFound("Assignment not found")
    return AssignmentResponse.model_validate(db_assignment)

@router.patch(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    summary="Update assignment status",
    description="""
    Move an assignment through its lifecycle: `status` (`upcoming`,
    `in_progress`, `completed`, `cancelled`), `prep_status` (`pending`,
    `in_progress`, `completed`) and `completed`.

    Setting `status` to `completed` also sets `completed` to true.
    """
)
async def update_assignment_status(
    assignment_id: int,
    update_in: AssignmentStatusUpdate,
    db: AsyncSession = Depends(get_db)
) -> AssignmentResponse:
    db_assignment = await crud_assignment.get_assignment(db, assignment_id, user_id=update_in.user_id)
    if not db_assignment:
        raise ResourceNotFound("Assignment not found")

    db_assignment = await crud_assignment.update_assignment_status(db, db_assignment, update_in)
    logger.info(
        "Updated assignment status",
        extra={
            "assignment_id": assignment_id,
            "user_id": update_in.user_id,
            "status": db_assignment.status,
            "prep_status": db_assignment.prep_status
        }
    )
    return AssignmentResponse.model_validate(db_assignment)
