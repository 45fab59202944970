from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import PersistenceError, ResourceNotFound
from app.core.logging import templates_logger as logger
from app.core.metrics import record_assignments_created, record_template_usage_failure
from app.crud import assignment as crud_assignment
from app.crud import template as crud_template
from app.db.database import get_db
from app.schemas.assignment import AssignmentResponse
from app.schemas.template import (
    TemplateCreate,
    TemplateResponse,
    TemplateCreateResponse,
    TemplateListResponse,
    TemplateUse,
    TemplateUseResponse,
    MessageResponse,
)
from app.utils.recurrence import build_occurrence, expand_occurrences
from app.utils.template_utils import template_assignment_fields

USAGE_WARNING = "Assignments were created, but the template usage statistics could not be updated"

router = APIRouter(
    prefix="/assignments/templates",
    tags=["Assignment Templates"],
    responses={
        404: {"description": "Template not found"},
        422: {"description": "Missing or invalid fields"},
        500: {"description": "Internal server error"}
    }
)

@router.get(
    "",
    response_model=TemplateListResponse,
    summary="List templates",
    description="List a user's assignment templates, most frequently used first."
)
async def list_templates(
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db)
) -> TemplateListResponse:
    templates = await crud_template.get_templates_by_user(db, user_id)
    return TemplateListResponse(
        templates=[TemplateResponse.model_validate(t) for t in templates]
    )

@router.post(
    "",
    response_model=TemplateCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create template"
)
async def create_template(
    *,
    db: AsyncSession = Depends(get_db),
    template_in: TemplateCreate
) -> TemplateCreateResponse:
    """Save a reusable bundle of assignment defaults."""
    db_template = await crud_template.create_template(db, template_in)
    logger.info(
        "Created template",
        extra={"user_id": template_in.user_id, "template_id": db_template.id}
    )
    return TemplateCreateResponse(template=TemplateResponse.model_validate(db_template))

@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete template"
)
async def delete_template(
    template_id: int = Query(..., gt=0),
    user_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    deleted = await crud_template.delete_template(db, template_id, user_id)
    if not deleted:
        raise ResourceNotFound("Template not found or access denied")
    return MessageResponse(message="Template deleted successfully")

@router.post(
    "/use",
    response_model=TemplateUseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create assignments from a template",
    description="""
    Create one assignment, or a recurring series when the template is
    recurring, starting on `date`.

    `time` and `title` override the template for this use only. Once the
    assignments are saved the template's usage counter is updated; if that
    update fails the assignments are kept and the response carries a warning.
    """,
    responses={
        201: {
            "description": "Assignments created from the template",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Created 1 assignment(s) from template",
                        "assignments": [{
                            "id": 7,
                            "title": "Court hearing",
                            "date": "2025-03-01",
                            "time": "09:00",
                            "status": "upcoming"
                        }],
                        "warnings": []
                    }
                }
            }
        }
    }
)
async def use_template(
    *,
    db: AsyncSession = Depends(get_db),
    use_in: TemplateUse
) -> TemplateUseResponse:
    """
    Apply a template.

    Runs in two steps: the assignments are committed first, then the template
    usage stats are updated in a separate transaction.
    """
    template = await crud_template.get_template(db, use_in.template_id, use_in.user_id)
    if not template:
        raise ResourceNotFound("Template not found or access denied")

    fields = template_assignment_fields(template, use_in.user_id, title=use_in.title, time=use_in.time)

    if template.is_recurring and template.recurrence_pattern:
        rows = expand_occurrences(
            fields,
            use_in.date,
            template.recurrence_pattern,
            use_in.recurrence_end_date,
            timezone=settings.DEFAULT_TIMEZONE
        )
    else:
        rows = [build_occurrence(fields, use_in.date, timezone=settings.DEFAULT_TIMEZONE)]

    db_assignments = await crud_assignment.create_assignments_batch(
        db,
        rows,
        error_message="Failed to create assignments from template"
    )
    record_assignments_created("template", len(db_assignments))

    warnings = []
    try:
        await crud_template.record_template_usage(db, template)
    except PersistenceError as e:
        record_template_usage_failure()
        logger.warning(
            "Template usage stats not updated",
            extra={"template_id": template.id, "user_id": use_in.user_id, "error": e.reason}
        )
        warnings.append(USAGE_WARNING)

    return TemplateUseResponse(
        message=f"Created {len(db_assignments)} assignment(s) from template",
        assignments=[AssignmentResponse.model_validate(a) for a in db_assignments],
        warnings=warnings
    )
