from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy import select, update, delete, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError
from app.core.logging import db_logger
from app.models.template import AssignmentTemplate
from app.schemas.template import TemplateCreate

async def get_templates_by_user(db: AsyncSession, user_id: str) -> List[AssignmentTemplate]:
    """Get a user's templates, most used first"""
    result = await db.execute(
        select(AssignmentTemplate)
        .where(AssignmentTemplate.user_id == user_id)
        .order_by(AssignmentTemplate.times_used.desc(), AssignmentTemplate.id)
    )
    return list(result.scalars().all())

async def get_template(
    db: AsyncSession,
    template_id: int,
    user_id: str
) -> Optional[AssignmentTemplate]:
    """Get a template only if ``user_id`` owns it"""
    result = await db.execute(
        select(AssignmentTemplate).where(
            and_(
                AssignmentTemplate.id == template_id,
                AssignmentTemplate.user_id == user_id
            )
        )
    )
    return result.scalar_one_or_none()

async def create_template(db: AsyncSession, template_in: TemplateCreate) -> AssignmentTemplate:
    """Create a new template"""
    db_template = AssignmentTemplate(
        **template_in.model_dump(),
        times_used=0
    )
    try:
        db.add(db_template)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("Failed to create template", reason=str(e)) from e
    await db.refresh(db_template)
    return db_template

async def delete_template(db: AsyncSession, template_id: int, user_id: str) -> bool:
    """Delete a template owned by ``user_id``. Returns False when nothing matched."""
    result = await db.execute(
        delete(AssignmentTemplate).where(
            and_(
                AssignmentTemplate.id == template_id,
                AssignmentTemplate.user_id == user_id
            )
        )
    )
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise PersistenceError("Failed to delete template", reason=str(e)) from e
    return result.rowcount > 0

async def record_template_usage(db: AsyncSession, template: AssignmentTemplate) -> AssignmentTemplate:
    """Bump a template's usage counter in its own transaction.

    Runs after the assignments created from the template are committed, so a
    failure here never undoes them.
    """
    now = datetime.now(UTC)
    try:
        await db.execute(
            update(AssignmentTemplate)
            .where(AssignmentTemplate.id == template.id)
            .values(
                times_used=AssignmentTemplate.times_used + 1,
                last_used_at=now,
                updated_at=now
            )
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        db_logger.warning(
            "Template usage update failed",
            extra={"template_id": template.id, "error": str(e)}
        )
        raise PersistenceError("Failed to update template usage", reason=str(e)) from e

    await db.refresh(template)
    return template
