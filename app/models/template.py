from datetime import datetime
from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base
from .enums import LocationType

class AssignmentTemplate(Base):
    """Reusable bundle of assignment defaults owned by one user"""

    __tablename__ = "assignment_templates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Required fields
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    template_name: Mapped[str] = mapped_column(String(200), nullable=False)
    assignment_type: Mapped[str] = mapped_column(String(50), nullable=False)

    # Optional fields
    description: Mapped[str | None] = mapped_column(String(1000))
    setting: Mapped[str | None] = mapped_column(String(100))
    location_type: Mapped[str] = mapped_column(String(20), default=LocationType.IN_PERSON.value)
    location_details: Mapped[str | None] = mapped_column(String(500))
    duration_minutes: Mapped[int] = mapped_column(default=60)
    default_title: Mapped[str | None] = mapped_column(String(200))
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    recurrence_pattern: Mapped[str | None] = mapped_column(String(20))
    is_team_assignment: Mapped[bool] = mapped_column(Boolean, default=False)
    team_size: Mapped[int] = mapped_column(default=1)

    # Usage stats
    times_used: Mapped[int] = mapped_column(default=0, nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self):
        return f"<AssignmentTemplate(id={self.id}, name={self.template_name})>"
