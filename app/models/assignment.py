import datetime
from typing import List
from sqlalchemy import String, Text, Boolean, Date, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base
from .enums import AssignmentStatus, PrepStatus, LocationType

class Assignment(Base):
    """A single scheduled interpreting assignment.

    Recurring assignments are stored as independent rows; siblings share
    only the field values they were created with.
    """

    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Required fields
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    assignment_type: Mapped[str] = mapped_column(String(50), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    # Optional fields
    time: Mapped[str | None] = mapped_column(String(8))
    setting: Mapped[str | None] = mapped_column(String(100))
    location_type: Mapped[str] = mapped_column(String(20), default=LocationType.IN_PERSON.value)
    location_details: Mapped[str | None] = mapped_column(String(500))
    duration_minutes: Mapped[int] = mapped_column(default=60)
    description: Mapped[str | None] = mapped_column(Text)
    is_team_assignment: Mapped[bool] = mapped_column(Boolean, default=False)
    team_size: Mapped[int] = mapped_column(default=1)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=AssignmentStatus.UPCOMING.value)
    prep_status: Mapped[str] = mapped_column(String(20), default=PrepStatus.PENDING.value)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)

    team_members: Mapped[List["AssignmentTeamMember"]] = relationship(
        "AssignmentTeamMember",
        back_populates="assignment",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_assignment_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<Assignment(id={self.id}, title={self.title}, date={self.date})>"
