from datetime import datetime
from sqlalchemy import String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base
from .enums import TeamMemberStatus

class AssignmentTeamMember(Base):
    """Interpreter attached to a team assignment."""

    __tablename__ = "assignment_team_members"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Required fields
    assignment_id: Mapped[int] = mapped_column(ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    invited_by: Mapped[str] = mapped_column(String(64), nullable=False)

    # Optional fields
    role: Mapped[str] = mapped_column(String(50), default="team")
    status: Mapped[str] = mapped_column(String(20), default=TeamMemberStatus.INVITED.value)
    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    can_edit_assignment: Mapped[bool] = mapped_column(Boolean, default=False)
    can_invite_others: Mapped[bool] = mapped_column(Boolean, default=False)

    assignment: Mapped["Assignment"] = relationship(back_populates="team_members")

    # One membership per user per assignment
    __table_args__ = (
        UniqueConstraint('assignment_id', 'user_id', name='uq_assignment_team_member'),
    )

    def __repr__(self):
        return f"<AssignmentTeamMember(assignment_id={self.assignment_id}, user_id={self.user_id}, status={self.status})>"
