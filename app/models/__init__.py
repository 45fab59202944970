from .base import Base
from .enums import RecurrencePattern, AssignmentStatus, PrepStatus, LocationType, TeamMemberStatus
from .assignment import Assignment
from .template import AssignmentTemplate
from .team_member import AssignmentTeamMember

# For convenience, export all models
__all__ = [
    "Base",
    "RecurrencePattern",
    "AssignmentStatus",
    "PrepStatus",
    "LocationType",
    "TeamMemberStatus",
    "Assignment",
    "AssignmentTemplate",
    "AssignmentTeamMember",
]
