from enum import Enum

class RecurrencePattern(str, Enum):
    """Recognised recurrence intervals for assignments"""
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

class AssignmentStatus(str, Enum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class PrepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class LocationType(str, Enum):
    IN_PERSON = "in_person"
    VIRTUAL = "virtual"
    HYBRID = "hybrid"

class TeamMemberStatus(str, Enum):
    """Lifecycle of a team member's invitation"""
    INVITED = "invited"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
