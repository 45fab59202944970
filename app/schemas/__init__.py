from .base import BaseSchema, TimestampSchema, UserScoped
from .assignment import (
    TeamMemberSeed,
    AssignmentCreate,
    AssignmentStatusUpdate,
    AssignmentResponse,
    AssignmentCreateResponse,
    AssignmentBatchResponse,
    AssignmentListResponse,
)
from .template import (
    TemplateCreate,
    TemplateResponse,
    TemplateCreateResponse,
    TemplateListResponse,
    TemplateUse,
    TemplateUseResponse,
    MessageResponse,
)
from .team import (
    TeamMemberInvite,
    TeamMemberUpdate,
    TeamMemberResponse,
    TeamMemberResult,
    TeamMemberList,
)

__all__ = [
    "BaseSchema",
    "TimestampSchema",
    "UserScoped",
    "TeamMemberSeed",
    "AssignmentCreate",
    "AssignmentStatusUpdate",
    "AssignmentResponse",
    "AssignmentCreateResponse",
    "AssignmentBatchResponse",
    "AssignmentListResponse",
    "TemplateCreate",
    "TemplateResponse",
    "TemplateCreateResponse",
    "TemplateListResponse",
    "TemplateUse",
    "TemplateUseResponse",
    "MessageResponse",
    "TeamMemberInvite",
    "TeamMemberUpdate",
    "TeamMemberResponse",
    "TeamMemberResult",
    "TeamMemberList",
]
