from typing import Any, Dict, Optional

from app.core.config import settings
from app.models.template import AssignmentTemplate

def default_title_for(template: AssignmentTemplate) -> str:
    return template.default_title or f"{template.assignment_type} Assignment"

def template_assignment_fields(
    template: AssignmentTemplate,
    user_id: str,
    title: Optional[str] = None,
    time: Optional[str] = None
) -> Dict[str, Any]:
    """Assignment fields shared by every occurrence created from ``template``.

    ``title`` and ``time`` override the template for this use only.
    """
    return {
        "user_id": user_id,
        "title": title or default_title_for(template),
        "assignment_type": template.assignment_type,
        "setting": template.setting,
        "time": time or settings.DEFAULT_ASSIGNMENT_TIME,
        "location_type": template.location_type,
        "location_details": template.location_details,
        "duration_minutes": template.duration_minutes,
        "is_team_assignment": template.is_team_assignment,
        "team_size": template.team_size,
    }
