"""
Expansion of a recurring assignment request into dated occurrences.

Both direct assignment creation and template application build their rows
here, so every assignment carries the same fixed defaults whether it was
created alone or as part of a recurring batch.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from dateutil.relativedelta import relativedelta

from app.models.enums import AssignmentStatus, PrepStatus, RecurrencePattern

# Upper bound on a single expansion, roughly one year of weekly occurrences
MAX_OCCURRENCES = 52

RECURRENCE_STEPS: Dict[str, relativedelta] = {
    RecurrencePattern.DAILY.value: relativedelta(days=1),
    RecurrencePattern.WEEKLY.value: relativedelta(weeks=1),
    RecurrencePattern.BIWEEKLY.value: relativedelta(weeks=2),
    RecurrencePattern.MONTHLY.value: relativedelta(months=1),
}

def _as_date(value: date | datetime) -> date:
    """Strip time-of-day and timezone, keeping the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value

def _step_for(pattern: Optional[str]) -> Optional[relativedelta]:
    if isinstance(pattern, RecurrencePattern):
        pattern = pattern.value
    return RECURRENCE_STEPS.get(pattern) if pattern else None

def build_occurrence(
    template_fields: Mapping[str, Any],
    on_date: date | datetime,
    *,
    timezone: str
) -> Dict[str, Any]:
    """Build one assignment row dated ``on_date`` from ``template_fields``.

    The lifecycle defaults always override whatever the template carries.
    """
    occurrence = dict(template_fields)
    occurrence["date"] = _as_date(on_date)
    occurrence.update(
        timezone=timezone,
        status=AssignmentStatus.UPCOMING.value,
        prep_status=PrepStatus.PENDING.value,
        completed=False,
    )
    return occurrence

def expand_occurrences(
    template_fields: Mapping[str, Any],
    start_date: date | datetime,
    pattern: Optional[str],
    end_date: Optional[date | datetime] = None,
    *,
    timezone: str,
    max_occurrences: int = MAX_OCCURRENCES
) -> List[Dict[str, Any]]:
    """
    Expand a recurrence into assignment rows, oldest first.

    The start date is always the first occurrence. Expansion stops at the
    first date after ``end_date`` (a date equal to it is kept), after
    ``max_occurrences`` rows, or right after the first row when ``pattern``
    is not a recognised interval.

    Monthly dates are computed from the start date rather than from the
    previous occurrence, so a series starting on the 31st lands on the last
    day of shorter months and returns to the 31st afterwards.
    """
    start = _as_date(start_date)
    end = _as_date(end_date) if end_date is not None else None
    step = _step_for(pattern)

    occurrences: List[Dict[str, Any]] = []
    current = start
    while len(occurrences) < max_occurrences:
        if end is not None and current > end:
            break

        occurrences.append(build_occurrence(template_fields, current, timezone=timezone))

        if step is None:
            break
        current = start + step * len(occurrences)

    return occurrences
