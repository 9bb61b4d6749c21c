from datetime import datetime, timezone

from backend.core.errors import SchedulingError
from backend.models.institution import Institution


def day_of_week(moment: datetime) -> int:
    """0 is Sunday, matching the stored working hours."""
    return (moment.weekday() + 1) % 7


def is_open_at(institution: Institution, moment: datetime) -> bool:
    hours = institution.hours_for(day_of_week(moment))
    if hours is None or not hours.is_open:
        return False
    return hours.open_time <= moment.strftime('%H:%M') < hours.close_time


def validate_schedule(institution: Institution | None, moment: datetime, now: datetime | None = None) -> datetime:
    """Return ``moment`` as an aware datetime or raise ``SchedulingError``.

    Working hours are compared against the wall-clock time as submitted; naive
    values are taken as UTC for the future check. Unknown institutions are not
    checked against working hours.
    """
    aware = moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    if aware <= now:
        raise SchedulingError('Donations must be scheduled in the future.')

    if institution is not None and not is_open_at(institution, moment):
        raise SchedulingError('The institution is closed at the requested time.')

    return aware
