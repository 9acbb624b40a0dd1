from datetime import date, datetime, timezone
from typing import Optional

from admin_portal.config import settings

# Month in which a new academic year starts
ACADEMIC_YEAR_START_MONTH = 7

def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime read from the database to aware UTC.

    Drivers without timezone support (sqlite) hand back naive values;
    those are stored in UTC, so they are tagged rather than converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def derive_current_year(
    graduation_year: int,
    today: Optional[date] = None,
    program_length: Optional[int] = None,
) -> int:
    """
    Determine an admin's current year of study from their graduation year.

    Args:
        graduation_year: Calendar year the admin graduates (in June)
        today: Reference date, defaults to the current UTC date
        program_length: Length of the degree in years, defaults to settings

    Returns:
        int: Year of study in the range 1..program_length

    Example:
        A student graduating in 2027 is in their final year from
        July 2026 to June 2027, so on 2026-10-18 this returns 4.
    """
    today = today or utc_now().date()
    program_length = program_length or settings.program_length_years

    # The academic year that is running ends in June of this year
    academic_year_end = today.year + 1 if today.month >= ACADEMIC_YEAR_START_MONTH else today.year
    year = program_length - (graduation_year - academic_year_end)

    return max(1, min(program_length, year))
