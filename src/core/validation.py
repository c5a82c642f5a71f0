"""
Report request validation.
"""

from datetime import date, datetime

from core.config import ALL_EMPLOYEES, DATE_FORMAT
from models.timecards import Period

# Singular spellings accepted alongside the Period values
PERIOD_ALIASES = {
    "day": Period.DAILY,
    "week": Period.WEEKLY,
    "month": Period.MONTHLY,
    "year": Period.YEARLY,
}


# Largest id SQLite can bind as INTEGER
MAX_EMPLOYEE_ID = 2**63 - 1


class InvalidReportRequest(ValueError):
    """A report was requested with missing or invalid arguments."""


def parse_date(value: str | date | None, field_name: str) -> date:
    """Parse a YYYY-MM-DD string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidReportRequest(f"{field_name} is required")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidReportRequest(
            f"Invalid {field_name} '{value}'; expected format YYYY-MM-DD"
        )


def validate_date_range(
    start_date: str | date | None, end_date: str | date | None
) -> tuple[date, date]:
    """
    Parse and check a report date range.

    Raises:
        InvalidReportRequest: if either date is missing or malformed, or
            startDate is later than endDate
    """
    start = parse_date(start_date, "startDate")
    end = parse_date(end_date, "endDate")
    if start > end:
        raise InvalidReportRequest("startDate must not be later than endDate.")
    return start, end


def parse_period(value: str | Period | None) -> Period:
    """Resolve a period name such as 'weekly' or 'month'."""
    if isinstance(value, Period):
        return value
    key = (value or "").strip().lower()
    if key in PERIOD_ALIASES:
        return PERIOD_ALIASES[key]
    try:
        return Period(key)
    except ValueError:
        raise InvalidReportRequest("Invalid period specified")


def parse_employee_id(value: str | int | None) -> int | str:
    """Return a positive integer id, or the ALL sentinel."""
    if isinstance(value, bool):
        raise InvalidReportRequest(f"Invalid or missing employeeId: {value}")
    if isinstance(value, int):
        employee_id = value
    else:
        text = (value or "").strip()
        if text.upper() == ALL_EMPLOYEES:
            return ALL_EMPLOYEES
        if not (text.isascii() and text.isdigit()):
            raise InvalidReportRequest(f"Invalid or missing employeeId: {value}")
        employee_id = int(text)

    if not 1 <= employee_id <= MAX_EMPLOYEE_ID:
        raise InvalidReportRequest(
            f"employeeId must be a positive integer; received {employee_id}"
        )
    return employee_id
