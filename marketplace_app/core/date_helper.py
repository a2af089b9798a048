from datetime import date, datetime
from typing import Tuple

from dateutil import parser as date_parser

from core.exceptions import ValidationFailed
from models.utils import today


def parse_date(value: str | date | datetime, *, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailed(f"Invalid date format for {field}")
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        raise ValidationFailed(f"Invalid date format for {field}")


def validate_date_range(
    start: str | date,
    end: str | date,
    *,
    start_field: str = "start_date",
    end_field: str = "end_date",
    reference: date | None = None,
) -> Tuple[date, date]:
    """Parse a stay window and enforce ``today <= start < end``.

    Shared by bookings and rental agreements so both reject the same inputs
    with the same messages.
    """
    start_date = parse_date(start, field=start_field)
    end_date = parse_date(end, field=end_field)
    current = reference or today()

    if start_date < current:
        raise ValidationFailed(f"{start_field} cannot be in the past")

    if end_date <= start_date:
        raise ValidationFailed(f"{end_field} must be after {start_field}")

    return start_date, end_date
