"""
Report date handling

Request dates are calendar days (YYYY-MM-DD). Lower bounds start at the
beginning of the day, upper bounds run to the end of the day, all in UTC.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Tuple, Union

from .errors import InvalidArgumentError


DateInput = Union[str, date, datetime, None]


def parse_iso_datetime(value: str) -> datetime:
    """datetime.fromisoformat that also accepts a trailing Z for UTC"""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_report_date(value: DateInput, field: str) -> Optional[date]:
    """
    Parse an optional report date

    Raises:
        InvalidArgumentError: when the value is not a valid date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        try:
            return parse_iso_datetime(value).date()
        except ValueError:
            pass
    raise InvalidArgumentError(
        f"{field} must be a valid date (YYYY-MM-DD)", field=field, value=value
    )


def parse_date_range(start: DateInput, end: DateInput) -> Tuple[Optional[date], Optional[date]]:
    """Parse a (start_date, end_date) pair, rejecting an inverted range"""
    start_date = parse_report_date(start, "start_date")
    end_date = parse_report_date(end, "end_date")
    if start_date and end_date and start_date > end_date:
        raise InvalidArgumentError(
            f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}",
            field="start_date",
            value=start
        )
    return start_date, end_date


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def today() -> date:
    return datetime.now(timezone.utc).date()
