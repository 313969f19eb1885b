"""
Errors raised by the correlation engine. Degenerate statistics are not errors;
they produce neutral values instead.
"""
import re
from datetime import date, datetime

_DATE_FORMAT = "%Y-%m-%d"
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class CorrelationError(Exception):
    """Base class for request-level correlation failures."""


class InvalidDateRange(CorrelationError, ValueError):
    """Malformed ISO date, or an end date before the start date."""


class DataAccessFailure(CorrelationError):
    """The aggregate data provider failed; the whole query fails with it."""


def parse_iso_date(value: str) -> date:
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise InvalidDateRange(f"Invalid date {value!r}. Use YYYY-MM-DD.")
    try:
        return datetime.strptime(value, _DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateRange(f"Invalid date {value!r}. Use YYYY-MM-DD.") from None


def parse_date_range(start: str, end: str) -> tuple[date, date]:
    """Parse both bounds; never swaps a reversed range."""
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)
    check_date_range(start_date, end_date)
    return start_date, end_date


def check_date_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise InvalidDateRange(
            f"end date {end_date.isoformat()} is before start date {start_date.isoformat()}."
        )
