"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_statement_date(date_str: str) -> date:
    """Parse a statement date.

    Issuer exports use ``MM/DD/YYYY`` (single-digit month and day are
    accepted); ISO ``YYYY-MM-DD`` is accepted as well.

    Args:
        date_str: Date string from a statement row

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if not date_str or not date_str.strip():
        raise ValueError("Empty date string")

    date_str = date_str.strip()

    if "/" in date_str:
        try:
            return datetime.strptime(date_str, "%m/%d/%Y").date()
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}") from e

    try:
        return date_parser.isoparse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def month_key(value: date) -> str:
    """Return the ``YYYY-MM`` month a date falls in."""
    return f"{value.year:04d}-{value.month:02d}"


def month_bounds(month: str) -> tuple[date, date]:
    """Get first and last day of a ``YYYY-MM`` month.

    Raises:
        ValueError: If month string is not ``YYYY-MM``
    """
    try:
        start = datetime.strptime(month, "%Y-%m").date()
    except ValueError as e:
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM") from e
    end = start + relativedelta(months=1) - timedelta(days=1)
    return (start, end)
