# cabin_reservations/dates.py
from datetime import date, datetime


def as_date(value):
    """Truncate a datetime to its calendar day; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def today() -> date:
    return date.today()


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """
    True if two inclusive date ranges share at least one calendar day.

    Datetimes are compared by day only, so a range ending at 00:00 on a day
    still covers that whole day.
    """
    a_start, a_end = as_date(a_start), as_date(a_end)
    b_start, b_end = as_date(b_start), as_date(b_end)
    return a_start <= b_end and a_end >= b_start


def nights_between(start, end) -> int:
    """Nights between check-in and check-out: Friday to Sunday is 2, same day is 0."""
    return (as_date(end) - as_date(start)).days


def touches_year(start, end, year: int) -> bool:
    start, end = as_date(start), as_date(end)
    year_start, year_end = date(year, 1, 1), date(year, 12, 31)
    return (
        year_start <= start <= year_end
        or year_start <= end <= year_end
        or (start <= year_start and end >= year_end)
    )
