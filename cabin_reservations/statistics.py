# cabin_reservations/statistics.py
from dataclasses import dataclass
from typing import Iterable, List, Optional

from cabin_reservations import dates


@dataclass
class BookingStats:
    cabin_id: int
    cabin_name: str
    user_id: str
    user_name: str
    user_email: str
    total_nights: int = 0
    booking_count: int = 0


def aggregate(year: int, bookings: Iterable) -> List[BookingStats]:
    """
    Nights and booking counts per (cabin, user) for every booking touching ``year``.

    A booking crossing New Year counts in full for both years; nights are not
    clipped to the year boundary. Bookings are expected to have their ``cabin``
    and ``user`` relationships loaded.
    """
    stats = {}
    for booking in bookings:
        if not dates.touches_year(booking.start_date, booking.end_date, year):
            continue
        cabin, user = booking.cabin, booking.user
        if cabin is None or user is None:
            continue

        key = (booking.cabin_id, booking.user_id)
        entry = stats.get(key)
        if entry is None:
            entry = stats[key] = BookingStats(
                cabin_id=booking.cabin_id,
                cabin_name=cabin.name,
                user_id=booking.user_id,
                user_name=user.full_name,
                user_email=user.email,
            )
        entry.total_nights += dates.nights_between(booking.start_date, booking.end_date)
        entry.booking_count += 1

    return sorted(stats.values(), key=lambda s: (s.cabin_name, s.user_name))


def available_years(bookings: Iterable, current_year: Optional[int] = None) -> List[int]:
    """Every year touched by a booking's start or end date, plus the current year, newest first."""
    years = {current_year or dates.today().year}
    for booking in bookings:
        years.add(dates.as_date(booking.start_date).year)
        years.add(dates.as_date(booking.end_date).year)
    return sorted(years, reverse=True)
