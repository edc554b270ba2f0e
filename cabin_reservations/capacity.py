# cabin_reservations/capacity.py
"""
Capacity reconciliation for a single cabin.

A cabin holds at most ``capacity`` guests on any day. Only approved bookings
occupy space; pending requests do not reserve anything until an admin
approves them, at which point the check runs again.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional

from cabin_reservations.dates import as_date, overlaps
from cabin_reservations.exceptions import CapacityExceededError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapacityDecision:
    accepted: bool
    available: int
    requested: int
    reason: Optional[str] = None


def check_capacity(
    capacity: int,
    start_date,
    end_date,
    guests: int,
    approved_bookings: Iterable,
    exclude_booking_id=None,
) -> CapacityDecision:
    """
    Decide whether ``guests`` more people fit in the cabin for the given range.

    ``approved_bookings`` are objects with ``id``, ``start_date``, ``end_date``
    and ``number_of_guests``; the caller is responsible for passing only
    approved bookings of this cabin.
    """
    overlapping = [
        b
        for b in approved_bookings
        if (exclude_booking_id is None or b.id != exclude_booking_id)
        and overlaps(start_date, end_date, b.start_date, b.end_date)
    ]

    if not overlapping:
        if guests > capacity:
            return CapacityDecision(
                accepted=False,
                available=capacity,
                requested=guests,
                reason=f"Number of guests ({guests}) exceeds cabin capacity ({capacity})",
            )
        return CapacityDecision(accepted=True, available=capacity, requested=guests)

    occupied = sum(b.number_of_guests or 1 for b in overlapping)
    remaining = max(capacity - occupied, 0)
    if occupied + guests > capacity:
        return CapacityDecision(
            accepted=False,
            available=remaining,
            requested=guests,
            reason=(
                f"Cabin capacity exceeded. Available space: {remaining} guests, "
                f"requested: {guests} guests"
            ),
        )
    return CapacityDecision(accepted=True, available=remaining, requested=guests)


def ensure_capacity(
    capacity: int,
    start_date,
    end_date,
    guests: int,
    approved_bookings: Iterable,
    exclude_booking_id=None,
) -> CapacityDecision:
    """Same as check_capacity but raises CapacityExceededError on rejection."""
    decision = check_capacity(
        capacity, start_date, end_date, guests, approved_bookings, exclude_booking_id
    )
    if not decision.accepted:
        logger.info(
            "Capacity check rejected %s guests for %s..%s (available %s)",
            guests, start_date, end_date, decision.available,
        )
        raise CapacityExceededError(decision.reason, decision.available, decision.requested)
    return decision


def peak_occupancy(approved_bookings: Iterable) -> int:
    """Highest number of approved guests present in the cabin on any single day."""
    events = []
    for b in approved_bookings:
        guests = b.number_of_guests or 1
        events.append((as_date(b.start_date), guests))
        # end_date is the last occupied day
        events.append((as_date(b.end_date) + timedelta(days=1), -guests))

    peak = current = 0
    for _, delta in sorted(events, key=lambda e: (e[0], e[1])):
        current += delta
        peak = max(peak, current)
    return peak
