"""
tests/test_statistics.py
Per-cabin, per-user aggregation and the list of years with data.
"""

from datetime import date
from types import SimpleNamespace

from cabin_reservations.statistics import aggregate, available_years

FJELL = SimpleNamespace(name="Fjellhytta")
SJO = SimpleNamespace(name="Sjøbua")
KARI = SimpleNamespace(full_name="Kari Nordmann", email="kari@family.no")
PER = SimpleNamespace(full_name="Per Hansen", email="per@family.no")


def booking(cabin_id, cabin, user_id, user, start, end):
    return SimpleNamespace(
        cabin_id=cabin_id, cabin=cabin, user_id=user_id, user=user,
        start_date=start, end_date=end,
    )


def test_groups_by_cabin_and_user_and_sums_nights():
    bookings = [
        booking(1, FJELL, "kari", KARI, date(2025, 2, 7), date(2025, 2, 9)),
        booking(1, FJELL, "kari", KARI, date(2025, 7, 1), date(2025, 7, 8)),
        booking(1, FJELL, "per", PER, date(2025, 3, 1), date(2025, 3, 1)),
        booking(2, SJO, "kari", KARI, date(2025, 8, 1), date(2025, 8, 4)),
    ]
    stats = aggregate(2025, bookings)

    assert [(s.cabin_name, s.user_name, s.total_nights, s.booking_count) for s in stats] == [
        ("Fjellhytta", "Kari Nordmann", 9, 2),
        ("Fjellhytta", "Per Hansen", 0, 1),
        ("Sjøbua", "Kari Nordmann", 3, 1),
    ]


def test_new_year_booking_counts_fully_in_both_years():
    bookings = [booking(1, FJELL, "kari", KARI, date(2024, 12, 28), date(2025, 1, 3))]

    for year in (2024, 2025):
        (entry,) = aggregate(year, bookings)
        assert entry.total_nights == 6
        assert entry.booking_count == 1


def test_bookings_outside_year_and_orphans_are_skipped():
    bookings = [
        booking(1, FJELL, "kari", KARI, date(2023, 5, 1), date(2023, 5, 3)),
        booking(1, None, "kari", KARI, date(2025, 5, 1), date(2025, 5, 3)),
        booking(1, FJELL, "ghost", None, date(2025, 5, 1), date(2025, 5, 3)),
    ]
    assert aggregate(2025, bookings) == []


def test_available_years_always_include_current_year_descending():
    bookings = [
        booking(1, FJELL, "kari", KARI, date(2024, 12, 28), date(2025, 1, 3)),
        booking(1, FJELL, "kari", KARI, date(2024, 6, 1), date(2024, 6, 3)),
    ]
    assert available_years(bookings, current_year=2026) == [2026, 2025, 2024]


def test_available_years_without_bookings():
    assert available_years([], current_year=2026) == [2026]
