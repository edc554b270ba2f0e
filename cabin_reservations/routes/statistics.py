# cabin_reservations/routes/statistics.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from cabin_reservations import auth, database, dates, models, schemas, statistics
from cabin_reservations.config import settings
from cabin_reservations.exceptions import BookingValidationError

router = APIRouter(
    prefix="/statistics",
    tags=["Statistics"]
)


@router.get("/", response_model=schemas.StatisticsResponse)
def booking_statistics(
    year: Optional[int] = None,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    """Nights and bookings per cabin and user for one year, plus the years that have data."""
    current_year = dates.today().year
    if year is None:
        year = current_year
    if not settings.STATISTICS_MIN_YEAR <= year <= settings.STATISTICS_MAX_YEAR:
        raise BookingValidationError("Invalid year")

    bookings = (
        db.query(models.Booking)
        .options(joinedload(models.Booking.cabin), joinedload(models.Booking.user))
        .all()
    )

    return schemas.StatisticsResponse(
        statistics=[
            schemas.BookingStatsResponse.model_validate(s)
            for s in statistics.aggregate(year, bookings)
        ],
        selected_year=year,
        available_years=statistics.available_years(bookings, current_year),
    )
