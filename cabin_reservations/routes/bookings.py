# cabin_reservations/routes/bookings.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from cabin_reservations import auth, booking_state, database, models, schemas
from cabin_reservations.exceptions import NotFoundError
from cabin_reservations.routes.cabins import get_cabin_or_404

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"]
)


def _get_booking_or_404(db: Session, booking_id: int) -> models.Booking:
    booking = (
        db.query(models.Booking)
        .options(joinedload(models.Booking.cabin), joinedload(models.Booking.user))
        .filter(models.Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def _approved_bookings(db: Session, cabin_id: int) -> List[models.Booking]:
    return (
        db.query(models.Booking)
        .filter(
            models.Booking.cabin_id == cabin_id,
            models.Booking.status == models.BookingStatus.APPROVED,
        )
        .all()
    )


def _to_response(booking: models.Booking) -> schemas.BookingResponse:
    return schemas.BookingResponse.model_validate(booking)


def _refreshed(db: Session, booking: models.Booking) -> schemas.BookingResponse:
    db.flush()
    db.refresh(booking)
    return _to_response(booking)


# List bookings: own bookings, or every booking for admins
@router.get("/", response_model=List[schemas.BookingResponse])
def list_bookings(
    status_filter: Optional[models.BookingStatus] = Query(None, alias="status"),
    cabin_id: Optional[int] = None,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    query = db.query(models.Booking).options(
        joinedload(models.Booking.cabin), joinedload(models.Booking.user)
    )
    if not current_user.is_admin:
        query = query.filter(models.Booking.user_id == current_user.id)
    if status_filter:
        query = query.filter(models.Booking.status == status_filter)
    if cabin_id:
        query = query.filter(models.Booking.cabin_id == cabin_id)

    bookings = query.order_by(models.Booking.created_at.desc(), models.Booking.id.desc()).all()
    return [_to_response(b) for b in bookings]


@router.get("/{booking_id}", response_model=schemas.BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    booking = _get_booking_or_404(db, booking_id)
    booking_state.ensure_can_access(booking, current_user)
    return _to_response(booking)


# Request a stay; starts out pending/unpaid
@router.post("/", response_model=schemas.BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    command: schemas.BookingCreate,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    # Row lock serializes capacity checks per cabin until commit
    cabin = get_cabin_or_404(db, command.cabin_id, lock=True)
    booking = booking_state.create_booking(
        command, current_user, cabin, _approved_bookings(db, cabin.id)
    )
    db.add(booking)
    return _refreshed(db, booking)


@router.patch("/{booking_id}", response_model=schemas.BookingResponse)
def update_booking(
    booking_id: int,
    command: schemas.BookingUpdate,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    booking = _get_booking_or_404(db, booking_id)
    booking_state.ensure_can_access(booking, current_user)

    target_cabin_id = booking.cabin_id
    if current_user.is_admin and command.cabin_id is not None:
        target_cabin_id = command.cabin_id
    cabin = get_cabin_or_404(db, target_cabin_id, lock=True)

    booking_state.apply_update(
        booking, command, current_user, cabin, _approved_bookings(db, cabin.id)
    )
    return _refreshed(db, booking)


# Self-reported payment, confirmed later by an admin if needed
@router.post("/{booking_id}/payment", response_model=schemas.BookingResponse)
def mark_booking_paid(
    booking_id: int,
    payment: Optional[schemas.MarkPaidRequest] = None,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    booking = _get_booking_or_404(db, booking_id)
    transaction_id = payment.vipps_transaction_id if payment else None
    booking_state.mark_paid(booking, current_user, transaction_id)
    return _refreshed(db, booking)


@router.delete("/{booking_id}", response_model=schemas.MessageResponse)
def delete_booking(
    booking_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    booking = _get_booking_or_404(db, booking_id)
    booking_state.ensure_can_delete(booking, current_user)

    db.delete(booking)
    logger.info("Booking %s deleted by %s", booking_id, current_user.id)
    return {"message": "Booking deleted successfully"}
