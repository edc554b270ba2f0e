# cabin_reservations/routes/cabins.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from cabin_reservations import auth, database, models, schemas
from cabin_reservations.capacity import peak_occupancy
from cabin_reservations.exceptions import BookingValidationError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cabins",
    tags=["Cabins"]
)


def get_cabin_or_404(db: Session, cabin_id: int, lock: bool = False) -> models.Cabin:
    query = db.query(models.Cabin).filter(models.Cabin.id == cabin_id)
    if lock:
        query = query.with_for_update()
    cabin = query.first()
    if not cabin:
        raise NotFoundError("Cabin not found")
    return cabin


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None):
    query = db.query(models.Cabin).filter(models.Cabin.name == name)
    if exclude_id is not None:
        query = query.filter(models.Cabin.id != exclude_id)
    if query.first():
        raise BookingValidationError("Cabin with this name already exists.")


# List all cabins
@router.get("/", response_model=List[schemas.CabinResponse])
def list_cabins(
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    cabins = db.query(models.Cabin).order_by(models.Cabin.name).all()
    return [schemas.CabinResponse.model_validate(c) for c in cabins]


@router.get("/{cabin_id}", response_model=schemas.CabinResponse)
def get_cabin(
    cabin_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    return schemas.CabinResponse.model_validate(get_cabin_or_404(db, cabin_id))


# Admin only - create a cabin
@router.post(
    "/",
    response_model=schemas.CabinResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth.verify_admin_user)],
)
def create_cabin(cabin: schemas.CabinCreate, db: Session = Depends(database.get_db)):
    _ensure_unique_name(db, cabin.name)

    new_cabin = models.Cabin(**cabin.model_dump())
    db.add(new_cabin)
    db.flush()
    db.refresh(new_cabin)
    logger.info("Cabin %s created (%s)", new_cabin.id, new_cabin.name)
    return schemas.CabinResponse.model_validate(new_cabin)


# Admin only - update a cabin
@router.put("/{cabin_id}", response_model=schemas.CabinResponse, dependencies=[Depends(auth.verify_admin_user)])
def update_cabin(cabin_id: int, cabin: schemas.CabinUpdate, db: Session = Depends(database.get_db)):
    changes = cabin.model_dump(exclude_unset=True)
    for field in ("name", "capacity", "nightly_fee"):
        if field in changes and changes[field] is None:
            raise BookingValidationError(f"{field} cannot be empty")

    # Lock so no approval slips in between the occupancy read and the write
    cabin_to_update = get_cabin_or_404(db, cabin_id, lock="capacity" in changes)

    if "name" in changes:
        _ensure_unique_name(db, changes["name"], exclude_id=cabin_id)
    if "capacity" in changes:
        approved = (
            db.query(models.Booking)
            .filter(
                models.Booking.cabin_id == cabin_id,
                models.Booking.status == models.BookingStatus.APPROVED,
            )
            .all()
        )
        peak = peak_occupancy(approved)
        if changes["capacity"] < peak:
            raise ConflictError(
                f"Capacity cannot be lower than the {peak} guests already approved for a single day"
            )

    for field, value in changes.items():
        setattr(cabin_to_update, field, value)

    db.flush()
    db.refresh(cabin_to_update)
    return schemas.CabinResponse.model_validate(cabin_to_update)


# Admin only - delete a cabin
@router.delete("/{cabin_id}", response_model=schemas.MessageResponse, dependencies=[Depends(auth.verify_admin_user)])
def delete_cabin(cabin_id: int, db: Session = Depends(database.get_db)):
    cabin_to_delete = get_cabin_or_404(db, cabin_id)

    has_bookings = db.query(models.Booking.id).filter(models.Booking.cabin_id == cabin_id).first()
    if has_bookings:
        raise ConflictError("Cabin has bookings and cannot be deleted")

    db.delete(cabin_to_delete)
    logger.info("Cabin %s deleted", cabin_id)
    return {"message": "Cabin deleted successfully"}


# Calendar feed: pending and approved bookings overlapping a window
@router.get("/{cabin_id}/calendar", response_model=List[schemas.BookingResponse])
def cabin_calendar(
    cabin_id: int,
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(database.get_db),
    current_user: models.UserProfile = Depends(auth.get_current_user),
):
    if end < start:
        raise BookingValidationError("End date must be after start date")
    get_cabin_or_404(db, cabin_id)

    bookings = (
        db.query(models.Booking)
        .options(joinedload(models.Booking.cabin), joinedload(models.Booking.user))
        .filter(
            models.Booking.cabin_id == cabin_id,
            models.Booking.status.in_([models.BookingStatus.PENDING, models.BookingStatus.APPROVED]),
            models.Booking.start_date <= end,
            models.Booking.end_date >= start,
        )
        .order_by(models.Booking.start_date)
        .all()
    )
    return [schemas.BookingResponse.model_validate(b) for b in bookings]
