# cabin_reservations/booking_state.py
"""
Booking lifecycle rules.

status:          pending -> approved | rejected (admin), any -> pending (owner edit)
payment_status:  unpaid -> paid (owner or admin, approved bookings only)

Functions here mutate ORM objects in memory only; the caller owns the
transaction, so a raised error leaves nothing persisted.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from cabin_reservations import dates
from cabin_reservations.capacity import ensure_capacity
from cabin_reservations.exceptions import BookingValidationError, ForbiddenActionError
from cabin_reservations.models import Booking, BookingStatus, PaymentStatus

logger = logging.getLogger(__name__)

ADMIN_ONLY_FIELDS = {
    "status": "Only admins can change booking status",
    "cabin_id": "Only admins can change booking cabin",
    "payment_status": "Only admins can change payment status",
}


def is_owner(booking, user) -> bool:
    return booking.user_id == user.id


def ensure_can_access(booking, user):
    if not is_owner(booking, user) and not user.is_admin:
        raise ForbiddenActionError()


def validate_date_range(start_date, end_date, allow_past_start=False):
    if start_date is None or end_date is None:
        raise BookingValidationError("Missing required fields")
    if not allow_past_start and dates.as_date(start_date) < dates.today():
        raise BookingValidationError("Start date cannot be in the past")
    if dates.as_date(end_date) < dates.as_date(start_date):
        raise BookingValidationError("End date must be after start date")


def payment_amount_for(cabin, start_date, end_date):
    """Nights times the cabin's nightly fee; None for free cabins."""
    fee = Decimal(cabin.nightly_fee or 0)
    if fee <= 0:
        return None
    return fee * dates.nights_between(start_date, end_date)


def create_booking(command, owner, cabin, approved_bookings) -> Booking:
    validate_date_range(command.start_date, command.end_date)
    ensure_capacity(
        cabin.capacity,
        command.start_date,
        command.end_date,
        command.number_of_guests,
        approved_bookings,
    )
    booking = Booking(
        cabin_id=cabin.id,
        user_id=owner.id,
        start_date=command.start_date,
        end_date=command.end_date,
        number_of_guests=command.number_of_guests,
        notes=command.notes or None,
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.UNPAID,
    )
    logger.info("User %s requested cabin %s for %s..%s", owner.id, cabin.id, command.start_date, command.end_date)
    return booking


def requested_changes(command) -> dict:
    """Fields explicitly sent by the client. ``notes`` may be cleared with null."""
    return {
        key: value
        for key, value in command.model_dump(exclude_unset=True).items()
        if value is not None or key == "notes"
    }


def apply_update(booking, command, actor, cabin, approved_bookings, now=None):
    """
    Apply an edit to ``booking``.

    ``cabin`` is the cabin the booking will belong to after the edit and
    ``approved_bookings`` the approved bookings of that cabin.
    """
    ensure_can_access(booking, actor)
    changes = requested_changes(command)

    if not actor.is_admin:
        for field, message in ADMIN_ONLY_FIELDS.items():
            if field in changes:
                raise ForbiddenActionError(message)

    new_start = changes.get("start_date", booking.start_date)
    new_end = changes.get("end_date", booking.end_date)
    new_guests = changes.get("number_of_guests", booking.number_of_guests)
    new_cabin_id = changes.get("cabin_id", booking.cabin_id)

    dates_changed = new_start != booking.start_date or new_end != booking.end_date
    guests_changed = new_guests != booking.number_of_guests
    cabin_changed = new_cabin_id != booking.cabin_id

    if dates_changed:
        # Admins may correct historical bookings
        validate_date_range(
            new_start,
            new_end,
            allow_past_start=actor.is_admin or new_start == booking.start_date,
        )

    reset_to_pending = not actor.is_admin and (dates_changed or guests_changed)
    if reset_to_pending:
        new_status = BookingStatus.PENDING
    else:
        new_status = BookingStatus(changes.get("status", booking.status))

    entering_approved = new_status == BookingStatus.APPROVED and booking.status != BookingStatus.APPROVED
    if dates_changed or guests_changed or cabin_changed or entering_approved:
        ensure_capacity(
            cabin.capacity, new_start, new_end, new_guests, approved_bookings,
            exclude_booking_id=booking.id,
        )

    previous_status = booking.status
    booking.start_date = new_start
    booking.end_date = new_end
    booking.number_of_guests = new_guests
    booking.cabin_id = new_cabin_id
    if "notes" in changes:
        booking.notes = changes["notes"]

    if reset_to_pending:
        booking.status = BookingStatus.PENDING
        booking.payment_status = PaymentStatus.UNPAID
        booking.payment_amount = None
        booking.paid_at = None
        booking.vipps_transaction_id = None
    else:
        booking.status = new_status
        if new_status == BookingStatus.APPROVED and (entering_approved or dates_changed or cabin_changed):
            _price_approved_booking(booking, cabin)

    if actor.is_admin and "payment_status" in changes:
        _set_payment_status(booking, PaymentStatus(changes["payment_status"]), now)

    if booking.status != previous_status:
        logger.info(
            "Booking %s: %s -> %s by %s",
            booking.id, previous_status.value, booking.status.value, actor.id,
        )
    return booking


def _price_approved_booking(booking, cabin):
    booking.payment_amount = payment_amount_for(cabin, booking.start_date, booking.end_date)
    if booking.payment_amount is not None and booking.payment_status != PaymentStatus.PAID:
        booking.payment_status = PaymentStatus.UNPAID


def _set_payment_status(booking, payment_status, now=None):
    booking.payment_status = payment_status
    if payment_status == PaymentStatus.PAID:
        if booking.paid_at is None:
            booking.paid_at = now or datetime.now(timezone.utc)
    else:
        booking.paid_at = None


def mark_paid(booking, actor, transaction_id=None, now=None):
    ensure_can_access(booking, actor)
    if booking.status != BookingStatus.APPROVED:
        raise BookingValidationError("Booking must be approved before payment")

    booking.payment_status = PaymentStatus.PAID
    booking.paid_at = now or datetime.now(timezone.utc)
    booking.vipps_transaction_id = transaction_id or str(booking.id)
    logger.info("Booking %s marked paid by %s", booking.id, actor.id)
    return booking


def ensure_can_delete(booking, actor):
    ensure_can_access(booking, actor)
