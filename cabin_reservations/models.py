# cabin_reservations/models.py
import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from cabin_reservations.database import Base


def utcnow():
    return datetime.now(timezone.utc)


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class UserProfile(Base):
    __tablename__ = "user_profiles"
    # Subject claim issued by the identity provider
    id = Column(String(64), primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")


class Cabin(Base):
    __tablename__ = "cabins"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_cabins_capacity_positive"),
        CheckConstraint("nightly_fee >= 0", name="ck_cabins_nightly_fee_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    capacity = Column(Integer, default=1, nullable=False)
    nightly_fee = Column(Numeric(10, 2), default=0, nullable=False)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    bookings = relationship("Booking", back_populates="cabin")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_bookings_date_order"),
        CheckConstraint("number_of_guests > 0", name="ck_bookings_guests_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    cabin_id = Column(Integer, ForeignKey("cabins.id"), nullable=False, index=True)
    user_id = Column(String(64), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    number_of_guests = Column(Integer, default=1, nullable=False)
    status = Column(
        Enum(BookingStatus, values_callable=lambda e: [m.value for m in e], name="booking_status"),
        default=BookingStatus.PENDING,
        nullable=False,
    )
    payment_status = Column(
        Enum(PaymentStatus, values_callable=lambda e: [m.value for m in e], name="payment_status"),
        default=PaymentStatus.UNPAID,
        nullable=False,
    )
    payment_amount = Column(Numeric(10, 2), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    vipps_transaction_id = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    cabin = relationship("Cabin", back_populates="bookings")
    user = relationship("UserProfile", back_populates="bookings")
