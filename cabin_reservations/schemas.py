# cabin_reservations/schemas.py
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cabin_reservations.models import BookingStatus, PaymentStatus


# ── Users ──────────────────────────────────────────────────────

class UserProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    is_admin: bool
    created_at: Optional[datetime] = None


class UserProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1)
    is_admin: Optional[bool] = None


# ── Cabins ─────────────────────────────────────────────────────

class CabinCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    capacity: int = Field(1, gt=0)
    nightly_fee: Decimal = Field(Decimal("0"), ge=0)
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v.strip()


class CabinUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)
    nightly_fee: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v.strip()


class CabinResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    capacity: int
    nightly_fee: Decimal
    image_url: Optional[str] = None


# ── Bookings ───────────────────────────────────────────────────

class BookingCreate(BaseModel):
    cabin_id: int
    start_date: date
    end_date: date
    number_of_guests: int = Field(1, gt=0)
    notes: Optional[str] = None


class BookingUpdate(BaseModel):
    """Owners may send dates, guests and notes; admins additionally cabin, status and payment."""

    cabin_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    number_of_guests: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None


class MarkPaidRequest(BaseModel):
    vipps_transaction_id: Optional[str] = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cabin_id: int
    user_id: str
    start_date: date
    end_date: date
    number_of_guests: int
    status: BookingStatus
    payment_status: PaymentStatus
    payment_amount: Optional[Decimal] = None
    paid_at: Optional[datetime] = None
    vipps_transaction_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    cabin: Optional[CabinResponse] = None
    user: Optional[UserProfileResponse] = None


class MessageResponse(BaseModel):
    message: str


# ── Statistics ─────────────────────────────────────────────────

class BookingStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cabin_id: int
    cabin_name: str
    user_id: str
    user_name: str
    user_email: str
    total_nights: int
    booking_count: int


class StatisticsResponse(BaseModel):
    statistics: List[BookingStatsResponse]
    selected_year: int
    available_years: List[int]
