"""
Immutable data models for API responses and requests.
"""
import re
from typing import Optional, Dict, Any, List
from datetime import date, datetime, timezone
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator

from ..utils.models import (
    PrivacyType, BookingPolicy, PaymentMethod, PropertyStatus, BookingStatus,
    InquiryStatus, VerificationStatus, Language, Currency
)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email address")
    return value


class APIResponse(BaseModel):
    """Base API response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool = Field(..., description="Whether the request was successful")
    message: str = Field(..., description="Response message")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ErrorResponse(APIResponse):
    """Error response model."""
    error_code: Optional[str] = Field(None, description="Error code for debugging")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Dependency statuses")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class DataResponse(APIResponse):
    """Response carrying a single object."""
    data: Dict[str, Any] = Field(..., description="Response payload")


class ListResponse(APIResponse):
    """Response carrying a list of objects."""
    data: List[Dict[str, Any]] = Field(..., description="Response items")


# Auth and users

class SignupRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=6, max_length=128, description="Account password")
    phone: Optional[str] = Field(None, max_length=20, description="Phone number")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class LoginRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Account password")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    name: Optional[str] = Field(None, min_length=2, max_length=100, description="Display name")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    phone: Optional[str] = Field(None, max_length=20, description="Phone number")
    language: Optional[Language] = Field(None, description="Preferred language")
    currency: Optional[Currency] = Field(None, description="Preferred currency")


class VerificationSubmitRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    document_url: str = Field(..., min_length=1, description="Identity document URL or data URI")


class VerificationStatusRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    status: VerificationStatus = Field(..., description="New verification status")


# Listings

class PropertyRequest(BaseModel):
    """Request model for creating a listing."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=5, max_length=100, description="Listing title")
    description: str = Field(..., min_length=20, max_length=2000, description="Listing description")
    location: str = Field(..., min_length=2, description="City, region or address")
    price_per_night: float = Field(..., gt=0, description="Base nightly price")
    image1: str = Field(..., min_length=1, description="Cover photo")
    image2: str = Field(..., min_length=1, description="Second photo")
    image3: str = Field(..., min_length=1, description="Third photo")
    image4: str = Field(..., min_length=1, description="Fourth photo")
    amenities: List[str] = Field(default_factory=list, description="Amenity names")
    type: str = Field(default="House", description="Property type")
    privacy_type: PrivacyType = Field(default=PrivacyType.ENTIRE_PLACE, description="What guests get")
    bedrooms: int = Field(default=1, ge=0, description="Bedrooms")
    beds: int = Field(default=1, ge=1, description="Beds")
    baths: int = Field(default=1, ge=0, description="Bathrooms")
    max_guests: int = Field(default=1, ge=1, description="Maximum guests")
    booking_policy: BookingPolicy = Field(default=BookingPolicy.REVIEW_FIRST, description="Booking policy")
    first_guest_choice: Optional[str] = Field(None, description="Who the first guest may be")
    weekend_premium: float = Field(default=0, ge=0, le=100, description="Friday/Saturday premium in percent")
    discounts: Optional[Dict[str, Any]] = Field(None, description="Discount settings")
    safety_details: Optional[Dict[str, Any]] = Field(None, description="Safety disclosures")


class PropertyUpdateRequest(BaseModel):
    """Partial listing update; only the fields present are written."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=2000)
    location: Optional[str] = Field(None, min_length=2)
    price_per_night: Optional[float] = Field(None, gt=0)
    image1: Optional[str] = Field(None, min_length=1)
    image2: Optional[str] = Field(None, min_length=1)
    image3: Optional[str] = Field(None, min_length=1)
    image4: Optional[str] = Field(None, min_length=1)
    amenities: Optional[List[str]] = None
    type: Optional[str] = None
    privacy_type: Optional[PrivacyType] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    beds: Optional[int] = Field(None, ge=1)
    baths: Optional[int] = Field(None, ge=0)
    max_guests: Optional[int] = Field(None, ge=1)
    booking_policy: Optional[BookingPolicy] = None
    first_guest_choice: Optional[str] = None
    weekend_premium: Optional[float] = Field(None, ge=0, le=100)
    discounts: Optional[Dict[str, Any]] = None
    safety_details: Optional[Dict[str, Any]] = None

    @field_validator(
        'name', 'description', 'location', 'price_per_night', 'image1', 'image2', 'image3',
        'image4', 'amenities', 'type', 'privacy_type', 'bedrooms', 'beds', 'baths',
        'max_guests', 'booking_policy', 'weekend_premium',
        mode='before'
    )
    @classmethod
    def reject_null(cls, v):
        """Omit a field to leave it unchanged; only the optional extras may be cleared."""
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class PropertyStatusRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    status: PropertyStatus = Field(..., description="New moderation status")


# Bookings, reviews and inquiries

class QuoteRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    property_id: str = Field(..., description="Listing to price")
    check_in: date = Field(..., description="Check-in date")
    check_out: date = Field(..., description="Check-out date")


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    property_id: str = Field(..., description="Listing to book")
    check_in: date = Field(..., description="Check-in date")
    check_out: date = Field(..., description="Check-out date")
    guests: int = Field(..., ge=1, description="Number of guests")
    payment_method: PaymentMethod = Field(..., description="Payment method")


class BookingStatusRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    status: BookingStatus = Field(..., description="New booking status")


class ReviewRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    property_id: str = Field(..., description="Reviewed listing")
    rating: int = Field(..., ge=1, le=5, description="Star rating")
    comment: str = Field(..., min_length=10, max_length=500, description="Review text")


class InquiryRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    property_id: str = Field(..., description="Listing asked about")
    message: str = Field(..., min_length=1, max_length=1000, description="Message to the host")


class InquiryStatusRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    status: InquiryStatus = Field(..., description="New inquiry status")


# Preferences and recommendations

class PreferencesRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    language: Optional[Language] = Field(None, description="Preferred language")
    currency: Optional[Currency] = Field(None, description="Preferred currency")


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    location: str = Field(..., min_length=1, description="Where to stay")
    check_in_date: date = Field(..., description="Check-in date")
    check_out_date: date = Field(..., description="Check-out date")
    number_of_guests: int = Field(default=1, ge=1, description="Number of guests")
    price_range_min: float = Field(default=0, ge=0, description="Lowest nightly price")
    price_range_max: Optional[float] = Field(None, ge=0, description="Highest nightly price")
