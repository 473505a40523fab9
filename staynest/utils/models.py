"""
Data models for the StayNest marketplace.

Each entity converts to and from the flat document shape stored in the
Firestore collections.
"""
from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from typing import Optional, Dict, Any, List
from enum import Enum


class UserRole(str, Enum):
    """Marketplace roles."""
    GUEST = "guest"
    HOST = "host"
    SUPER_ADMIN = "super-admin"


class VerificationStatus(str, Enum):
    """Identity verification lifecycle."""
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class PropertyStatus(str, Enum):
    """Listing moderation lifecycle."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    """Booking lifecycle."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class InquiryStatus(str, Enum):
    """Inquiry lifecycle."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PrivacyType(str, Enum):
    ENTIRE_PLACE = "entire-place"
    ROOM = "room"
    SHARED_ROOM = "shared-room"


class BookingPolicy(str, Enum):
    REVIEW_FIRST = "review-first"
    INSTANT_BOOK = "instant-book"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"


class Currency(str, Enum):
    INR = "INR"
    USD = "USD"
    EUR = "EUR"


class Language(str, Enum):
    EN_IN = "en-IN"
    ES = "es"
    FR = "fr"


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a stored timestamp (datetime, date or ISO string) to an aware datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        return to_datetime(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise TypeError(f"Unsupported timestamp value: {value!r}")


@dataclass
class User:
    """Marketplace account."""
    id: str
    name: str
    email: str
    avatar: str = ""
    role: UserRole = UserRole.GUEST
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    password_hash: Optional[str] = None
    identity_document_url: Optional[str] = None
    wishlist: List[str] = field(default_factory=list)
    is_disabled: bool = False
    language: Optional[Language] = None
    currency: Optional[Currency] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.email = self.email.strip().lower()
        if isinstance(self.role, str):
            self.role = UserRole(self.role)
        if isinstance(self.verification_status, str):
            self.verification_status = VerificationStatus(self.verification_status)
        if isinstance(self.language, str):
            self.language = Language(self.language)
        if isinstance(self.currency, str):
            self.currency = Currency(self.currency)
        # Preserve order, drop duplicates
        self.wishlist = list(dict.fromkeys(self.wishlist or []))

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    def to_dict(self) -> Dict[str, Any]:
        """Convert user to a document (the id is the document key)."""
        return {
            'name': self.name,
            'email': self.email,
            'avatar': self.avatar,
            'role': self.role.value,
            'verification_status': self.verification_status.value,
            'password_hash': self.password_hash,
            'identity_document_url': self.identity_document_url,
            'wishlist': list(self.wishlist),
            'is_disabled': self.is_disabled,
            'language': self.language.value if self.language else None,
            'currency': self.currency.value if self.currency else None,
            'phone': self.phone,
            'created_at': self.created_at,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Document shape without credentials, for API responses."""
        data = self.to_dict()
        data.pop('password_hash')
        data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> 'User':
        return cls(
            id=doc_id,
            name=data.get('name', ''),
            email=data.get('email', ''),
            avatar=data.get('avatar', ''),
            role=data.get('role') or UserRole.GUEST,
            verification_status=data.get('verification_status') or VerificationStatus.UNVERIFIED,
            password_hash=data.get('password_hash'),
            identity_document_url=data.get('identity_document_url'),
            wishlist=data.get('wishlist') or [],
            is_disabled=bool(data.get('is_disabled', False)),
            language=data.get('language'),
            currency=data.get('currency'),
            phone=data.get('phone'),
            created_at=to_datetime(data.get('created_at')),
        )


@dataclass
class HostSummary:
    """User fields embedded into listings, bookings and inquiries."""
    id: str
    name: str
    email: str = ""
    avatar: str = ""

    @classmethod
    def from_user(cls, user: User) -> 'HostSummary':
        return cls(id=user.id, name=user.name, email=user.email, avatar=user.avatar)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'email': self.email, 'avatar': self.avatar}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HostSummary':
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            email=data.get('email', ''),
            avatar=data.get('avatar', ''),
        )


@dataclass
class GuestSummary(HostSummary):
    """Guest fields embedded into bookings and inquiries."""
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED

    def __post_init__(self):
        if isinstance(self.verification_status, str):
            self.verification_status = VerificationStatus(self.verification_status)

    @classmethod
    def from_user(cls, user: User) -> 'GuestSummary':
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            verification_status=user.verification_status,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['verification_status'] = self.verification_status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GuestSummary':
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            email=data.get('email', ''),
            avatar=data.get('avatar', ''),
            verification_status=data.get('verification_status') or VerificationStatus.UNVERIFIED,
        )


@dataclass
class PropertyRef:
    """Listing fields embedded into bookings and inquiries."""
    id: str
    name: str
    host: HostSummary

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'host': self.host.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PropertyRef':
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            host=HostSummary.from_dict(data.get('host') or {}),
        )


@dataclass
class Property:
    """Bookable listing authored by a host."""
    id: str
    name: str
    location: str
    price_per_night: float
    host: HostSummary
    description: str = ""
    image1: str = ""
    image2: str = ""
    image3: str = ""
    image4: str = ""
    amenities: List[str] = field(default_factory=list)
    rating: float = 0.0
    reviews_count: int = 0
    rating_total: Optional[float] = None
    type: str = "House"
    privacy_type: PrivacyType = PrivacyType.ENTIRE_PLACE
    bedrooms: int = 1
    beds: int = 1
    baths: int = 1
    max_guests: int = 1
    status: PropertyStatus = PropertyStatus.PENDING
    booking_policy: BookingPolicy = BookingPolicy.REVIEW_FIRST
    first_guest_choice: Optional[str] = None
    weekend_premium: float = 0.0
    discounts: Optional[Dict[str, Any]] = None
    safety_details: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if isinstance(self.privacy_type, str):
            self.privacy_type = PrivacyType(self.privacy_type)
        if isinstance(self.status, str):
            self.status = PropertyStatus(self.status)
        if isinstance(self.booking_policy, str):
            self.booking_policy = BookingPolicy(self.booking_policy)
        if isinstance(self.host, dict):
            self.host = HostSummary.from_dict(self.host)

    @property
    def images(self) -> List[str]:
        return [self.image1, self.image2, self.image3, self.image4]

    def to_ref(self) -> PropertyRef:
        return PropertyRef(id=self.id, name=self.name, host=self.host)

    def to_dict(self) -> Dict[str, Any]:
        """Convert listing to a document (the id is the document key)."""
        return {
            'name': self.name,
            'location': self.location,
            'price_per_night': self.price_per_night,
            'description': self.description,
            'image1': self.image1,
            'image2': self.image2,
            'image3': self.image3,
            'image4': self.image4,
            'amenities': list(self.amenities),
            'rating': self.rating,
            'reviews_count': self.reviews_count,
            'rating_total': self.rating_total,
            'host': self.host.to_dict(),
            'type': self.type,
            'privacy_type': self.privacy_type.value,
            'bedrooms': self.bedrooms,
            'beds': self.beds,
            'baths': self.baths,
            'max_guests': self.max_guests,
            'status': self.status.value,
            'booking_policy': self.booking_policy.value,
            'first_guest_choice': self.first_guest_choice,
            'weekend_premium': self.weekend_premium,
            'discounts': self.discounts,
            'safety_details': self.safety_details,
        }

    def to_api_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> 'Property':
        return cls(
            id=doc_id,
            name=data.get('name') or '',
            location=data.get('location') or '',
            price_per_night=float(data.get('price_per_night', 0)),
            host=HostSummary.from_dict(data.get('host') or {}),
            description=data.get('description', ''),
            image1=data.get('image1', ''),
            image2=data.get('image2', ''),
            image3=data.get('image3', ''),
            image4=data.get('image4', ''),
            amenities=list(data.get('amenities') or []),
            rating=float(data.get('rating') or 0),
            reviews_count=int(data.get('reviews_count') or 0),
            rating_total=data.get('rating_total'),
            type=data.get('type', 'House'),
            privacy_type=data.get('privacy_type') or PrivacyType.ENTIRE_PLACE,
            bedrooms=int(data.get('bedrooms', 1)),
            beds=int(data.get('beds', 1)),
            baths=int(data.get('baths', 1)),
            max_guests=int(data.get('max_guests', 1)),
            status=data.get('status') or PropertyStatus.PENDING,
            booking_policy=data.get('booking_policy') or BookingPolicy.REVIEW_FIRST,
            first_guest_choice=data.get('first_guest_choice'),
            weekend_premium=float(data.get('weekend_premium') or 0),
            discounts=data.get('discounts'),
            safety_details=data.get('safety_details'),
        )


@dataclass
class DateRange:
    """Check-in / check-out pair."""
    start: datetime
    end: datetime

    def __post_init__(self):
        self.start = to_datetime(self.start)
        self.end = to_datetime(self.end)

    def to_dict(self) -> Dict[str, Any]:
        return {'from': self.start, 'to': self.end}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DateRange':
        return cls(start=data['from'], end=data['to'])


@dataclass
class Booking:
    """Guest reservation request against a listing."""
    id: str
    invoice_id: str
    property: PropertyRef
    guest: GuestSummary
    date_range: DateRange
    guests: int
    total_cost: float
    payment_method: PaymentMethod
    status: BookingStatus = BookingStatus.PENDING
    created_at: Optional[datetime] = None
    reviewed: bool = False
    review_rating: Optional[int] = None
    review_comment: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.payment_method, str):
            self.payment_method = PaymentMethod(self.payment_method)
        if isinstance(self.status, str):
            self.status = BookingStatus(self.status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'invoice_id': self.invoice_id,
            'property': self.property.to_dict(),
            'guest': self.guest.to_dict(),
            'date_range': self.date_range.to_dict(),
            'guests': self.guests,
            'total_cost': self.total_cost,
            'payment_method': self.payment_method.value,
            'status': self.status.value,
            'created_at': self.created_at,
            'reviewed': self.reviewed,
            'review_rating': self.review_rating,
            'review_comment': self.review_comment,
        }

    def to_api_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> 'Booking':
        return cls(
            id=doc_id,
            invoice_id=data.get('invoice_id', ''),
            property=PropertyRef.from_dict(data.get('property') or {}),
            guest=GuestSummary.from_dict(data.get('guest') or {}),
            date_range=DateRange.from_dict(data['date_range']),
            guests=int(data.get('guests', 1)),
            total_cost=float(data.get('total_cost', 0)),
            payment_method=data.get('payment_method') or PaymentMethod.CREDIT_CARD,
            status=data.get('status') or BookingStatus.PENDING,
            created_at=to_datetime(data.get('created_at')),
            reviewed=bool(data.get('reviewed', False)),
            review_rating=data.get('review_rating'),
            review_comment=data.get('review_comment'),
        )


@dataclass
class Inquiry:
    """Free-text message from a guest to a host about a listing."""
    id: str
    property: PropertyRef
    guest: GuestSummary
    message: str
    status: InquiryStatus = InquiryStatus.PENDING
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = InquiryStatus(self.status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'property': self.property.to_dict(),
            'guest': self.guest.to_dict(),
            'message': self.message,
            'status': self.status.value,
            'created_at': self.created_at,
        }

    def to_api_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> 'Inquiry':
        return cls(
            id=doc_id,
            property=PropertyRef.from_dict(data.get('property') or {}),
            guest=GuestSummary.from_dict(data.get('guest') or {}),
            message=data.get('message', ''),
            status=data.get('status') or InquiryStatus.PENDING,
            created_at=to_datetime(data.get('created_at')),
        )


@dataclass
class PropertySummary:
    """Listing summary returned by the recommendation service."""
    property_name: str
    description: str = ""
    price_per_night: float = 0.0
    photo_url: str = ""
    rating: float = 0.0
    property_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'property_id': self.property_id,
            'property_name': self.property_name,
            'description': self.description,
            'price_per_night': self.price_per_night,
            'photo_url': self.photo_url,
            'rating': self.rating,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PropertySummary':
        return cls(
            property_name=data.get('property_name') or data.get('propertyName', ''),
            description=data.get('description', ''),
            price_per_night=float(data.get('price_per_night') or data.get('pricePerNight') or 0),
            photo_url=data.get('photo_url') or data.get('photoUrl', ''),
            rating=float(data.get('rating') or 0),
            property_id=data.get('property_id') or data.get('propertyId'),
        )
