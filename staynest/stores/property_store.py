"""
Property/Booking/Inquiry store.

Keeps realtime mirrors of the properties, bookings and inquiries
collections and exposes the listing, booking, inquiry and review
operations. The database is the system of record: every change
notification replaces the matching in-memory list wholesale.
"""
import threading
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict, Any, Callable, Iterable

from .observable import Observable
from ..firebase_sync.base import DocumentClient, DocumentSnapshot, TransactionContext
from ..pricing.calculator import DateLike, calculate_booking_price
from ..security import permissions
from ..seed.sample_properties import sample_properties
from ..utils.errors import (
    MarketplaceError, StorageError, ValidationError, NotFoundError, AlreadyReviewed
)
from ..utils.logger import get_logger
from ..utils.models import (
    User, Property, PropertyStatus, Booking, BookingStatus, Inquiry, InquiryStatus,
    HostSummary, GuestSummary, DateRange, PaymentMethod
)
from config.settings import app_config

# Fields only the review transaction or the moderation flow may change
PROTECTED_PROPERTY_FIELDS = ('id', 'host', 'rating', 'reviews_count', 'rating_total', 'status')

BOOKING_TABS = ('upcoming', 'completed', 'cancelled')

# Listing fields a partial update may set, by accepted type; none of them may be null
UPDATABLE_PROPERTY_FIELDS = {
    'name': str,
    'description': str,
    'location': str,
    'price_per_night': (int, float),
    'image1': str,
    'image2': str,
    'image3': str,
    'image4': str,
    'amenities': list,
    'type': str,
    'privacy_type': str,
    'bedrooms': int,
    'beds': int,
    'baths': int,
    'max_guests': int,
    'booking_policy': str,
    'weekend_premium': (int, float),
}
NULLABLE_PROPERTY_FIELDS = ('first_guest_choice', 'discounts', 'safety_details')
MIN_COUNTS = {'bedrooms': 0, 'beds': 1, 'baths': 0, 'max_guests': 1}


def round2(value: float) -> float:
    """Round half up to two decimal places."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def generate_invoice_id() -> str:
    """``INV-<epoch millis>-<4 hex chars>``."""
    return f"INV-{int(time.time() * 1000)}-{uuid.uuid4().hex[:4]}"


class PropertyStore(Observable):
    """Realtime mirrors of listings, bookings and inquiries."""

    def __init__(
        self,
        client: DocumentClient,
        seed: Optional[Callable[[], Iterable[Property]]] = sample_properties,
        seed_on_start: Optional[bool] = None
    ):
        super().__init__()
        self.logger = get_logger("property_store")
        self.client = client
        self.seed_source = seed
        self.seed_on_start = app_config.seed_on_start if seed_on_start is None else seed_on_start

        self.properties_collection = app_config.properties_collection
        self.bookings_collection = app_config.bookings_collection
        self.inquiries_collection = app_config.inquiries_collection

        self.lock = threading.RLock()
        self.loading = True
        self._properties: List[Property] = []
        self._bookings: List[Booking] = []
        self._inquiries: List[Inquiry] = []
        self._unsubscribers: List[Callable[[], None]] = []

    # Lifecycle

    def start(self) -> None:
        """
        Load listings, seeding an empty collection first, then attach the
        three realtime subscriptions.

        Seeding happens before the listeners attach so the first snapshot
        already contains the sample listings.
        """
        if self._unsubscribers:
            return
        try:
            docs = self.client.fetch_all(self.properties_collection)
            if not docs and self.seed_on_start and self.seed_source is not None:
                self.logger.info("No properties found, seeding database")
                self.seed()
                docs = self.client.fetch_all(self.properties_collection)
            self._on_properties_snapshot(docs)

            self._unsubscribers = [
                self.client.subscribe(
                    self.properties_collection,
                    self._on_properties_snapshot,
                    on_error=self._on_properties_error,
                ),
                self.client.subscribe(
                    self.bookings_collection,
                    self._on_bookings_snapshot,
                    on_error=lambda e: self.logger.error("Error fetching bookings", error=str(e)),
                    order_by='created_at',
                    descending=True,
                ),
                self.client.subscribe(
                    self.inquiries_collection,
                    self._on_inquiries_snapshot,
                    on_error=lambda e: self.logger.error("Error fetching inquiries", error=str(e)),
                    order_by='created_at',
                    descending=True,
                ),
            ]
            self.logger.info("Property store started", properties=len(self._properties))
        except StorageError as e:
            self.logger.error("Error during Firestore setup", error=str(e))
            with self.lock:
                self.loading = False
            self._notify()

    def stop(self) -> None:
        """Detach all three subscriptions."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.logger.info("Property store stopped")

    def seed(self) -> int:
        """
        Write the sample listings if the collection is empty.

        Returns:
            Number of listings written (0 when the collection had data)
        """
        if self.client.fetch_all(self.properties_collection):
            return 0
        documents = {prop.id: prop.to_dict() for prop in self.seed_source()}
        self.client.batch_set(self.properties_collection, documents)
        self.logger.info("Database seeded", count=len(documents))
        return len(documents)

    def _parse_documents(self, kind: str, parse, docs: List[DocumentSnapshot]) -> list:
        """Parse each document, logging and skipping any that do not fit the model."""
        parsed = []
        for doc_id, data in docs:
            try:
                parsed.append(parse(doc_id, data))
            except (TypeError, ValueError, AttributeError) as e:
                self.logger.error(f"Skipping unreadable {kind}", doc_id=doc_id, error=str(e))
        return parsed

    def _on_properties_snapshot(self, docs: List[DocumentSnapshot]) -> None:
        properties = self._parse_documents("property", Property.from_dict, docs)
        with self.lock:
            self._properties = properties
            self.loading = False
        self._notify()

    def _on_properties_error(self, error: Exception) -> None:
        self.logger.error("Error fetching properties", error=str(error))
        with self.lock:
            self.loading = False

    def _on_bookings_snapshot(self, docs: List[DocumentSnapshot]) -> None:
        bookings = self._parse_documents("booking", Booking.from_dict, docs)
        with self.lock:
            self._bookings = bookings
        self._notify()

    def _on_inquiries_snapshot(self, docs: List[DocumentSnapshot]) -> None:
        inquiries = self._parse_documents("inquiry", Inquiry.from_dict, docs)
        with self.lock:
            self._inquiries = inquiries
        self._notify()

    # Snapshot reads

    @property
    def properties(self) -> List[Property]:
        with self.lock:
            return list(self._properties)

    @property
    def bookings(self) -> List[Booking]:
        with self.lock:
            return list(self._bookings)

    @property
    def inquiries(self) -> List[Inquiry]:
        with self.lock:
            return list(self._inquiries)

    def get_property_by_id(self, property_id: str) -> Optional[Property]:
        """Cache lookup; may be stale or missing while loading."""
        with self.lock:
            return next((p for p in self._properties if p.id == property_id), None)

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        with self.lock:
            return next((b for b in self._bookings if b.id == booking_id), None)

    def get_inquiry_by_id(self, inquiry_id: str) -> Optional[Inquiry]:
        with self.lock:
            return next((i for i in self._inquiries if i.id == inquiry_id), None)

    def search_properties(
        self,
        location: Optional[str] = None,
        guests: Optional[int] = None,
        min_price: float = 0,
        max_price: Optional[float] = None,
        amenities: Optional[Iterable[str]] = None
    ) -> List[Property]:
        """Approved listings matching every given filter."""
        location = (location or "").strip().lower()
        wanted = set(amenities or [])
        results = []
        for prop in self.properties:
            if prop.status != PropertyStatus.APPROVED:
                continue
            if location and location not in prop.location.lower():
                continue
            if guests and prop.max_guests < guests:
                continue
            if prop.price_per_night < min_price:
                continue
            if max_price is not None and prop.price_per_night > max_price:
                continue
            if not wanted.issubset(prop.amenities):
                continue
            results.append(prop)
        return results

    def properties_for_host(self, host_id: str) -> List[Property]:
        return [p for p in self.properties if p.host.id == host_id]

    def pending_properties(self) -> List[Property]:
        return [p for p in self.properties if p.status == PropertyStatus.PENDING]

    def bookings_for_guest(self, guest_id: str, tab: Optional[str] = None) -> List[Booking]:
        """
        A guest's bookings, optionally narrowed to one tab of the trips screen.

        ``upcoming``: pending, or confirmed with check-out still ahead.
        ``completed``: confirmed with check-out passed.
        ``cancelled``: cancelled.
        """
        if tab is not None and tab not in BOOKING_TABS:
            raise ValidationError(f"Unknown bookings tab: {tab}")
        now = datetime.now(timezone.utc)
        bookings = [b for b in self.bookings if b.guest.id == guest_id]
        if tab == 'upcoming':
            return [b for b in bookings if b.status == BookingStatus.PENDING
                    or (b.status == BookingStatus.CONFIRMED and b.date_range.end >= now)]
        if tab == 'completed':
            return [b for b in bookings
                    if b.status == BookingStatus.CONFIRMED and b.date_range.end < now]
        if tab == 'cancelled':
            return [b for b in bookings if b.status == BookingStatus.CANCELLED]
        return bookings

    def bookings_for_host(self, host_id: str) -> List[Booking]:
        return [b for b in self.bookings if b.property.host.id == host_id]

    def inquiries_for_host(self, host_id: str) -> List[Inquiry]:
        return [i for i in self.inquiries if i.property.host.id == host_id]

    def inquiries_for_guest(self, guest_id: str) -> List[Inquiry]:
        return [i for i in self.inquiries if i.guest.id == guest_id]

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Document counts per status for each collection."""
        result: Dict[str, Dict[str, int]] = {}
        for name, items in (('properties', self.properties),
                            ('bookings', self.bookings),
                            ('inquiries', self.inquiries)):
            counts = {'total': len(items)}
            for item in items:
                counts[item.status.value] = counts.get(item.status.value, 0) + 1
            result[name] = counts
        return result

    # Lookups that fall back to the database when the mirror lags behind

    def _require_property(self, property_id: str) -> Property:
        prop = self.get_property_by_id(property_id)
        if prop is None:
            data = self.client.get_document(self.properties_collection, property_id)
            if data is None:
                raise NotFoundError(f"Property {property_id} not found")
            prop = Property.from_dict(property_id, data)
        return prop

    def _require_booking(self, booking_id: str) -> Booking:
        booking = self.get_booking_by_id(booking_id)
        if booking is None:
            data = self.client.get_document(self.bookings_collection, booking_id)
            if data is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            booking = Booking.from_dict(booking_id, data)
        return booking

    def _require_inquiry(self, inquiry_id: str) -> Inquiry:
        inquiry = self.get_inquiry_by_id(inquiry_id)
        if inquiry is None:
            data = self.client.get_document(self.inquiries_collection, inquiry_id)
            if data is None:
                raise NotFoundError(f"Inquiry {inquiry_id} not found")
            inquiry = Inquiry.from_dict(inquiry_id, data)
        return inquiry

    # Listings

    def add_property(self, actor: Optional[User], data: Dict[str, Any]) -> Optional[str]:
        """
        Create a listing owned by ``actor``; it starts ``pending`` with no reviews.

        Returns:
            New document id, or None when the write failed
        """
        actor = permissions.require_host(actor)
        fields = {k: v for k, v in data.items() if k not in PROTECTED_PROPERTY_FIELDS}
        try:
            prop = Property.from_dict("", {
                **fields,
                'host': HostSummary.from_user(actor).to_dict(),
                'status': PropertyStatus.PENDING.value,
                'rating': 0,
                'reviews_count': 0,
                'rating_total': 0,
            })
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid listing data: {e}") from e
        if not prop.name or not prop.location:
            raise ValidationError("Name and location are required")
        if not all(prop.images):
            raise ValidationError("Four photos are required")
        if prop.price_per_night <= 0:
            raise ValidationError("Price per night must be positive")

        try:
            property_id = self.client.add_document(self.properties_collection, prop.to_dict())
        except StorageError as e:
            self.logger.error("Error adding property", host_id=actor.id, error=str(e))
            return None
        self.logger.info("Property added", property_id=property_id, host_id=actor.id)
        return property_id

    def update_property(self, actor: Optional[User], property_id: str, updates: Dict[str, Any]) -> bool:
        prop = self._require_property(property_id)
        permissions.require_property_owner(actor, prop)
        protected = set(updates) & set(PROTECTED_PROPERTY_FIELDS)
        if protected:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(protected))}")
        updates = _validate_property_updates(prop, updates)
        return self._write("Property updated", self.properties_collection, property_id, updates)

    def delete_property(self, actor: Optional[User], property_id: str) -> bool:
        prop = self._require_property(property_id)
        permissions.require_property_owner(actor, prop)
        try:
            self.client.delete_document(self.properties_collection, property_id)
        except StorageError as e:
            self.logger.error("Error deleting property", property_id=property_id, error=str(e))
            return False
        self.logger.info("Property deleted", property_id=property_id, by=actor.id)
        return True

    def update_property_status(self, actor: Optional[User], property_id: str, status) -> bool:
        permissions.require_super_admin(actor)
        status = _coerce(PropertyStatus, status)
        self._require_property(property_id)
        return self._write("Property status updated", self.properties_collection,
                           property_id, {'status': status.value})

    # Bookings

    def add_booking(
        self,
        actor: Optional[User],
        property_id: str,
        check_in: DateLike,
        check_out: DateLike,
        guests: int,
        payment_method
    ) -> Optional[str]:
        """
        Request a booking; the total is priced here, never taken from the caller.

        Returns:
            New document id, or None when the write failed
        """
        prop = self._require_property(property_id)
        actor = permissions.require_can_book(actor, prop)
        if prop.status != PropertyStatus.APPROVED:
            raise ValidationError("This listing is not available for booking")
        payment_method = _coerce(PaymentMethod, payment_method)

        price = calculate_booking_price(check_in, check_out, prop)
        if not price.can_book:
            raise ValidationError("Check-out must be after check-in")
        if guests < 1:
            raise ValidationError("At least one guest is required")
        if guests > prop.max_guests:
            raise ValidationError(f"This listing allows at most {prop.max_guests} guests")

        booking = Booking(
            id="",
            invoice_id=generate_invoice_id(),
            property=prop.to_ref(),
            guest=GuestSummary.from_user(actor),
            date_range=DateRange(start=check_in, end=check_out),
            guests=guests,
            total_cost=price.total,
            payment_method=payment_method,
            status=BookingStatus.PENDING,
        )
        document = booking.to_dict()
        document['created_at'] = self.client.server_timestamp()

        try:
            booking_id = self.client.add_document(self.bookings_collection, document)
        except StorageError as e:
            self.logger.error("Error adding booking", property_id=property_id, error=str(e))
            return None
        self.logger.info("Booking requested", booking_id=booking_id, property_id=property_id,
                         invoice_id=booking.invoice_id, total=price.total)
        return booking_id

    def update_booking_status(self, actor: Optional[User], booking_id: str, status) -> bool:
        booking = self._require_booking(booking_id)
        permissions.require_booking_host(actor, booking)
        status = _coerce(BookingStatus, status)
        return self._write("Booking status updated", self.bookings_collection,
                           booking_id, {'status': status.value})

    # Inquiries

    def add_inquiry(self, actor: Optional[User], property_id: str, message: str) -> Optional[str]:
        prop = self._require_property(property_id)
        actor = permissions.require_can_inquire(actor, prop)
        if not message or not message.strip():
            raise ValidationError("Message is required")

        inquiry = Inquiry(
            id="",
            property=prop.to_ref(),
            guest=GuestSummary.from_user(actor),
            message=message.strip(),
            status=InquiryStatus.PENDING,
        )
        document = inquiry.to_dict()
        document['created_at'] = self.client.server_timestamp()

        try:
            inquiry_id = self.client.add_document(self.inquiries_collection, document)
        except StorageError as e:
            self.logger.error("Error adding inquiry", property_id=property_id, error=str(e))
            return None
        self.logger.info("Inquiry sent", inquiry_id=inquiry_id, property_id=property_id)
        return inquiry_id

    def update_inquiry_status(self, actor: Optional[User], inquiry_id: str, status) -> bool:
        inquiry = self._require_inquiry(inquiry_id)
        permissions.require_inquiry_host(actor, inquiry)
        status = _coerce(InquiryStatus, status)
        return self._write("Inquiry status updated", self.inquiries_collection,
                           inquiry_id, {'status': status.value})

    # Reviews

    def add_review_and_rating(
        self,
        actor: Optional[User],
        booking_id: str,
        property_id: str,
        rating: int,
        comment: str
    ) -> float:
        """
        Record a guest review and fold its rating into the listing aggregate.

        The booking's ``reviewed`` flag and the listing's rating/count are
        written in one transaction, so a booking is counted exactly once
        even under concurrent submissions.

        Returns:
            The listing's new rating

        Raises:
            ValidationError, NotFoundError, Unauthorized, AlreadyReviewed,
            StorageError: the review was not recorded
        """
        if isinstance(rating, bool) or not isinstance(rating, int) \
                or not app_config.min_rating <= rating <= app_config.max_rating:
            raise ValidationError(
                f"Rating must be between {app_config.min_rating} and {app_config.max_rating}"
            )
        permissions.require_booking_guest(actor, self._require_booking(booking_id))

        def _review(txn: TransactionContext) -> float:
            booking_data = txn.get(self.bookings_collection, booking_id)
            if booking_data is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            property_data = txn.get(self.properties_collection, property_id)
            if property_data is None:
                raise NotFoundError("Property does not exist!")

            booking = Booking.from_dict(booking_id, booking_data)
            if booking.property.id != property_id:
                raise ValidationError("Booking does not belong to this property")
            if booking.reviewed:
                raise AlreadyReviewed("This booking has already been reviewed")
            if booking.status != BookingStatus.CONFIRMED:
                raise ValidationError("Only confirmed bookings can be reviewed")
            if booking.date_range.end >= datetime.now(timezone.utc):
                raise ValidationError("Reviews open after check-out")

            count = int(property_data.get('reviews_count') or 0)
            total = property_data.get('rating_total')
            if total is None:
                total = float(property_data.get('rating') or 0) * count
            new_count = count + 1
            new_total = float(total) + rating
            new_rating = round2(new_total / new_count)

            txn.update(self.properties_collection, property_id, {
                'rating': new_rating,
                'reviews_count': new_count,
                'rating_total': new_total,
            })
            txn.update(self.bookings_collection, booking_id, {
                'reviewed': True,
                'review_rating': rating,
                'review_comment': comment,
            })
            return new_rating

        try:
            new_rating = self.client.run_transaction(_review)
        except MarketplaceError as e:
            self.logger.error("Review transaction failed", booking_id=booking_id,
                              property_id=property_id, error=str(e))
            raise
        except Exception as e:
            self.logger.error("Review transaction failed", booking_id=booking_id,
                              property_id=property_id, error=str(e))
            raise StorageError(f"Review transaction failed: {e}") from e

        self.logger.info("Review recorded", booking_id=booking_id,
                         property_id=property_id, rating=rating, new_rating=new_rating)
        return new_rating

    # Helpers

    def _write(self, action: str, collection: str, doc_id: str, updates: Dict[str, Any]) -> bool:
        """Apply an update; remote failures are logged and reported as False."""
        try:
            self.client.update_document(collection, doc_id, updates)
        except StorageError as e:
            self.logger.error(f"Failed: {action}", collection=collection,
                              doc_id=doc_id, error=str(e))
            return False
        self.logger.info(action, collection=collection, doc_id=doc_id, **{
            k: v for k, v in updates.items() if k == 'status'
        })
        return True


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {enum_cls.__name__}: {value!r}") from e


def _validate_property_updates(prop: Property, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check a partial listing update against the current listing.

    Returns:
        The updated fields in their stored form

    Raises:
        ValidationError: unknown, null or wrongly typed field, or a value
            that would leave the listing unbookable
    """
    if not updates:
        raise ValidationError("No fields to update")
    for key, value in updates.items():
        if key in NULLABLE_PROPERTY_FIELDS:
            continue
        expected = UPDATABLE_PROPERTY_FIELDS.get(key)
        if expected is None:
            raise ValidationError(f"Unknown listing field: {key}")
        if value is None:
            raise ValidationError(f"{key} cannot be empty")
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValidationError(f"Invalid value for {key}: {value!r}")

    try:
        updated = Property.from_dict(prop.id, {**prop.to_dict(), **updates})
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid listing data: {e}") from e
    if not updated.name.strip() or not updated.location.strip():
        raise ValidationError("Name and location are required")
    if not all(image.strip() for image in updated.images):
        raise ValidationError("Four photos are required")
    if updated.price_per_night <= 0:
        raise ValidationError("Price per night must be positive")
    for key, minimum in MIN_COUNTS.items():
        if getattr(updated, key) < minimum:
            raise ValidationError(f"{key} must be at least {minimum}")
    if not 0 <= updated.weekend_premium <= 100:
        raise ValidationError("Weekend premium must be between 0 and 100")

    stored = updated.to_dict()
    return {key: stored[key] for key in updates}


__all__ = ['PropertyStore', 'round2', 'generate_invoice_id']
