"""
Tests for the review transaction and the listing rating aggregate.
"""
import threading
from unittest.mock import Mock

import pytest

from staynest.utils.errors import (
    AlreadyReviewed, NotFoundError, StorageError, Unauthorized, ValidationError
)
from staynest.utils.models import BookingStatus, PaymentMethod
from config.settings import app_config

pytestmark = pytest.mark.unit

VILLA = "seed-goa-beach-villa"
LOFT = "seed-mumbai-loft"
COMMENT = "Lovely stay, would come back."


@pytest.fixture
def completed_booking(property_store, guest, admin, past_stay):
    """Factory for confirmed bookings whose check-out has passed."""
    def _completed_booking(property_id=VILLA, user=None):
        booking_id = property_store.add_booking(
            user or guest, property_id, *past_stay, 1, PaymentMethod.CREDIT_CARD
        )
        property_store.update_booking_status(admin, booking_id, BookingStatus.CONFIRMED)
        return booking_id
    return _completed_booking


def stored_property(client, property_id):
    return client.get_document(app_config.properties_collection, property_id)


class TestAddReviewAndRating:

    def test_first_review(self, property_store, client, guest, completed_booking):
        booking_id = completed_booking()

        new_rating = property_store.add_review_and_rating(guest, booking_id, VILLA, 4, COMMENT)

        assert new_rating == 4.0
        prop = stored_property(client, VILLA)
        assert prop["rating"] == 4.0
        assert prop["reviews_count"] == 1
        assert prop["rating_total"] == 4
        booking = property_store.get_booking_by_id(booking_id)
        assert booking.reviewed is True
        assert booking.review_rating == 4
        assert booking.review_comment == COMMENT

    def test_mirror_reflects_new_rating(self, property_store, guest, completed_booking):
        booking_id = completed_booking()
        property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)
        prop = property_store.get_property_by_id(VILLA)
        assert prop.rating == 5.0
        assert prop.reviews_count == 1

    def test_aggregate_without_running_total(self, property_store, client, guest, completed_booking):
        client.update_document(app_config.properties_collection, LOFT, {
            "rating": 4.5, "reviews_count": 2, "rating_total": None,
        })
        booking_id = completed_booking(LOFT)

        assert property_store.add_review_and_rating(guest, booking_id, LOFT, 3, COMMENT) == 4.0
        assert stored_property(client, LOFT)["rating_total"] == 12

    def test_rating_is_exact_mean_rounded(self, property_store, client, guest, completed_booking):
        ratings = [5, 4, 4, 5, 3, 4]
        for rating in ratings:
            property_store.add_review_and_rating(guest, completed_booking(), VILLA, rating, COMMENT)

        prop = stored_property(client, VILLA)
        assert prop["reviews_count"] == len(ratings)
        assert prop["rating"] == round(sum(ratings) / len(ratings), 2)

    def test_two_decimal_rounding(self, property_store, guest, completed_booking):
        results = [
            property_store.add_review_and_rating(guest, completed_booking(), VILLA, rating, COMMENT)
            for rating in (5, 4, 4)
        ]
        assert results == [5.0, 4.5, 4.33]

    def test_second_review_rejected(self, property_store, client, guest, completed_booking):
        booking_id = completed_booking()
        property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)

        with pytest.raises(AlreadyReviewed):
            property_store.add_review_and_rating(guest, booking_id, VILLA, 1, COMMENT)

        prop = stored_property(client, VILLA)
        assert prop["reviews_count"] == 1
        assert prop["rating"] == 5.0

    @pytest.mark.parametrize("rating", [0, 6, 4.5, True, "5"])
    def test_rating_out_of_range(self, property_store, guest, completed_booking, rating):
        with pytest.raises(ValidationError):
            property_store.add_review_and_rating(guest, completed_booking(), VILLA, rating, COMMENT)

    def test_only_booking_guest_may_review(self, property_store, make_user, completed_booking):
        stranger = make_user("Stranger")
        with pytest.raises(Unauthorized):
            property_store.add_review_and_rating(stranger, completed_booking(), VILLA, 5, COMMENT)

    def test_pending_booking_cannot_be_reviewed(self, property_store, guest, past_stay):
        booking_id = property_store.add_booking(guest, VILLA, *past_stay, 1, PaymentMethod.PAYPAL)
        with pytest.raises(ValidationError):
            property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)

    def test_stay_must_be_over(self, property_store, guest, admin, future_stay):
        booking_id = property_store.add_booking(guest, VILLA, *future_stay, 1, PaymentMethod.PAYPAL)
        property_store.update_booking_status(admin, booking_id, BookingStatus.CONFIRMED)
        with pytest.raises(ValidationError):
            property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)

    def test_property_must_match_booking(self, property_store, guest, completed_booking):
        with pytest.raises(ValidationError):
            property_store.add_review_and_rating(guest, completed_booking(), LOFT, 5, COMMENT)

    def test_deleted_property(self, property_store, client, guest, admin, completed_booking):
        booking_id = completed_booking()
        property_store.delete_property(admin, VILLA)

        with pytest.raises(NotFoundError) as exc_info:
            property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)
        assert "Property does not exist!" in str(exc_info.value)
        assert property_store.get_booking_by_id(booking_id).reviewed is False

    def test_unknown_booking(self, property_store, guest):
        with pytest.raises(NotFoundError):
            property_store.add_review_and_rating(guest, "missing", VILLA, 5, COMMENT)

    def test_unexpected_failure_becomes_storage_error(self, property_store, guest, completed_booking, monkeypatch):
        booking_id = completed_booking()
        monkeypatch.setattr(property_store.client, "run_transaction", Mock(side_effect=RuntimeError("aborted")))
        with pytest.raises(StorageError):
            property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)


class TestConcurrentReviews:

    def _run_concurrently(self, calls):
        outcomes = []
        lock = threading.Lock()

        def _call(fn):
            try:
                result = fn()
            except Exception as e:
                result = e
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=_call, args=(fn,)) for fn in calls]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def test_same_booking_counted_once(self, property_store, client, guest, completed_booking):
        booking_id = completed_booking()
        outcomes = self._run_concurrently([
            lambda: property_store.add_review_and_rating(guest, booking_id, VILLA, 5, COMMENT)
            for _ in range(8)
        ])

        assert sum(1 for o in outcomes if isinstance(o, float)) == 1
        assert all(isinstance(o, (float, AlreadyReviewed)) for o in outcomes)
        assert stored_property(client, VILLA)["reviews_count"] == 1

    def test_different_bookings_all_counted(self, property_store, client, guest, completed_booking):
        ratings = [5, 4, 3, 5, 4, 2, 5, 4]
        booking_ids = [completed_booking() for _ in ratings]
        outcomes = self._run_concurrently([
            (lambda b=b, r=r: property_store.add_review_and_rating(guest, b, VILLA, r, COMMENT))
            for b, r in zip(booking_ids, ratings)
        ])

        assert all(isinstance(o, float) for o in outcomes)
        prop = stored_property(client, VILLA)
        assert prop["reviews_count"] == len(ratings)
        assert prop["rating_total"] == sum(ratings)
        assert prop["rating"] == round(sum(ratings) / len(ratings), 2)
