"""
Sample listings written to an empty properties collection.

Ids are fixed so a repeated seed overwrites rather than duplicates.
"""
from typing import List

from ..utils.models import (
    Property, HostSummary, PrivacyType, PropertyStatus, BookingPolicy
)

SEED_HOST = HostSummary(
    id="seed-host",
    name="Ananya Rao",
    email="ananya.host@example.com",
    avatar="https://placehold.co/100x100.png?text=A",
)


def _images(slug: str) -> dict:
    return {f"image{i}": f"https://placehold.co/600x400.png?text={slug}-{i}" for i in range(1, 5)}


def sample_properties() -> List[Property]:
    return [
        Property(
            id="seed-goa-beach-villa",
            name="Seaside Villa with Private Pool",
            location="Goa, India",
            price_per_night=12500,
            host=SEED_HOST,
            description="Four-bedroom villa a short walk from Candolim beach.",
            amenities=["Wifi", "Pool", "Air conditioning", "Kitchen", "Free parking"],
            type="Villa",
            privacy_type=PrivacyType.ENTIRE_PLACE,
            bedrooms=4, beds=5, baths=4, max_guests=8,
            status=PropertyStatus.APPROVED,
            booking_policy=BookingPolicy.REVIEW_FIRST,
            weekend_premium=15,
            **_images("goa"),
        ),
        Property(
            id="seed-manali-cabin",
            name="Pine Forest Cabin",
            location="Manali, Himachal Pradesh, India",
            price_per_night=4800,
            host=SEED_HOST,
            description="Wooden cabin with a fireplace and valley views.",
            amenities=["Wifi", "Heating", "Kitchen", "Mountain view"],
            type="Cabin",
            privacy_type=PrivacyType.ENTIRE_PLACE,
            bedrooms=2, beds=2, baths=1, max_guests=4,
            status=PropertyStatus.APPROVED,
            booking_policy=BookingPolicy.REVIEW_FIRST,
            weekend_premium=10,
            **_images("manali"),
        ),
        Property(
            id="seed-jaipur-haveli-room",
            name="Heritage Haveli Suite",
            location="Jaipur, Rajasthan, India",
            price_per_night=3200,
            host=SEED_HOST,
            description="Restored suite in an eighteenth-century haveli in the old city.",
            amenities=["Wifi", "Air conditioning", "Breakfast"],
            type="Guesthouse",
            privacy_type=PrivacyType.ROOM,
            bedrooms=1, beds=1, baths=1, max_guests=2,
            status=PropertyStatus.APPROVED,
            booking_policy=BookingPolicy.INSTANT_BOOK,
            **_images("jaipur"),
        ),
        Property(
            id="seed-mumbai-loft",
            name="Bandra Studio Loft",
            location="Mumbai, Maharashtra, India",
            price_per_night=6000,
            host=SEED_HOST,
            description="Compact loft near Carter Road promenade.",
            amenities=["Wifi", "Air conditioning", "Washer", "Workspace"],
            type="Apartment",
            privacy_type=PrivacyType.ENTIRE_PLACE,
            bedrooms=1, beds=1, baths=1, max_guests=2,
            status=PropertyStatus.APPROVED,
            booking_policy=BookingPolicy.REVIEW_FIRST,
            weekend_premium=20,
            **_images("mumbai"),
        ),
    ]
