"""
StayNest Vacation Rental Marketplace.

Guests search and book listings, hosts manage listings, bookings and
inquiries, and administrators moderate listings and verify identities.
State lives in Firebase Firestore and is mirrored in-process through
realtime subscriptions.
"""

__version__ = "1.0.0"
__author__ = "StayNest Team"
__description__ = "Vacation rental marketplace backed by realtime Firestore mirrors"
