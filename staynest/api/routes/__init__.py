"""
API routes and endpoints.
"""

from . import auth, bookings, health, inquiries, preferences, properties, recommendations, users

__all__ = [
    "auth", "bookings", "health", "inquiries", "preferences", "properties",
    "recommendations", "users"
]
