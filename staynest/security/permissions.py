"""
Capability checks applied at the store boundary.

Each check raises ``Unauthorized`` with a human-readable reason; callers
never need to inspect a return value.
"""
from typing import Optional

from ..utils.errors import Unauthorized, VerificationRequired
from ..utils.models import User, UserRole, Property, Booking, Inquiry


def require_active(actor: Optional[User]) -> User:
    """Any logged-in account that is not disabled."""
    if actor is None:
        raise Unauthorized("Login required")
    if actor.is_disabled:
        raise Unauthorized("Account is disabled")
    return actor


def require_super_admin(actor: Optional[User]) -> User:
    actor = require_active(actor)
    if not actor.is_super_admin:
        raise Unauthorized("Administrator access required")
    return actor


def require_self_or_admin(actor: Optional[User], user_id: str) -> User:
    actor = require_active(actor)
    if actor.id != user_id and not actor.is_super_admin:
        raise Unauthorized("Cannot act on another user's account")
    return actor


def require_host(actor: Optional[User]) -> User:
    actor = require_active(actor)
    if actor.role not in (UserRole.HOST, UserRole.SUPER_ADMIN):
        raise Unauthorized("Host account required")
    return actor


def require_property_owner(actor: Optional[User], prop: Property) -> User:
    actor = require_active(actor)
    if prop.host.id != actor.id and not actor.is_super_admin:
        raise Unauthorized("Only the listing's host can do this")
    return actor


def require_booking_host(actor: Optional[User], booking: Booking) -> User:
    actor = require_active(actor)
    if booking.property.host.id != actor.id and not actor.is_super_admin:
        raise Unauthorized("Only the listing's host can manage this booking")
    return actor


def require_booking_guest(actor: Optional[User], booking: Booking) -> User:
    actor = require_active(actor)
    if booking.guest.id != actor.id:
        raise Unauthorized("Only the guest who made this booking can review it")
    return actor


def require_inquiry_host(actor: Optional[User], inquiry: Inquiry) -> User:
    actor = require_active(actor)
    if inquiry.property.host.id != actor.id and not actor.is_super_admin:
        raise Unauthorized("Only the listing's host can respond to this inquiry")
    return actor


def require_can_book(actor: Optional[User], prop: Property) -> User:
    actor = require_active(actor)
    if not actor.is_verified:
        raise VerificationRequired(
            "Please verify your identity in your account settings before booking"
        )
    if prop.host.id == actor.id:
        raise Unauthorized("You cannot book your own property")
    return actor


def require_can_inquire(actor: Optional[User], prop: Property) -> User:
    actor = require_active(actor)
    if prop.host.id == actor.id:
        raise Unauthorized("You cannot send an inquiry about your own property")
    return actor
