"""
Utility modules for the StayNest marketplace.
"""

from .models import (
    UserRole, VerificationStatus, PropertyStatus, BookingStatus, InquiryStatus,
    PrivacyType, BookingPolicy, PaymentMethod, Currency, Language,
    User, HostSummary, GuestSummary, PropertyRef, Property, DateRange,
    Booking, Inquiry, PropertySummary
)
from .logger import setup_logger, get_logger

__all__ = [
    'UserRole', 'VerificationStatus', 'PropertyStatus', 'BookingStatus',
    'InquiryStatus', 'PrivacyType', 'BookingPolicy', 'PaymentMethod', 'Currency',
    'Language', 'User', 'HostSummary', 'GuestSummary', 'PropertyRef', 'Property',
    'DateRange', 'Booking', 'Inquiry', 'PropertySummary', 'setup_logger', 'get_logger'
]
