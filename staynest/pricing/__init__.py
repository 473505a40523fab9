from .calculator import PriceBreakdown, calculate_price, calculate_booking_price, weekend_nightly_price

__all__ = ['PriceBreakdown', 'calculate_price', 'calculate_booking_price', 'weekend_nightly_price']
