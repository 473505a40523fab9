"""
Booking price calculation.
"""
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from typing import Union, Dict, Any, Optional

from ..utils.models import Property
from config.settings import app_config

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized cost of a stay."""
    nights: int = 0
    weekday_nights: int = 0
    weekend_nights: int = 0
    base_price: float = 0.0
    weekend_price: float = 0.0
    subtotal: float = 0.0
    service_fee: float = 0.0
    total: float = 0.0

    @property
    def can_book(self) -> bool:
        return self.nights > 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['can_book'] = self.can_book
        return data


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def weekend_nightly_price(price_per_night: float, weekend_premium: Optional[float] = 0) -> float:
    """Nightly price for Friday and Saturday nights; premium is a percentage."""
    return round(price_per_night * (100 + (weekend_premium or 0)) / 100, 2)


def calculate_price(
    check_in: DateLike,
    check_out: DateLike,
    price_per_night: float,
    weekend_premium: Optional[float] = 0,
    service_fee_rate: Optional[float] = None
) -> PriceBreakdown:
    """
    Price a stay from check-in to check-out.

    Nights are counted per calendar day, so a night belongs to the date it
    starts on. Ranges whose check-out is not after check-in price to zero.

    Args:
        check_in: First night of the stay
        check_out: Departure date (exclusive)
        price_per_night: Weekday nightly rate
        weekend_premium: Percentage added on Friday and Saturday nights
        service_fee_rate: Fraction of the subtotal charged as service fee

    Returns:
        PriceBreakdown for the stay
    """
    start, end = _as_date(check_in), _as_date(check_out)
    nights = (end - start).days
    if nights <= 0:
        return PriceBreakdown()

    if service_fee_rate is None:
        service_fee_rate = app_config.service_fee_rate

    weekend_nights = sum(
        1 for offset in range(nights)
        if (start + timedelta(days=offset)).weekday() in app_config.weekend_days
    )
    weekday_nights = nights - weekend_nights
    weekend_price = weekend_nightly_price(price_per_night, weekend_premium)

    subtotal = round(weekday_nights * price_per_night + weekend_nights * weekend_price, 2)
    service_fee = round(subtotal * service_fee_rate, 2)

    return PriceBreakdown(
        nights=nights,
        weekday_nights=weekday_nights,
        weekend_nights=weekend_nights,
        base_price=float(price_per_night),
        weekend_price=weekend_price,
        subtotal=subtotal,
        service_fee=service_fee,
        total=round(subtotal + service_fee, 2),
    )


def calculate_booking_price(check_in: DateLike, check_out: DateLike, prop: Property) -> PriceBreakdown:
    """Price a stay at a listing using its nightly rate and weekend premium."""
    return calculate_price(check_in, check_out, prop.price_per_night, prop.weekend_premium)
