"""
AI property recommendations.

The configured provider receives the guest's search criteria and returns
a short list of listing summaries. Without an endpoint, a local provider
ranks approved listings from the property store instead.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, List, Dict, Any

import requests

from ..stores.property_store import PropertyStore
from ..utils.errors import RecommendationError, ValidationError
from ..utils.logger import get_logger
from ..utils.models import PropertySummary
from config.settings import recommendation_config


@dataclass
class RecommendationCriteria:
    """What the guest is looking for."""
    location: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int = 1
    price_range_min: float = 0.0
    price_range_max: Optional[float] = None

    def __post_init__(self):
        if not self.location or not self.location.strip():
            raise ValidationError("Location is required")
        if self.check_out_date <= self.check_in_date:
            raise ValidationError("Check-out must be after check-in")
        if self.number_of_guests < 1:
            raise ValidationError("At least one guest is required")
        if self.price_range_max is not None and self.price_range_max < self.price_range_min:
            raise ValidationError("Maximum price must not be below the minimum")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'location': self.location.strip(),
            'check_in_date': self.check_in_date.isoformat(),
            'check_out_date': self.check_out_date.isoformat(),
            'number_of_guests': self.number_of_guests,
            'price_range_min': self.price_range_min,
            'price_range_max': self.price_range_max,
        }


class RecommendationProvider(ABC):
    """Abstract base class for recommendation providers."""

    @abstractmethod
    def recommend(self, criteria: RecommendationCriteria, limit: int) -> List[PropertySummary]:
        """Return at most ``limit`` listing summaries for the criteria."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass


class HttpRecommendationProvider(RecommendationProvider):
    """Posts the criteria to a remote recommendation flow."""

    def __init__(self, endpoint_url: str, api_key: str = "", timeout: float = 15):
        self.endpoint_url = endpoint_url
        self.api_key = api_key
        self.timeout = timeout
        self.logger = get_logger("recommendations.http")

    def recommend(self, criteria: RecommendationCriteria, limit: int) -> List[PropertySummary]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(
                self.endpoint_url,
                json=criteria.to_dict(),
                headers=headers,
                timeout=self.timeout
            )
            self.logger.info("Recommendation request", status_code=response.status_code)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise RecommendationError(f"Recommendation request failed: {e}") from e

        items = data.get('recommendations', data) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise RecommendationError("Unexpected recommendation response shape")
        try:
            return [PropertySummary.from_dict(item) for item in items[:limit]]
        except (AttributeError, TypeError, ValueError) as e:
            raise RecommendationError(f"Malformed recommendation item: {e}") from e

    def get_provider_name(self) -> str:
        return "http"


class LocalRecommendationProvider(RecommendationProvider):
    """Ranks approved listings already mirrored by the property store."""

    def __init__(self, property_store: PropertyStore):
        self.property_store = property_store

    def recommend(self, criteria: RecommendationCriteria, limit: int) -> List[PropertySummary]:
        matches = self.property_store.search_properties(
            location=criteria.location,
            guests=criteria.number_of_guests,
            min_price=criteria.price_range_min,
            max_price=criteria.price_range_max,
        )
        # Best rated first, then the most reviewed, then the cheapest
        matches.sort(key=lambda p: (-p.rating, -p.reviews_count, p.price_per_night))
        return [
            PropertySummary(
                property_id=p.id,
                property_name=p.name,
                description=p.description,
                price_per_night=p.price_per_night,
                photo_url=p.image1,
                rating=p.rating,
            )
            for p in matches[:limit]
        ]

    def get_provider_name(self) -> str:
        return "local"


class RecommendationClient:
    """Front door for recommendations; picks the provider from configuration."""

    def __init__(
        self,
        property_store: Optional[PropertyStore] = None,
        provider: Optional[RecommendationProvider] = None,
        max_results: Optional[int] = None
    ):
        self.logger = get_logger("recommendations")
        self.max_results = max_results or recommendation_config.max_results
        self.provider = provider or self._default_provider(property_store)
        self.logger.info("Initialized recommendation provider",
                         provider=self.provider.get_provider_name())

    @staticmethod
    def _default_provider(property_store: Optional[PropertyStore]) -> RecommendationProvider:
        if recommendation_config.endpoint_url:
            return HttpRecommendationProvider(
                recommendation_config.endpoint_url,
                recommendation_config.api_key,
                recommendation_config.timeout_seconds,
            )
        if property_store is None:
            raise ValueError("A property store is required when no recommendation endpoint is set")
        return LocalRecommendationProvider(property_store)

    def recommend(self, criteria: RecommendationCriteria) -> List[PropertySummary]:
        """
        Get listing suggestions for the criteria.

        Raises:
            RecommendationError: the provider failed; callers show a generic message
        """
        try:
            results = self.provider.recommend(criteria, self.max_results)
        except RecommendationError as e:
            self.logger.error("Error getting recommendations", error=str(e))
            raise
        except Exception as e:
            self.logger.error("Error getting recommendations", error=str(e))
            raise RecommendationError(str(e)) from e

        self.logger.info("Recommendations generated",
                         provider=self.provider.get_provider_name(),
                         location=criteria.location, count=len(results))
        return results
