"""
Tests for the recommendation client and providers.
"""
from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from staynest.recommendations import (
    HttpRecommendationProvider, LocalRecommendationProvider, RecommendationClient,
    RecommendationCriteria
)
from staynest.utils.errors import RecommendationError, ValidationError
from config.settings import recommendation_config


pytestmark = pytest.mark.unit


def _criteria(**overrides):
    values = dict(
        location="India",
        check_in_date=date(2031, 3, 1),
        check_out_date=date(2031, 3, 4),
        number_of_guests=2,
    )
    values.update(overrides)
    return RecommendationCriteria(**values)


class TestRecommendationCriteria:

    def test_to_dict(self):
        assert _criteria(location=" Goa ").to_dict() == {
            'location': 'Goa',
            'check_in_date': '2031-03-01',
            'check_out_date': '2031-03-04',
            'number_of_guests': 2,
            'price_range_min': 0.0,
            'price_range_max': None,
        }

    @pytest.mark.parametrize("overrides", [
        {"location": "  "},
        {"check_out_date": date(2031, 3, 1)},
        {"number_of_guests": 0},
        {"price_range_min": 5000, "price_range_max": 1000},
    ])
    def test_invalid(self, overrides):
        with pytest.raises(ValidationError):
            _criteria(**overrides)


class TestHttpRecommendationProvider:

    @pytest.fixture
    def provider(self):
        return HttpRecommendationProvider("https://flows.example.com/recommend", api_key="key-1")

    @staticmethod
    def _response(payload, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = payload
        return response

    @patch('staynest.recommendations.client.requests.post')
    def test_posts_criteria(self, mock_post, provider):
        mock_post.return_value = self._response({"recommendations": [
            {"propertyName": "Sea View", "pricePerNight": "4200", "photoUrl": "https://img/1", "rating": 4.6},
        ]})

        results = provider.recommend(_criteria(), limit=5)

        assert len(results) == 1
        assert results[0].property_name == "Sea View"
        assert results[0].price_per_night == 4200.0
        _, kwargs = mock_post.call_args
        assert kwargs['json']['location'] == "India"
        assert kwargs['headers']['Authorization'] == "Bearer key-1"
        assert kwargs['timeout'] == 15

    @patch('staynest.recommendations.client.requests.post')
    def test_accepts_plain_list_and_limits(self, mock_post, provider):
        mock_post.return_value = self._response([
            {"property_name": f"Listing {i}", "price_per_night": 1000 + i} for i in range(6)
        ])
        results = provider.recommend(_criteria(), limit=3)
        assert [r.property_name for r in results] == ["Listing 0", "Listing 1", "Listing 2"]

    @patch('staynest.recommendations.client.requests.post')
    def test_http_error(self, mock_post, provider):
        response = self._response({}, status_code=503)
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_post.return_value = response

        with pytest.raises(RecommendationError):
            provider.recommend(_criteria(), limit=5)

    @patch('staynest.recommendations.client.requests.post')
    def test_connection_error(self, mock_post, provider):
        mock_post.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(RecommendationError, match="unreachable"):
            provider.recommend(_criteria(), limit=5)

    @patch('staynest.recommendations.client.requests.post')
    def test_unexpected_shape(self, mock_post, provider):
        mock_post.return_value = self._response({"recommendations": "none"})
        with pytest.raises(RecommendationError):
            provider.recommend(_criteria(), limit=5)


class TestLocalRecommendationProvider:

    def test_ranks_by_rating_then_price(self, property_store, client):
        client.update_document("properties", "seed-manali-cabin", {"rating": 4.8, "reviews_count": 3})
        provider = LocalRecommendationProvider(property_store)

        results = provider.recommend(_criteria(), limit=3)

        assert [r.property_id for r in results] == [
            "seed-manali-cabin", "seed-jaipur-haveli-room", "seed-mumbai-loft"
        ]
        assert results[0].photo_url.endswith("manali-1")

    def test_filters(self, property_store):
        provider = LocalRecommendationProvider(property_store)
        results = provider.recommend(_criteria(location="goa", number_of_guests=6), limit=5)
        assert [r.property_id for r in results] == ["seed-goa-beach-villa"]
        assert provider.recommend(_criteria(location="Paris"), limit=5) == []


class TestRecommendationClient:

    def test_local_provider_by_default(self, property_store, monkeypatch):
        monkeypatch.setattr(recommendation_config, "endpoint_url", "")
        client = RecommendationClient(property_store)
        assert client.provider.get_provider_name() == "local"

    def test_http_provider_when_endpoint_configured(self, monkeypatch):
        monkeypatch.setattr(recommendation_config, "endpoint_url", "https://flows.example.com/recommend")
        client = RecommendationClient()
        assert client.provider.get_provider_name() == "http"

    def test_requires_store_without_endpoint(self, monkeypatch):
        monkeypatch.setattr(recommendation_config, "endpoint_url", "")
        with pytest.raises(ValueError):
            RecommendationClient()

    def test_respects_max_results(self):
        provider = Mock()
        provider.recommend.return_value = []
        RecommendationClient(provider=provider, max_results=2).recommend(_criteria())
        assert provider.recommend.call_args[0][1] == 2

    def test_unexpected_failure_wrapped(self):
        provider = Mock()
        provider.recommend.side_effect = KeyError("propertyName")
        with pytest.raises(RecommendationError):
            RecommendationClient(provider=provider).recommend(_criteria())
