"""
Listing recommendations for a guest's search criteria.
"""

from .client import (
    RecommendationCriteria, RecommendationProvider, HttpRecommendationProvider,
    LocalRecommendationProvider, RecommendationClient
)

__all__ = [
    'RecommendationCriteria', 'RecommendationProvider', 'HttpRecommendationProvider',
    'LocalRecommendationProvider', 'RecommendationClient'
]
