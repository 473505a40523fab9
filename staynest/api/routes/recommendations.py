"""
AI recommendation endpoint.
"""
from fastapi import APIRouter, Depends
from ..models import ListResponse, ErrorResponse, RecommendationRequest
from ..dependencies import get_recommendation_client
from ...recommendations import RecommendationClient, RecommendationCriteria

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post(
    "",
    response_model=ListResponse,
    summary="Suggest listings",
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def recommend(
    req: RecommendationRequest,
    client: RecommendationClient = Depends(get_recommendation_client)
):
    criteria = RecommendationCriteria(**req.model_dump())
    results = client.recommend(criteria)
    return {
        "success": True,
        "message": f"{len(results)} recommendations",
        "data": [summary.to_dict() for summary in results],
    }
