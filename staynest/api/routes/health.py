"""
Liveness probe for the API process and its Firestore mirrors.
"""
from fastapi import APIRouter, Depends
from ..config import settings
from ..dependencies import ServiceContainer, get_container
from ..models import HealthResponse


router = APIRouter(prefix="/health", tags=["health"])


def _mirror_state(store) -> str:
    return "loading" if store.loading else "ready"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Report whether the user and property mirrors have received their first snapshot",
    responses={200: {"description": "Process is up; see dependencies for mirror state"}}
)
async def health_check(container: ServiceContainer = Depends(get_container)) -> HealthResponse:
    mirrors = {
        "users": _mirror_state(container.auth_store),
        "properties": _mirror_state(container.property_store),
    }
    status = "healthy" if all(state == "ready" for state in mirrors.values()) else "starting"
    return HealthResponse(status=status, version=settings.app_version, dependencies=mirrors)
