"""
Application factory for the StayNest HTTP API: error mapping, bearer resolution and routers.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import ServiceContainer, get_logger
from .models import ErrorResponse
from .routes import (
    auth, bookings, health, inquiries, properties, recommendations, preferences, users
)
from ..security.tokens import TokenError, verify_token
from ..utils.errors import (
    MarketplaceError, Unauthorized, AuthenticationError, NotFoundError, ConflictError,
    ValidationError, RecommendationError
)

# Most specific class first
ERROR_STATUS_CODES = (
    (Unauthorized, 403),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 422),
    (RecommendationError, 502),
)

RECOMMENDATION_FAILURE_MESSAGE = "Could not get recommendations right now. Please try again later."


def status_code_for(exc: MarketplaceError) -> int:
    for error_cls, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_cls):
            return status_code
    return 500


def _error_body(message: str, error_code: str, details=None) -> dict:
    return ErrorResponse(
        success=False,
        message=message,
        error_code=error_code,
        details=details or None
    ).model_dump()


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the StayNest API around a service container.

    Args:
        container: Services to serve; built from configuration when omitted

    Returns:
        FastAPI app; the container is started by its lifespan
    """
    logger = get_logger()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the store subscriptions on startup and drop them on shutdown."""
        logger.info("Starting StayNest API",
                    environment=settings.environment, version=settings.app_version)
        if getattr(app.state, "container", None) is None:
            app.state.container = ServiceContainer()
        app.state.container.start()
        yield
        logger.info("Stopping StayNest API")
        app.state.container.stop()

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        status_code = status_code_for(exc)
        if isinstance(exc, RecommendationError):
            logger.error("Recommendation failure", path=request.url.path, error=exc.message)
            return JSONResponse(
                status_code=status_code,
                content=_error_body(RECOMMENDATION_FAILURE_MESSAGE, exc.error_code)
            )
        if status_code == 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        else:
            logger.warning("Request rejected", path=request.url.path,
                           status_code=status_code, error=exc.message)
        return JSONResponse(
            status_code=status_code,
            content=_error_body(exc.message, exc.error_code, exc.details)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Anything not raised as a MarketplaceError is a 500."""
        logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal server error", "INTERNAL_ERROR", {"error": str(exc)})
        )

    @app.middleware("http")
    async def auth_middleware(request: Request, call_next):
        """Resolve an optional bearer token; routes decide whether a user is required."""
        request.state.user_id = None
        auth_header = request.headers.get("Authorization", "")
        if request.method != "OPTIONS" and auth_header:
            if not auth_header.startswith("Bearer "):
                return JSONResponse(status_code=401, content=_error_body("Unauthorized", "UNAUTHORIZED"))
            token = auth_header.split(" ", 1)[1]
            try:
                payload = verify_token(token)
            except TokenError as e:
                return JSONResponse(
                    status_code=401,
                    content=_error_body("Invalid token", "UNAUTHORIZED", {"error": str(e)})
                )
            request.state.user_id = payload.get("sub")
        return await call_next(request)

    # All routers share the versioned prefix
    for module in (health, auth, users, properties, bookings, inquiries, preferences, recommendations):
        app.include_router(module.router, prefix=settings.versioned_prefix)

    @app.get("/")
    async def root():
        """Service banner."""
        return {
            "message": "StayNest API is running",
            "version": settings.app_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs"
        }

    return app
