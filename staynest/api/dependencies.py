"""
Dependency injection and service container for FastAPI application.
"""
from typing import Optional

from fastapi import Request

from ..firebase_sync import DocumentClient, create_document_client
from ..recommendations import RecommendationClient, RecommendationProvider
from ..stores import LocalStore, AuthStore, PropertyStore
from ..utils.errors import AuthenticationError, StorageError
from ..utils.logger import setup_logger
from ..utils.models import User
from .config import settings


_logger = None


def get_logger():
    """Get application logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger("staynest", settings.log_level)
    return _logger


class ServiceContainer:
    """
    Owns the document client and the stores built on it.

    The API serves many users at once, so the local store is memory-only and
    the auth store's process session is never used: every request carries
    its own actor, resolved from the bearer token.
    """

    def __init__(
        self,
        client: Optional[DocumentClient] = None,
        recommendation_provider: Optional[RecommendationProvider] = None,
        seed_on_start: Optional[bool] = None
    ):
        self.client = client or create_document_client()
        self.local_store = LocalStore(path=None)
        self.auth_store = AuthStore(self.client, self.local_store)
        self.property_store = PropertyStore(self.client, seed_on_start=seed_on_start)
        self.recommendations = RecommendationClient(
            self.property_store, provider=recommendation_provider
        )
        self.started = False

    def start(self) -> None:
        logger = get_logger()
        if self.started:
            return
        if not self.client.initialize():
            logger.error("Document client failed to initialize, serving empty mirrors")
        try:
            self.auth_store.start()
        except StorageError as e:
            logger.error("Failed to subscribe to users", error=str(e))
        self.property_store.start()
        self.started = True
        logger.info("Services started")

    def stop(self) -> None:
        if not self.started:
            return
        self.auth_store.stop()
        self.property_store.stop()
        self.started = False
        get_logger().info("Services stopped")


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_auth_store(request: Request) -> AuthStore:
    return get_container(request).auth_store


def get_property_store(request: Request) -> PropertyStore:
    return get_container(request).property_store


def get_recommendation_client(request: Request) -> RecommendationClient:
    return get_container(request).recommendations


def get_optional_user(request: Request) -> Optional[User]:
    """The caller's account when the request carries a valid token."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        return None
    auth_store = get_auth_store(request)
    return auth_store.get_user(user_id) or auth_store.fetch_user(user_id)


def get_current_user(request: Request) -> User:
    """
    The authenticated caller.

    Raises:
        AuthenticationError: missing token, deleted or disabled account
    """
    user = get_optional_user(request)
    if user is None:
        raise AuthenticationError("Authentication required")
    if user.is_disabled:
        raise AuthenticationError("This account has been disabled")
    return user
