"""
Auth/session store: realtime mirror of the users collection plus the
current session pointer.
"""
import threading
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Callable

from .local_store import LocalStore
from .observable import Observable
from ..firebase_sync.base import DocumentClient, DocumentSnapshot
from ..security import permissions
from ..security.passwords import hash_password, verify_password
from ..utils.errors import (
    StorageError, ValidationError, NotFoundError, ConflictError,
    EmailAlreadyRegistered, UserNotFound, AccountDisabled, IncorrectPassword
)
from ..utils.logger import get_logger
from ..utils.models import User, UserRole, VerificationStatus, Language, Currency
from config.settings import app_config, storage_config, security_config

# Profile fields a user (or an admin on their behalf) may edit directly
PROFILE_FIELDS = ('name', 'avatar', 'phone', 'language', 'currency')


class AuthStore(Observable):
    """Users roster, login/signup and role-gated account administration."""

    def __init__(
        self,
        client: DocumentClient,
        local_store: LocalStore,
        super_admin_email: Optional[str] = None
    ):
        super().__init__()
        self.logger = get_logger("auth_store")
        self.client = client
        self.local_store = local_store
        self.collection = app_config.users_collection
        email = super_admin_email if super_admin_email is not None else app_config.super_admin_email
        self.super_admin_email = email.strip().lower()

        self.lock = threading.RLock()
        self.loading = True
        self._users: List[User] = []
        self._current_user: Optional[User] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # Lifecycle

    def start(self) -> None:
        """Attach the realtime roster subscription."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.client.subscribe(
            self.collection, self._on_users_snapshot, on_error=self._on_users_error
        )
        self.logger.info("Auth store started")

    def stop(self) -> None:
        """Detach the roster subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            self.logger.info("Auth store stopped")

    def _on_users_snapshot(self, docs: List[DocumentSnapshot]) -> None:
        users = [User.from_dict(doc_id, data) for doc_id, data in docs]
        with self.lock:
            self._users = users
            self.loading = False
        self._resolve_session()
        self._notify()

    def _on_users_error(self, error: Exception) -> None:
        self.logger.error("Error fetching users snapshot", error=str(error))
        with self.lock:
            self.loading = False

    def _resolve_session(self) -> None:
        """Re-resolve the session pointer against the latest roster."""
        session_id = self.local_store.get(storage_config.session_key)
        if not session_id:
            with self.lock:
                self._current_user = None
            return

        user = self.get_user(session_id)
        if user is None or user.is_disabled:
            self.logger.warning("Session user removed or disabled, logging out",
                                user_id=session_id, removed=user is None)
            self._clear_session()
            return

        if self._is_designated_admin(user) and not user.is_super_admin:
            self._elevate_to_super_admin(user)

        with self.lock:
            self._current_user = user

    # Roster reads

    @property
    def users(self) -> List[User]:
        with self.lock:
            return list(self._users)

    @property
    def current_user(self) -> Optional[User]:
        with self.lock:
            return self._current_user

    def get_user(self, user_id: str) -> Optional[User]:
        """Look a user up in the mirrored roster."""
        with self.lock:
            return next((u for u in self._users if u.id == user_id), None)

    def fetch_user(self, user_id: str) -> Optional[User]:
        """Read a user straight from the database."""
        data = self.client.get_document(self.collection, user_id)
        return User.from_dict(user_id, data) if data is not None else None

    def find_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        with self.lock:
            cached = next((u for u in self._users if u.email == email), None)
        if cached is not None:
            return cached
        matches = self.client.find_documents(self.collection, 'email', email)
        return User.from_dict(*matches[0]) if matches else None

    def users_by_verification(self, status=None) -> List[User]:
        """Mirrored users, narrowed to one verification status when given."""
        if status is None:
            return self.users
        status = _coerce_status(status)
        return [u for u in self.users if u.verification_status == status]

    # Session

    def signup(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        start_session: bool = True
    ) -> User:
        """
        Create an account and, unless ``start_session`` is False, log it in.

        Raises:
            ValidationError: missing name or short password
            ConflictError: email reserved for the administrator
            EmailAlreadyRegistered: an account already uses the email
        """
        email = email.strip().lower()
        if not name or not name.strip():
            raise ValidationError("Name is required")
        if len(password or "") < security_config.min_password_length:
            raise ValidationError(
                f"Password must be at least {security_config.min_password_length} characters"
            )
        if self.super_admin_email and email == self.super_admin_email:
            raise ConflictError("This email is reserved. Please use a different email to sign up.")
        if self.find_by_email(email) is not None:
            raise EmailAlreadyRegistered("An account with this email already exists.")

        user = User(
            id=uuid.uuid4().hex,
            name=name.strip(),
            email=email,
            avatar=app_config.avatar_placeholder.format(initial=name.strip()[0].upper()),
            role=UserRole.GUEST,
            verification_status=VerificationStatus.UNVERIFIED,
            password_hash=hash_password(password),
            wishlist=[],
            is_disabled=False,
            phone=phone,
            created_at=datetime.now(timezone.utc),
        )
        self.client.set_document(self.collection, user.id, user.to_dict())
        self.logger.info("User signed up", user_id=user.id)
        if start_session:
            self._start_session(user)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials without touching the session.

        Raises:
            UserNotFound, AccountDisabled, IncorrectPassword
        """
        user = self.find_by_email(email)
        if user is None:
            raise UserNotFound("No account found with this email")
        if user.is_disabled:
            raise AccountDisabled("This account has been disabled")
        if not verify_password(password, user.password_hash):
            raise IncorrectPassword("Incorrect password")
        return user

    def login(self, email: str, password: str) -> User:
        user = self.authenticate(email, password)
        self._start_session(user)
        self.logger.info("User logged in", user_id=user.id)
        return user

    def logout(self) -> None:
        user = self.current_user
        self._clear_session()
        self.logger.info("User logged out", user_id=user.id if user else None)

    def _start_session(self, user: User) -> None:
        self.local_store.set(storage_config.session_key, user.id)
        with self.lock:
            self._current_user = user
        if self._is_designated_admin(user) and not user.is_super_admin:
            self._elevate_to_super_admin(user)
        self._notify()

    def _clear_session(self) -> None:
        self.local_store.remove(storage_config.session_key)
        with self.lock:
            self._current_user = None
        self._notify()

    # Account administration

    def _write(self, action: str, user_id: str, updates: Dict[str, Any]) -> bool:
        """Apply an update; remote failures are logged and reported as False."""
        try:
            self.client.update_document(self.collection, user_id, updates)
            self.logger.info(action, user_id=user_id, fields=sorted(updates))
            return True
        except StorageError as e:
            self.logger.error(f"Failed: {action}", user_id=user_id, error=str(e))
            return False

    def _require_target(self, user_id: str) -> User:
        target = self.fetch_user(user_id)
        if target is None:
            raise NotFoundError(f"User {user_id} not found")
        return target

    def delete_user(self, actor: Optional[User], user_id: str) -> bool:
        permissions.require_super_admin(actor)
        target = self._require_target(user_id)
        if target.is_super_admin:
            self.logger.error("Cannot delete super-admin", user_id=user_id)
            return False
        try:
            self.client.delete_document(self.collection, user_id)
        except StorageError as e:
            self.logger.error("Failed to delete user", user_id=user_id, error=str(e))
            return False
        self.logger.info("User deleted", user_id=user_id, by=actor.id)
        return True

    def submit_for_verification(self, actor: Optional[User], user_id: str, document_url: str) -> bool:
        permissions.require_self_or_admin(actor, user_id)
        if not document_url:
            raise ValidationError("An identity document is required")
        return self._write("Verification submitted", user_id, {
            'verification_status': VerificationStatus.PENDING.value,
            'identity_document_url': document_url,
        })

    def update_verification_status(self, actor: Optional[User], user_id: str, status) -> bool:
        permissions.require_super_admin(actor)
        status = _coerce_status(status)
        updates: Dict[str, Any] = {'verification_status': status.value}
        if status == VerificationStatus.REJECTED:
            updates['identity_document_url'] = None
        return self._write("Verification status updated", user_id, updates)

    def is_in_wishlist(self, property_id: str, actor: Optional[User] = None) -> bool:
        user = actor or self.current_user
        return bool(user and property_id in user.wishlist)

    def toggle_wishlist(self, property_id: str, actor: Optional[User] = None) -> List[str]:
        """
        Add or remove a listing from the user's wishlist.

        Returns:
            The wishlist after the toggle (unchanged when the write failed)
        """
        user = permissions.require_active(actor or self.current_user)
        current = list(dict.fromkeys(user.wishlist))
        if property_id in current:
            wishlist = [pid for pid in current if pid != property_id]
        else:
            wishlist = current + [property_id]

        if not self._write("Wishlist updated", user.id, {'wishlist': wishlist}):
            return current

        with self.lock:
            user.wishlist = wishlist
            if self._current_user is not None and self._current_user.id == user.id:
                self._current_user.wishlist = list(wishlist)
        return wishlist

    def switch_to_host_role(self, actor: Optional[User], user_id: str) -> bool:
        permissions.require_self_or_admin(actor, user_id)
        target = self._require_target(user_id)
        if target.is_super_admin:
            self.logger.warning("Super-admin keeps its role", user_id=user_id)
            return False
        return self._write("Switched to host role", user_id, {'role': UserRole.HOST.value})

    def toggle_user_status(self, actor: Optional[User], user_id: str) -> bool:
        permissions.require_super_admin(actor)
        target = self._require_target(user_id)
        if target.is_super_admin:
            self.logger.error("Cannot disable super-admin", user_id=user_id)
            return False
        disabling = not target.is_disabled
        if not self._write("User status toggled", user_id, {'is_disabled': disabling}):
            return False
        current = self.current_user
        if disabling and current is not None and current.id == user_id:
            self.logout()
        return True

    def update_user(self, actor: Optional[User], user_id: str, data: Dict[str, Any]) -> bool:
        permissions.require_self_or_admin(actor, user_id)
        unknown = set(data) - set(PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        updates = dict(data)
        try:
            if updates.get('language') is not None:
                updates['language'] = Language(updates['language']).value
            if updates.get('currency') is not None:
                updates['currency'] = Currency(updates['currency']).value
        except ValueError as e:
            raise ValidationError(str(e)) from e
        return self._write("User profile updated", user_id, updates)

    # Super-admin

    def _is_designated_admin(self, user: User) -> bool:
        return bool(self.super_admin_email) and user.email == self.super_admin_email

    def _elevate_to_super_admin(self, user: User) -> None:
        other = next((u for u in self.users if u.is_super_admin and u.id != user.id), None)
        if other is not None:
            self.logger.error("Another super-admin already exists, not elevating",
                              user_id=user.id, existing=other.id)
            return
        if self._write("Elevated to super-admin", user.id, {'role': UserRole.SUPER_ADMIN.value}):
            user.role = UserRole.SUPER_ADMIN

    def bootstrap_super_admin(self, name: str, email: str, password: str) -> User:
        """
        Create the single super-admin account, or promote an existing account.

        Raises:
            ConflictError: a different account already holds the role
        """
        email = email.strip().lower()
        if len(password or "") < security_config.min_password_length:
            raise ValidationError(
                f"Password must be at least {security_config.min_password_length} characters"
            )
        admins = [User.from_dict(*doc) for doc in self.client.find_documents(
            self.collection, 'role', UserRole.SUPER_ADMIN.value)]
        if any(admin.email != email for admin in admins):
            raise ConflictError("A super-admin account already exists")

        existing = self.find_by_email(email)
        if existing is not None:
            self.client.update_document(self.collection, existing.id, {
                'role': UserRole.SUPER_ADMIN.value,
                'password_hash': hash_password(password),
                'is_disabled': False,
            })
            existing.role = UserRole.SUPER_ADMIN
            self.logger.info("Existing account promoted to super-admin", user_id=existing.id)
            return existing

        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            avatar=app_config.avatar_placeholder.format(initial=(name or "A")[0].upper()),
            role=UserRole.SUPER_ADMIN,
            verification_status=VerificationStatus.VERIFIED,
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc),
        )
        self.client.set_document(self.collection, user.id, user.to_dict())
        self.logger.info("Super-admin created", user_id=user.id)
        return user


def _coerce_status(value) -> VerificationStatus:
    try:
        return VerificationStatus(value)
    except ValueError as e:
        raise ValidationError(f"Invalid VerificationStatus: {value!r}") from e


__all__ = ['AuthStore', 'PROFILE_FIELDS']
