"""
Unit tests for the auth/session store.
"""
from unittest.mock import Mock

import pytest

from staynest.stores import AuthStore, LocalStore
from staynest.utils.errors import (
    AccountDisabled, ConflictError, EmailAlreadyRegistered, IncorrectPassword,
    NotFoundError, StorageError, Unauthorized, UserNotFound, ValidationError
)
from staynest.utils.models import UserRole, VerificationStatus, Language, Currency
from config.settings import app_config, storage_config

pytestmark = pytest.mark.unit

ADMIN_EMAIL = "admin@staynest.test"


class TestSignupAndLogin:

    def test_signup_starts_session(self, auth_store, local_store):
        user = auth_store.signup("Priya Shah", "Priya@Example.com", "secret123")

        assert user.email == "priya@example.com"
        assert user.role == UserRole.GUEST
        assert user.verification_status == VerificationStatus.UNVERIFIED
        assert user.avatar.endswith("text=P")
        assert user.password_hash and "secret123" not in user.password_hash
        assert auth_store.current_user.id == user.id
        assert local_store.get(storage_config.session_key) == user.id
        assert auth_store.get_user(user.id) is not None

    def test_signup_without_session(self, auth_store):
        auth_store.signup("Priya Shah", "priya@example.com", "secret123", start_session=False)
        assert auth_store.current_user is None

    def test_duplicate_email(self, auth_store):
        auth_store.signup("Priya Shah", "priya@example.com", "secret123")
        with pytest.raises(EmailAlreadyRegistered):
            auth_store.signup("Someone Else", "PRIYA@example.com", "secret456")

    def test_reserved_admin_email(self, auth_store):
        with pytest.raises(ConflictError):
            auth_store.signup("Sneaky", ADMIN_EMAIL, "secret123")

    @pytest.mark.parametrize("name,password", [("", "secret123"), ("Priya", "short")])
    def test_invalid_signup(self, auth_store, name, password):
        with pytest.raises(ValidationError):
            auth_store.signup(name, "priya@example.com", password)

    def test_login_and_logout(self, auth_store, guest, local_store):
        user = auth_store.login(guest.email, "secret123")
        assert auth_store.current_user.id == guest.id == user.id

        auth_store.logout()
        assert auth_store.current_user is None
        assert local_store.get(storage_config.session_key) is None

    def test_login_errors(self, auth_store, make_user):
        make_user("Blocked", is_disabled=True)
        make_user("Member")

        with pytest.raises(UserNotFound):
            auth_store.login("nobody@example.com", "secret123")
        with pytest.raises(AccountDisabled):
            auth_store.login("blocked@example.com", "secret123")
        with pytest.raises(IncorrectPassword):
            auth_store.login("member@example.com", "wrong-password")
        assert auth_store.current_user is None

    def test_session_restored_from_local_store(self, client, guest):
        local_store = LocalStore(path=None)
        local_store.set(storage_config.session_key, guest.id)
        store = AuthStore(client, local_store, super_admin_email=ADMIN_EMAIL)
        store.start()
        try:
            assert store.current_user.id == guest.id
        finally:
            store.stop()


class TestSessionResolution:

    def test_disabled_user_is_logged_out(self, auth_store, guest, admin, local_store):
        auth_store.login(guest.email, "secret123")
        assert auth_store.toggle_user_status(admin, guest.id) is True

        assert auth_store.current_user is None
        assert local_store.get(storage_config.session_key) is None

    def test_deleted_user_is_logged_out(self, auth_store, guest, admin):
        auth_store.login(guest.email, "secret123")
        auth_store.delete_user(admin, guest.id)
        assert auth_store.current_user is None

    def test_designated_email_elevated_on_login(self, auth_store, make_user, client):
        promoted = make_user("Owner", email=ADMIN_EMAIL)
        auth_store.login(ADMIN_EMAIL, "secret123")
        assert client.get_document(app_config.users_collection, promoted.id)["role"] == UserRole.SUPER_ADMIN.value
        assert auth_store.current_user.is_super_admin

    def test_no_second_super_admin(self, auth_store, admin, make_user, client):
        impostor = make_user("Impostor", email="other@example.com")
        store = AuthStore(client, LocalStore(path=None), super_admin_email="other@example.com")
        store.start()
        try:
            store.login("other@example.com", "secret123")
            assert store.current_user.role == UserRole.GUEST
            assert client.get_document(app_config.users_collection, impostor.id)["role"] == UserRole.GUEST.value
        finally:
            store.stop()

    def test_listeners_notified_on_roster_change(self, auth_store, make_user):
        listener = Mock()
        unsubscribe = auth_store.subscribe(listener)
        make_user("Newcomer")
        unsubscribe()
        make_user("Latecomer")
        listener.assert_called_once()


class TestWishlist:

    def test_toggle_adds_then_removes(self, auth_store, guest):
        auth_store.login(guest.email, "secret123")

        assert auth_store.toggle_wishlist("p1") == ["p1"]
        assert auth_store.is_in_wishlist("p1") is True
        assert auth_store.toggle_wishlist("p1") == []
        assert auth_store.is_in_wishlist("p1") is False

    def test_toggle_twice_restores_original(self, auth_store, client, make_user):
        user = make_user("Collector", wishlist=["a", "b"])
        auth_store.toggle_wishlist("c", actor=user)
        wishlist = auth_store.toggle_wishlist("c", actor=user)

        assert wishlist == ["a", "b"]
        assert client.get_document(app_config.users_collection, user.id)["wishlist"] == ["a", "b"]

    def test_requires_login(self, auth_store):
        with pytest.raises(Unauthorized):
            auth_store.toggle_wishlist("p1")

    def test_failed_write_keeps_wishlist(self, auth_store, guest, monkeypatch):
        monkeypatch.setattr(auth_store.client, "update_document", Mock(side_effect=StorageError("down")))
        assert auth_store.toggle_wishlist("p1", actor=guest) == []


class TestAdministration:

    def test_super_admin_cannot_be_deleted_or_disabled(self, auth_store, admin, client):
        assert auth_store.delete_user(admin, admin.id) is False
        assert auth_store.toggle_user_status(admin, admin.id) is False
        stored = client.get_document(app_config.users_collection, admin.id)
        assert stored is not None
        assert stored["is_disabled"] is False

    def test_super_admin_keeps_role(self, auth_store, admin, client):
        assert auth_store.switch_to_host_role(admin, admin.id) is False
        assert client.get_document(app_config.users_collection, admin.id)["role"] == UserRole.SUPER_ADMIN.value

    def test_admin_only_operations(self, auth_store, guest, host):
        with pytest.raises(Unauthorized):
            auth_store.delete_user(host, guest.id)
        with pytest.raises(Unauthorized):
            auth_store.toggle_user_status(guest, host.id)
        with pytest.raises(Unauthorized):
            auth_store.update_verification_status(guest, guest.id, VerificationStatus.VERIFIED)

    def test_toggle_status_twice(self, auth_store, admin, guest, client):
        auth_store.toggle_user_status(admin, guest.id)
        assert client.get_document(app_config.users_collection, guest.id)["is_disabled"] is True
        auth_store.toggle_user_status(admin, guest.id)
        assert client.get_document(app_config.users_collection, guest.id)["is_disabled"] is False

    def test_unknown_user(self, auth_store, admin):
        with pytest.raises(NotFoundError):
            auth_store.delete_user(admin, "missing")

    def test_verification_flow(self, auth_store, admin, make_user):
        applicant = make_user("Applicant", verified=False)
        assert auth_store.submit_for_verification(applicant, applicant.id, "data:image/png;base64,AAAA")
        assert auth_store.get_user(applicant.id) in auth_store.users_by_verification(VerificationStatus.PENDING)

        auth_store.update_verification_status(admin, applicant.id, "rejected")
        rejected = auth_store.get_user(applicant.id)
        assert rejected.verification_status == VerificationStatus.REJECTED
        assert rejected.identity_document_url is None

        auth_store.submit_for_verification(applicant, applicant.id, "data:image/png;base64,BBBB")
        auth_store.update_verification_status(admin, applicant.id, VerificationStatus.VERIFIED)
        assert auth_store.get_user(applicant.id) in auth_store.users_by_verification("verified")
        assert auth_store.get_user(applicant.id) not in auth_store.users_by_verification("pending")

    def test_unknown_verification_status(self, auth_store, admin, guest):
        with pytest.raises(ValidationError, match="VerificationStatus"):
            auth_store.update_verification_status(admin, guest.id, "approved")
        with pytest.raises(ValidationError):
            auth_store.users_by_verification("approved")
        assert auth_store.get_user(guest.id).verification_status == VerificationStatus.VERIFIED

    def test_cannot_submit_for_someone_else(self, auth_store, guest, host):
        with pytest.raises(Unauthorized):
            auth_store.submit_for_verification(guest, host.id, "doc")

    def test_switch_to_host(self, auth_store, guest):
        assert auth_store.switch_to_host_role(guest, guest.id) is True
        assert auth_store.get_user(guest.id).role == UserRole.HOST

    def test_update_profile(self, auth_store, guest):
        assert auth_store.update_user(guest, guest.id, {"name": "Renamed", "language": "fr", "currency": "EUR"})
        updated = auth_store.get_user(guest.id)
        assert updated.name == "Renamed"
        assert updated.language == Language.FR
        assert updated.currency == Currency.EUR

    @pytest.mark.parametrize("data", [{"role": "super-admin"}, {"currency": "GBP"}])
    def test_update_profile_rejects(self, auth_store, guest, data):
        with pytest.raises(ValidationError):
            auth_store.update_user(guest, guest.id, data)


class TestBootstrapSuperAdmin:

    def test_creates_admin(self, auth_store, client):
        admin = auth_store.bootstrap_super_admin("Root", ADMIN_EMAIL, "secret123")
        assert admin.is_super_admin
        assert admin.is_verified
        assert auth_store.authenticate(ADMIN_EMAIL, "secret123").id == admin.id

    def test_promotes_existing_account(self, auth_store, make_user):
        existing = make_user("Owner", email=ADMIN_EMAIL)
        admin = auth_store.bootstrap_super_admin("Owner", ADMIN_EMAIL, "newpass123")
        assert admin.id == existing.id
        assert auth_store.authenticate(ADMIN_EMAIL, "newpass123").is_super_admin

    def test_refuses_second_admin(self, auth_store, admin):
        with pytest.raises(ConflictError):
            auth_store.bootstrap_super_admin("Other", "other@example.com", "secret123")
