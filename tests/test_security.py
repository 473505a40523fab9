"""
Tests for password hashing, session tokens and capability checks.
"""
import base64
from unittest.mock import patch

import pytest

from staynest.security import TokenError, create_token, hash_password, verify_password, verify_token
from staynest.security import permissions
from staynest.utils.errors import Unauthorized, VerificationRequired
from staynest.utils.models import HostSummary, Property, User, UserRole, VerificationStatus


pytestmark = pytest.mark.unit


class TestPasswords:

    def test_hash_and_verify(self):
        encoded = hash_password("secret123")
        assert encoded.startswith("pbkdf2_sha256$1000$")
        assert "secret123" not in encoded
        assert verify_password("secret123", encoded) is True
        assert verify_password("secret124", encoded) is False

    def test_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    @pytest.mark.parametrize("encoded", [None, "", "plain-text", "md5$1$abc$def", "pbkdf2_sha256$x$AA==$AA=="])
    def test_malformed_hash(self, encoded):
        assert verify_password("secret123", encoded) is False


class TestTokens:

    def test_round_trip(self):
        token = create_token({"sub": "user-1"}, secret="s3cret")
        payload = verify_token(token, secret="s3cret")
        assert payload["sub"] == "user-1"
        assert payload["exp"] > payload["iat"]

    def test_wrong_secret(self):
        token = create_token({"sub": "user-1"}, secret="s3cret")
        with pytest.raises(ValueError, match="signature"):
            verify_token(token, secret="other")

    def test_tampered_payload(self):
        header, _, signature = create_token({"sub": "user-1"}).split(".")
        forged = create_token({"sub": "admin"}).split(".")[1]
        with pytest.raises(ValueError):
            verify_token(f"{header}.{forged}.{signature}")

    def test_expired(self):
        token = create_token({"sub": "user-1"}, exp_seconds=60)
        with patch("staynest.security.tokens.time.time", return_value=10 ** 11):
            with pytest.raises(ValueError, match="expired"):
                verify_token(token)

    def test_garbage(self):
        with pytest.raises(TokenError, match="format"):
            verify_token("not-a-token")

    def test_unsigned_algorithm_rejected(self):
        _, payload, signature = create_token({"sub": "user-1"}).split(".")
        none_header = base64.urlsafe_b64encode(b'{"alg":"none"}').rstrip(b"=").decode()
        with pytest.raises(TokenError, match="algorithm"):
            verify_token(f"{none_header}.{payload}.{signature}")


def _user(user_id="u1", role=UserRole.GUEST, verified=True, disabled=False):
    return User(
        id=user_id, name=user_id, email=f"{user_id}@example.com", role=role,
        verification_status=VerificationStatus.VERIFIED if verified else VerificationStatus.UNVERIFIED,
        is_disabled=disabled,
    )


def _listing(host_id="h1"):
    return Property(
        id="p1", name="Test Listing", description="A place to stay for testing.",
        location="Goa", price_per_night=1000, host=HostSummary(id=host_id, name="Host"),
    )


class TestPermissions:

    def test_login_required(self):
        with pytest.raises(Unauthorized, match="Login"):
            permissions.require_active(None)

    def test_disabled_account(self):
        with pytest.raises(Unauthorized, match="disabled"):
            permissions.require_active(_user(disabled=True))

    def test_super_admin(self):
        admin = _user("root", role=UserRole.SUPER_ADMIN)
        assert permissions.require_super_admin(admin) is admin
        with pytest.raises(Unauthorized):
            permissions.require_super_admin(_user(role=UserRole.HOST))

    def test_self_or_admin(self):
        permissions.require_self_or_admin(_user("u1"), "u1")
        permissions.require_self_or_admin(_user("root", role=UserRole.SUPER_ADMIN), "u1")
        with pytest.raises(Unauthorized):
            permissions.require_self_or_admin(_user("u2"), "u1")

    def test_host(self):
        permissions.require_host(_user(role=UserRole.HOST))
        with pytest.raises(Unauthorized):
            permissions.require_host(_user())

    def test_property_owner(self):
        listing = _listing("h1")
        permissions.require_property_owner(_user("h1", role=UserRole.HOST), listing)
        with pytest.raises(Unauthorized):
            permissions.require_property_owner(_user("h2", role=UserRole.HOST), listing)

    def test_can_book(self):
        listing = _listing("h1")
        permissions.require_can_book(_user("g1"), listing)
        with pytest.raises(VerificationRequired):
            permissions.require_can_book(_user("g1", verified=False), listing)
        with pytest.raises(Unauthorized, match="own property"):
            permissions.require_can_book(_user("h1", role=UserRole.HOST), listing)

    def test_can_inquire(self):
        with pytest.raises(Unauthorized):
            permissions.require_can_inquire(_user("h1"), _listing("h1"))
        permissions.require_can_inquire(_user("g1", verified=False), _listing("h1"))
