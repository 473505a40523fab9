"""
Shared fixtures: an in-memory document database with started stores.
"""
import uuid
from datetime import date, timedelta

import pytest

from staynest.firebase_sync import MemoryDocumentClient
from staynest.security.passwords import hash_password
from staynest.stores import LocalStore, AuthStore, PropertyStore
from staynest.utils.models import User, UserRole, VerificationStatus
from config.settings import app_config, security_config

ADMIN_EMAIL = "admin@staynest.test"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Keep PBKDF2 cheap so signup-heavy tests stay fast."""
    monkeypatch.setattr(security_config, "password_iterations", 1000)


@pytest.fixture
def client():
    client = MemoryDocumentClient()
    client.initialize()
    return client


@pytest.fixture
def local_store():
    return LocalStore(path=None)


@pytest.fixture
def auth_store(client, local_store):
    store = AuthStore(client, local_store, super_admin_email=ADMIN_EMAIL)
    store.start()
    yield store
    store.stop()


@pytest.fixture
def property_store(client):
    store = PropertyStore(client, seed_on_start=True)
    store.start()
    yield store
    store.stop()


@pytest.fixture
def make_user(client):
    """Write a user document directly and return the model."""
    def _make_user(name="Guest", role=UserRole.GUEST, verified=True, password="secret123", **fields):
        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=fields.pop("email", f"{name.lower().replace(' ', '.')}@example.com"),
            role=role,
            verification_status=VerificationStatus.VERIFIED if verified else VerificationStatus.UNVERIFIED,
            password_hash=hash_password(password),
            **fields,
        )
        client.set_document(app_config.users_collection, user.id, user.to_dict())
        return user
    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("Admin", role=UserRole.SUPER_ADMIN, email=ADMIN_EMAIL)


@pytest.fixture
def host(make_user):
    return make_user("Host", role=UserRole.HOST)


@pytest.fixture
def guest(make_user):
    return make_user("Guest")


@pytest.fixture
def past_stay():
    """Check-in/check-out pair that ended last week."""
    check_out = date.today() - timedelta(days=7)
    return check_out - timedelta(days=3), check_out


@pytest.fixture
def future_stay():
    check_in = date.today() + timedelta(days=30)
    return check_in, check_in + timedelta(days=3)
