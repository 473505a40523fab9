"""
Unit tests for preferences and the local key-value store.
"""
import json
from unittest.mock import Mock

import pytest

from staynest.stores import LocalStore, SettingsStore, format_price
from staynest.stores.settings_store import DEFAULT_CURRENCY, DEFAULT_LANGUAGE
from staynest.utils.errors import ValidationError
from staynest.utils.models import Currency, Language
from config.settings import app_config, storage_config


pytestmark = pytest.mark.unit


class TestLocalStore:

    def test_memory_only(self):
        store = LocalStore(path=None)
        store.set("k", "v")
        assert store.get("k") == "v"
        store.remove("k")
        assert store.get("k") is None

    def test_persists_to_file(self, tmp_path):
        path = tmp_path / "state" / "local.json"
        LocalStore(str(path)).set(storage_config.session_key, "user-1")

        assert json.loads(path.read_text()) == {storage_config.session_key: "user-1"}
        assert LocalStore(str(path)).get(storage_config.session_key) == "user-1"

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text("{not json")
        assert LocalStore(str(path)).get("anything") is None


class TestFormatPrice:

    def test_symbols_and_separators(self):
        assert format_price(12500, Currency.INR) == "₹12,500"
        assert format_price(99.5, "USD") == "$99.50"
        assert format_price(1000, Currency.EUR) == "€1,000"


class TestSettingsStore:

    def test_defaults(self, local_store):
        settings = SettingsStore(local_store)
        assert settings.language == Language.EN_IN
        assert settings.currency == Currency.INR
        assert settings.currency_symbol == "₹"
        assert settings.language_name == "English (IN)"

    def test_anonymous_choice_saved_locally(self, local_store):
        settings = SettingsStore(local_store)
        settings.set_currency("USD")
        settings.set_language(Language.ES)

        assert local_store.get(storage_config.currency_key) == "USD"
        assert local_store.get(storage_config.language_key) == "es"
        reloaded = SettingsStore(local_store)
        assert reloaded.currency == Currency.USD
        assert reloaded.format_price(20) == "$20"

    def test_unsupported_values(self, local_store):
        settings = SettingsStore(local_store)
        with pytest.raises(ValidationError):
            settings.set_currency("GBP")
        with pytest.raises(ValidationError):
            settings.set_language("de")

    def test_garbage_in_local_store_falls_back(self, local_store):
        local_store.set(storage_config.currency_key, "XYZ")
        assert SettingsStore(local_store).currency == Currency.INR

    def test_logged_in_choice_saved_on_user(self, auth_store, local_store, guest, client):
        settings = SettingsStore(local_store, auth_store)
        auth_store.login(guest.email, "secret123")

        settings.set_currency(Currency.EUR)

        stored = client.get_document(app_config.users_collection, guest.id)
        assert stored["currency"] == "EUR"
        assert local_store.get(storage_config.currency_key) is None

    def test_follows_user_preferences_on_login(self, auth_store, local_store, make_user):
        traveller = make_user("Traveller", language=Language.FR, currency=Currency.USD)
        settings = SettingsStore(local_store, auth_store)
        listener = Mock()
        settings.subscribe(listener)

        auth_store.login(traveller.email, "secret123")

        assert settings.language == Language.FR
        assert settings.currency == Currency.USD
        listener.assert_called()

    def test_logout_without_local_choice_restores_defaults(self, auth_store, local_store, make_user):
        traveller = make_user("Traveller", language=Language.FR, currency=Currency.USD)
        settings = SettingsStore(local_store, auth_store)
        auth_store.login(traveller.email, "secret123")

        auth_store.logout()

        assert settings.language == DEFAULT_LANGUAGE
        assert settings.currency == DEFAULT_CURRENCY

    def test_logout_keeps_local_choice(self, auth_store, local_store, make_user):
        local_store.set(storage_config.currency_key, "EUR")
        traveller = make_user("Traveller", language=Language.FR, currency=Currency.USD)
        settings = SettingsStore(local_store, auth_store)
        auth_store.login(traveller.email, "secret123")

        auth_store.logout()

        assert settings.currency == Currency.EUR
        assert settings.language == DEFAULT_LANGUAGE
