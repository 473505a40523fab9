"""
Language and currency preference.

Anonymous visitors keep their choice in the local store; a logged-in
user's choice lives on their user document.
"""
from typing import Optional, Union

from .auth_store import AuthStore
from .local_store import LocalStore
from .observable import Observable
from ..utils.errors import ValidationError
from ..utils.logger import get_logger
from ..utils.models import Currency, Language
from config.settings import storage_config

CURRENCY_SYMBOLS = {
    Currency.INR: '₹',
    Currency.USD: '$',
    Currency.EUR: '€',
}

LANGUAGE_NAMES = {
    Language.EN_IN: 'English (IN)',
    Language.ES: 'Español',
    Language.FR: 'Français',
}

DEFAULT_LANGUAGE = Language.EN_IN
DEFAULT_CURRENCY = Currency.INR


def format_price(amount: float, currency: Union[Currency, str] = DEFAULT_CURRENCY) -> str:
    """Render an amount with its currency symbol and thousands separators."""
    symbol = CURRENCY_SYMBOLS[Currency(currency)]
    if float(amount).is_integer():
        return f"{symbol}{int(amount):,}"
    return f"{symbol}{amount:,.2f}"


def _parse(enum_cls, value: Optional[str]):
    try:
        return enum_cls(value) if value else None
    except ValueError:
        return None


class SettingsStore(Observable):
    """Process-wide language/currency preference."""

    def __init__(self, local_store: LocalStore, auth_store: Optional[AuthStore] = None):
        super().__init__()
        self.logger = get_logger("settings_store")
        self.local_store = local_store
        self.auth_store = auth_store
        self.language: Language = DEFAULT_LANGUAGE
        self.currency: Currency = DEFAULT_CURRENCY
        self._load()
        if auth_store is not None:
            auth_store.subscribe(self._load)

    def _load(self) -> None:
        user = self.auth_store.current_user if self.auth_store else None
        if user is not None:
            language, currency = user.language, user.currency
        else:
            language = _parse(Language, self.local_store.get(storage_config.language_key))
            currency = _parse(Currency, self.local_store.get(storage_config.currency_key))
        language = language or DEFAULT_LANGUAGE
        currency = currency or DEFAULT_CURRENCY
        changed = (language, currency) != (self.language, self.currency)
        self.language, self.currency = language, currency
        if changed:
            self._notify()

    @property
    def currency_symbol(self) -> str:
        return CURRENCY_SYMBOLS[self.currency]

    @property
    def language_name(self) -> str:
        return LANGUAGE_NAMES[self.language]

    def format_price(self, amount: float) -> str:
        return format_price(amount, self.currency)

    def set_language(self, language: Union[Language, str]) -> None:
        language = _parse(Language, language)
        if language is None:
            raise ValidationError("Unsupported language")
        self.language = language
        self._persist('language', storage_config.language_key, language.value)

    def set_currency(self, currency: Union[Currency, str]) -> None:
        currency = _parse(Currency, currency)
        if currency is None:
            raise ValidationError("Unsupported currency")
        self.currency = currency
        self._persist('currency', storage_config.currency_key, currency.value)

    def _persist(self, field: str, local_key: str, value: str) -> None:
        user = self.auth_store.current_user if self.auth_store else None
        if user is not None:
            self.auth_store.update_user(user, user.id, {field: value})
        else:
            self.local_store.set(local_key, value)
        self.logger.info("Preference updated", field=field, value=value,
                         user_id=user.id if user else None)
        self._notify()
