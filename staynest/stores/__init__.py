"""
Application stores: realtime mirrors of the remote collections plus the
command interface that mutates them.
"""

from .local_store import LocalStore
from .auth_store import AuthStore
from .property_store import PropertyStore
from .settings_store import SettingsStore, format_price, CURRENCY_SYMBOLS, LANGUAGE_NAMES

__all__ = [
    'LocalStore', 'AuthStore', 'PropertyStore', 'SettingsStore', 'format_price',
    'CURRENCY_SYMBOLS', 'LANGUAGE_NAMES'
]
