"""
HTTP API for the marketplace.
"""

from .app import create_app
from .dependencies import ServiceContainer

__all__ = ["create_app", "ServiceContainer"]
