"""
Configuration module for the StayNest marketplace.
"""

from .settings import (
    firebase_config, app_config, storage_config, security_config, recommendation_config
)

__all__ = [
    'firebase_config', 'app_config', 'storage_config', 'security_config',
    'recommendation_config'
]
