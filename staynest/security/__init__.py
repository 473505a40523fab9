"""
Credential hashing, session tokens and capability checks.
"""

from .passwords import hash_password, verify_password
from .tokens import create_token, verify_token, TokenError

__all__ = ['hash_password', 'verify_password', 'create_token', 'verify_token', 'TokenError']
