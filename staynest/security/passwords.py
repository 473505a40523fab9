"""
Salted PBKDF2 password hashing.

Stored format: ``pbkdf2_sha256$<iterations>$<salt b64>$<hash b64>``.
"""
import base64
import hashlib
import hmac
import os
from typing import Optional

from config.settings import security_config

ALGORITHM = "pbkdf2_sha256"


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations, dklen=32)


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    iterations = iterations or security_config.password_iterations
    salt = os.urandom(16)
    digest = _derive(password, salt, iterations)
    return "$".join([
        ALGORITHM,
        str(iterations),
        base64.b64encode(salt).decode(),
        base64.b64encode(digest).decode(),
    ])


def verify_password(password: str, encoded: Optional[str]) -> bool:
    if not encoded:
        return False
    try:
        algorithm, iterations, salt_b64, digest_b64 = encoded.split("$")
        salt, expected = base64.b64decode(salt_b64), base64.b64decode(digest_b64)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    actual = _derive(password, salt, rounds)
    return hmac.compare_digest(expected, actual)
