"""
Signed session tokens for the HTTP API.

Compact ``header.payload.signature`` tokens signed with HMAC-SHA256. The
payload's ``sub`` is the user id; ``exp`` bounds the session lifetime.
"""
import time
import hmac
import json
import base64
import hashlib
from typing import Dict, Any, Optional

from config.settings import security_config

HEADER = {"alg": "HS256", "typ": "JWT"}


class TokenError(ValueError):
    """Token is malformed, forged or expired."""


def _encode_segment(obj: Dict[str, Any]) -> str:
    raw = json.dumps(obj, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _decode_bytes(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + '=' * (-len(segment) % 4))


def _signature(header_b64: str, payload_b64: str, secret: str) -> bytes:
    return hmac.new(secret.encode(), f"{header_b64}.{payload_b64}".encode(), hashlib.sha256).digest()


def create_token(payload: Dict[str, Any], exp_seconds: Optional[int] = None,
                 secret: Optional[str] = None) -> str:
    """Sign ``payload``, adding ``iat`` and ``exp`` unless the caller set them."""
    now = int(time.time())
    body = {
        "iat": now,
        "exp": now + int(exp_seconds or security_config.token_ttl_seconds),
        **payload,
    }
    header_b64 = _encode_segment(HEADER)
    payload_b64 = _encode_segment(body)
    sig = _signature(header_b64, payload_b64, secret or security_config.token_secret)
    return f"{header_b64}.{payload_b64}.{base64.urlsafe_b64encode(sig).rstrip(b'=').decode()}"


def verify_token(token: str, secret: Optional[str] = None) -> Dict[str, Any]:
    """
    Check the signature and expiry and return the payload.

    Raises:
        TokenError: malformed token, bad signature or expired
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise TokenError("Invalid token format")
    header_b64, payload_b64, sig_b64 = parts

    try:
        header = json.loads(_decode_bytes(header_b64))
        given = _decode_bytes(sig_b64)
    except ValueError:
        raise TokenError("Invalid token format")
    if not isinstance(header, dict) or header.get("alg") != HEADER["alg"]:
        raise TokenError("Unsupported token algorithm")

    expected = _signature(header_b64, payload_b64, secret or security_config.token_secret)
    if not hmac.compare_digest(expected, given):
        raise TokenError("Invalid token signature")

    payload = json.loads(_decode_bytes(payload_b64))
    if int(time.time()) >= int(payload.get("exp", 0)):
        raise TokenError("Token expired")
    return payload
