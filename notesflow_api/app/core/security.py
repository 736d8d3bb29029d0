"""
Tokens, password hashes and role checks for NotesFlow.

Bearer tokens are compact HS256 JWTs signed with ``settings.secret_key``
and built with the standard library.  Their claims are ``sub`` (an
admin's e‑mail or a student's USN), ``role`` and ``exp``.

Two roles exist: ``admin`` manages the hierarchy and the student roster,
``student`` reads its own dashboard.  Reading the hierarchy needs no
token at all.

Admin passwords are stored as ``"<salt hex>$<PBKDF2-SHA256 hex>"``.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings

ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"
ROLES = frozenset({ROLE_ADMIN, ROLE_STUDENT})

PBKDF2_ITERATIONS = 100_000

_JWT_HEADER = {"alg": "HS256", "typ": "JWT"}


def _encode_segment(obj: Dict[str, Any]) -> str:
    raw = json.dumps(obj, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_bytes(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _signature(signing_input: str) -> bytes:
    key = settings.secret_key.encode("utf-8")
    return hmac.new(key, signing_input.encode("ascii"), hashlib.sha256).digest()


def create_access_token(data: Dict[str, str], expires_delta: Optional[int] = None) -> str:
    """Sign ``data`` into a bearer token.

    ``expires_delta`` is the lifetime in seconds; it defaults to
    ``ACCESS_TOKEN_EXPIRE_MINUTES``.  A negative value yields a token
    that is already expired.
    """
    lifetime = expires_delta or settings.access_token_expire_minutes * 60
    claims = {**data, "exp": int(time.time()) + lifetime}
    signing_input = f"{_encode_segment(_JWT_HEADER)}.{_encode_segment(claims)}"
    signature = base64.urlsafe_b64encode(_signature(signing_input)).rstrip(b"=").decode("ascii")
    return f"{signing_input}.{signature}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid, unexpired token, else ``None``."""
    signing_input, _, signature = token.rpartition(".")
    if signing_input.count(".") != 1:
        return None
    try:
        if not hmac.compare_digest(_signature(signing_input), _decode_bytes(signature)):
            return None
        claims = json.loads(_decode_bytes(signing_input.split(".", 1)[1]))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(claims, dict):
        return None
    try:
        expires_at = int(claims["exp"])
    except (KeyError, TypeError, ValueError):
        return None
    return claims if expires_at >= int(time.time()) else None


bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """Resolve the bearer token into its claims.

    401 when the header is missing, the token does not verify, has
    expired or names an unknown role.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    claims = decode_access_token(credentials.credentials)
    if not claims or claims.get("role") not in ROLES:
        raise _unauthorized("Invalid or expired token")
    return claims


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Dependency factory: 403 unless the caller has one of ``roles``.

    Example: ``Depends(require_roles(ROLE_ADMIN))``.
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("role") not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return _role_dependency


def _pbkdf2(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)


def hash_password(password: str) -> str:
    """Hash ``password`` with a fresh 16-byte salt."""
    salt = os.urandom(16)
    return f"{salt.hex()}${_pbkdf2(password, salt).hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        salt_hex, digest_hex = hashed_password.split("$", 1)
        salt, expected = bytes.fromhex(salt_hex), bytes.fromhex(digest_hex)
    except ValueError:
        return False
    return hmac.compare_digest(_pbkdf2(plain_password, salt), expected)
