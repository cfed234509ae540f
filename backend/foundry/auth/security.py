"""
Foundry — Password Hashing and JWT Tokens
==========================================

What:  The two cryptographic primitives the auth layer needs.
How:   Password hashing is delegated to argon2-cffi's PasswordHasher; token
       signing and validation are delegated to PyJWT. This module only
       adapts their APIs and converts their failures into AuthenticationError.
Who:   UserService (hashing), access routes (token creation) and
       get_current_user (token validation).

Token claims:
    sub  user UUID (string)
    iat  issued-at (UTC)
    exp  expiry (UTC), iat + ACCESS_TOKEN_EXPIRE_MINUTES by default
    jti  random token id
    plus any extra_claims passed by the caller
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from foundry.config import settings
from foundry.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_password_hasher = PasswordHasher()


# ══════════════════════════════════════════════════════════════════════════
# Passwords
# ══════════════════════════════════════════════════════════════════════════

def hash_password(plain_password: str) -> str:
    """Return an argon2id hash (includes salt and parameters) for storage."""
    return _password_hasher.hash(plain_password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Check a plaintext password against a stored hash.

    Returns False (never raises) on mismatch, on a corrupt hash and when the
    account has no password at all.
    """
    if not hashed_password:
        return False
    try:
        return _password_hasher.verify(hashed_password, plain_password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        logger.warning("Stored password hash could not be verified")
        return False


def password_needs_rehash(hashed_password: str) -> bool:
    """True when the hash was produced with weaker parameters than the current ones."""
    return _password_hasher.check_needs_rehash(hashed_password)


# ══════════════════════════════════════════════════════════════════════════
# JWT Access Tokens
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class TokenPayload:
    """Decoded, validated access token."""

    sub: str
    exp: datetime
    iat: datetime
    jti: str
    extras: Dict[str, Any] = field(default_factory=dict)


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> Tuple[str, datetime]:
    """
    Sign a new access token for `subject`.

    Returns:
        (encoded token, expiry datetime in UTC)
    """
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: Dict[str, Any] = dict(extra_claims or {})
    claims.update(
        sub=str(subject),
        iat=issued_at,
        exp=expires_at,
        jti=uuid.uuid4().hex,
    )
    token = jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_access_token(token: str) -> TokenPayload:
    """
    Validate signature and expiry, then return the payload.

    Raises:
        AuthenticationError: expired, malformed, wrongly-signed token or
        missing required claims.
    """
    try:
        claims = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected access token: %s", type(e).__name__)
        raise AuthenticationError("Could not validate credentials")

    extras = {
        key: value for key, value in claims.items() if key not in {"sub", "exp", "iat", "jti"}
    }
    return TokenPayload(
        sub=str(claims["sub"]),
        exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        iat=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
        jti=str(claims.get("jti", "")),
        extras=extras,
    )
