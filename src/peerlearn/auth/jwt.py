"""
Bearer token verification.

Tokens are issued by the external identity provider; the ``sub`` claim is the
principal's user id. HS* algorithms share ``jwt_secret``, asymmetric ones read
PEM files.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, NamedTuple

import jwt

from peerlearn.config import get_settings

ACCESS_TOKEN = "access"


class TokenKeys(NamedTuple):
    signing: str
    verifying: str


@lru_cache
def _token_keys() -> TokenKeys:
    settings = get_settings()
    if settings.jwt_algorithm.startswith("HS"):
        return TokenKeys(settings.jwt_secret, settings.jwt_secret)
    return TokenKeys(
        signing=Path(settings.jwt_private_key_path).read_text(),
        verifying=Path(settings.jwt_public_key_path).read_text(),
    )


def reset_keys() -> None:
    """Forget loaded keys so the next call re-reads settings."""
    _token_keys.cache_clear()


def create_access_token(user_id: str, email: str | None = None) -> str:
    """
    Mint an access token shaped like the identity provider's.

    Only local tooling and tests need this; production tokens come from the
    provider.
    """
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": user_id,
        "type": ACCESS_TOKEN,
        "iss": settings.jwt_issuer,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, _token_keys().signing, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = ACCESS_TOKEN) -> dict[str, Any]:
    """
    Decode ``token`` and check issuer, expiry and token type.

    Raises:
        jwt.InvalidTokenError: On any verification failure.
    """
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            _token_keys().verifying,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    token_type = claims.get("type")
    if token_type != expected_type:
        msg = f"Expected a {expected_type} token, got {token_type!r}"
        raise jwt.InvalidTokenError(msg)
    return claims
