"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access.principal import Principal, load_principal
from peerlearn.auth.jwt import verify_token
from peerlearn.database import get_session

_bearer = HTTPBearer()


async def get_identity(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> Principal:
    """
    Verify the bearer token and resolve the principal.

    The principal may not have a profile yet (first sign-up), in which case
    only its id is known. Raises 401 on an invalid token.
    """
    try:
        payload = verify_token(credentials.credentials, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    return await load_principal(db, str(payload["sub"]))


async def get_current_principal(
    principal: Principal = Depends(get_identity),
) -> Principal:
    """Same as get_identity but requires an existing profile."""
    if not principal.has_profile:
        raise HTTPException(status_code=401, detail="Profile not found")
    return principal
