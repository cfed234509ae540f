"""
Foundry — Current User Resolution
==================================

What:  FastAPI dependencies that turn an access token into a User.
How:   OAuth2PasswordBearer extracts `Authorization: Bearer <jwt>`; when the
       header is absent the auth cookie set at login is used instead. The
       token is validated by PyJWT (auth.security) and the user is loaded by
       the UUID in its `sub` claim.
Who:   Every protected route, usually through a guard from auth.guards.

Failure modes (all 401 with `WWW-Authenticate: Bearer`):
    - no token in header or cookie
    - expired / malformed / wrongly-signed token
    - subject is not a UUID, user no longer exists, or account is inactive
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from foundry.auth.security import decode_access_token
from foundry.config import settings
from foundry.exceptions import AuthenticationError
from foundry.models.user import User
from foundry.services import UserService, provide_users_service

logger = logging.getLogger(__name__)

# auto_error=False: a missing header falls through to the cookie lookup
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/access/login", auto_error=False)


def extract_token(request: Request, bearer_token: Optional[str]) -> Optional[str]:
    """Header token wins over the cookie."""
    if bearer_token:
        return bearer_token
    return request.cookies.get(settings.token_cookie_name) or None


async def get_current_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    users: UserService = Depends(provide_users_service),
) -> User:
    token = extract_token(request, bearer_token)
    if token is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(token)
    try:
        user_id = UUID(payload.sub)
    except ValueError:
        raise AuthenticationError("Could not validate credentials")

    user = await users.get_one_or_none(id=user_id)
    if user is None or not user.is_active:
        logger.info("Token subject %s is unknown or inactive", payload.sub)
        raise AuthenticationError("Could not validate credentials")

    request.state.user_id = str(user.id)
    return user
