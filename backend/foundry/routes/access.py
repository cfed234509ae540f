"""
Foundry — Access Routes (login, logout, signup)
================================================

Login Flow:
    1. Client POSTs form fields username (= email) and password
       (OAuth2 password grant, so Swagger's "Authorize" button works)
    2. UserService.authenticate() verifies the argon2 hash
    3. A JWT is signed for the user's UUID
    4. The token is returned in the body AND set as an HttpOnly cookie
       (the React app relies on the cookie; API clients use the header)
"""

import logging

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm

from foundry.auth.security import create_access_token
from foundry.config import settings
from foundry.exceptions import QueueError
from foundry.schemas.access import AccountRegister, Token
from foundry.schemas.common import ErrorResponse
from foundry.schemas.user import UserRead
from foundry.services import UserService, provide_users_service
from foundry.worker.queue import enqueue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/access", tags=["Access"])


@router.post(
    "/login",
    response_model=Token,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in with email and password",
)
async def login(
    response: Response,
    form: OAuth2PasswordRequestForm = Depends(),
    users: UserService = Depends(provide_users_service),
) -> Token:
    user = await users.authenticate(form.username, form.password)
    token, _ = create_access_token(str(user.id))
    expires_in = settings.access_token_expire_minutes * 60

    response.set_cookie(
        key=settings.token_cookie_name,
        value=token,
        max_age=expires_in,
        httponly=True,
        samesite="lax",
        secure=settings.environment == "prod",
    )
    logger.info("User %s logged in", user.id)
    return Token(access_token=token, expires_in=expires_in)


@router.post("/logout", status_code=204, summary="Clear the auth cookie")
async def logout(response: Response) -> None:
    """
    Tokens are stateless JWTs; logging out removes the cookie. A copied
    bearer token stays valid until it expires.
    """
    response.delete_cookie(settings.token_cookie_name, httponly=True, samesite="lax")


@router.post(
    "/signup",
    status_code=201,
    response_model=UserRead,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Create a new account",
)
async def signup(
    data: AccountRegister,
    users: UserService = Depends(provide_users_service),
) -> UserRead:
    """
    Registers the account, commits it, then enqueues the `user_registered`
    job. The worker reads the user on its own connection, so the row must be
    committed before the job can run.

    The job is best-effort: if Redis is down the account still exists and the
    failure is only logged.
    """
    user = await users.create(data.model_dump())
    await users.commit()
    try:
        await enqueue("user_registered", user_id=str(user.id))
    except QueueError as e:
        logger.warning("Signup job not enqueued for %s: %s", user.id, e.message)
    return UserRead.model_validate(user)
