"""
Foundry — Access (Login/Signup) Schemas
========================================

Login itself uses FastAPI's OAuth2PasswordRequestForm (form-encoded
username/password), so only signup and token payloads are modelled here.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AccountRegister(BaseModel):
    """Body of POST /api/access/signup."""

    email: EmailStr = Field(description="Login email address")
    password: str = Field(min_length=8, max_length=128, description="Plaintext password (8+ chars)")
    name: Optional[str] = Field(default=None, max_length=255, description="Display name")


class Token(BaseModel):
    """OAuth2-compatible token response."""

    access_token: str = Field(description="Signed JWT")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(description="Seconds until the token expires")
