"""Session token models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, Field

AuthToken = NewType("AuthToken", str)


class TokenClaims(BaseModel):
    """Decoded contents of a session token.

    Tokens are stateless: nothing is persisted, validity is signature + expiry.
    """

    user_id: UUID
    issued_at: datetime
    expires_at: datetime


class IssuedToken(BaseModel):
    """A freshly signed token with its expiry."""

    token: AuthToken = Field(..., description="Bearer token for subsequent requests")
    expires_at: datetime = Field(..., description="Moment after which the token is rejected")
