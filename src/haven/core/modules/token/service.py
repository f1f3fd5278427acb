"""Signed, time-limited session tokens.

Tokens are HS256 JWTs carrying ``sub`` (the user ID), ``iat`` and ``exp``.
Expiry is checked here against an explicit instant rather than by PyJWT,
so that a token is rejected exactly at ``exp`` and tests can pin the clock.
"""

import math
from datetime import UTC, datetime
from uuid import UUID

import jwt

from haven import utils
from haven.core.core import Service
from haven.core.modules.token.models import AuthToken, IssuedToken, TokenClaims
from haven.errors import ExpiredTokenError, MalformedTokenError

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 3600

_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_iat": False,
    "require": ["sub", "iat", "exp"],
}


def issue_token(
    user_id: UUID,
    secret_key: str,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
    issued_at: datetime | None = None,
) -> IssuedToken:
    """Sign a token for user_id that expires ttl_seconds after issued_at.

    iat is rounded up to a whole second so the token never lives less than ttl_seconds.
    """
    iat = math.ceil((issued_at or utils.now()).timestamp())
    exp = iat + ttl_seconds
    token = jwt.encode({"sub": str(user_id), "iat": iat, "exp": exp}, secret_key, algorithm=algorithm)
    return IssuedToken(token=AuthToken(token), expires_at=datetime.fromtimestamp(exp, UTC))


def verify_token(
    token: str,
    secret_key: str,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    at: datetime | None = None,
) -> TokenClaims:
    """Check signature and expiry, returning the embedded claims.

    Raises:
        MalformedTokenError: undecodable token, bad signature, missing claims or non-UUID subject
        ExpiredTokenError: ``at`` is at or past the embedded expiry
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm], options=_DECODE_OPTIONS)
    except jwt.PyJWTError as e:
        raise MalformedTokenError from e

    user_id = utils.parse_uuid(payload["sub"])
    iat, exp = payload["iat"], payload["exp"]
    if user_id is None or not isinstance(iat, int | float) or not isinstance(exp, int | float):
        raise MalformedTokenError

    if (at or utils.now()).timestamp() >= exp:
        raise ExpiredTokenError

    return TokenClaims(
        user_id=user_id,
        issued_at=datetime.fromtimestamp(iat, UTC),
        expires_at=datetime.fromtimestamp(exp, UTC),
    )


class TokenService(Service):
    """Issues and verifies session tokens using the process-wide signing key."""

    def issue(self, user_id: UUID, issued_at: datetime | None = None) -> IssuedToken:
        config = self.core.config
        return issue_token(
            user_id,
            config.jwt_secret_key,
            algorithm=config.jwt_algorithm,
            ttl_seconds=config.token_ttl_seconds,
            issued_at=issued_at,
        )

    def verify(self, token: str, at: datetime | None = None) -> UUID:
        """Return the user ID embedded in a valid token."""
        config = self.core.config
        return verify_token(token, config.jwt_secret_key, algorithm=config.jwt_algorithm, at=at).user_id
