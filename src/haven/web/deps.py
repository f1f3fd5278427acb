from typing import Annotated, cast
from uuid import UUID

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from haven.app import App
from haven.core.modules.token.models import AuthToken
from haven.errors import MalformedTokenError, MissingTokenError

# Security scheme; errors are raised by get_current_user_id so they carry the taxonomy labels
bearer_scheme = HTTPBearer(auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_current_user_id(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> UUID:
    """Verify the Authorization Bearer token and attach the user ID to the request context.

    Runs before any protected handler; any failure rejects the request with 401.
    """
    if credentials is None:
        if request.headers.get("Authorization"):
            # Present but not "<scheme> <credentials>"
            raise MalformedTokenError
        raise MissingTokenError
    if credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise MalformedTokenError

    user_id = app.authenticate(AuthToken(credentials.credentials))
    request.state.user_id = user_id
    structlog.contextvars.bind_contextvars(user_id=str(user_id))
    return user_id


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
CurrentUserDep = Annotated[UUID, Depends(get_current_user_id)]
