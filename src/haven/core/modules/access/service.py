from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from haven.core.core import Service
from haven.core.db import store_errors
from haven.core.modules.token.models import AuthToken
from haven.errors import AccessDeniedError, NotFoundError

logger = structlog.get_logger(__name__)


def build_owned_filter(resource_id: UUID, requester_id: UUID, owner_field: str) -> dict[str, Any]:
    """Match a document only if it exists and belongs to requester_id."""
    return {"_id": resource_id, owner_field: requester_id}


class AccessService(Service):
    """Authentication checks and the ownership guard for owned resources."""

    def ensure_authenticated(self, auth_token: AuthToken) -> UUID:
        """Verify the token and return the authenticated user ID."""
        return self.core.services.token.verify(auth_token)

    async def ensure_admin(self, user_id: UUID) -> None:
        """Ensure the user carries the admin flag, raise AccessDeniedError if not."""
        user = await self.core.services.user.get_user(user_id)
        if not user.is_admin:
            raise AccessDeniedError("Admin privileges required")

    async def delete_owned(
        self,
        collection: AsyncCollection[dict[str, Any]],
        resource_id: UUID,
        requester_id: UUID,
        owner_field: str = "author_id",
    ) -> dict[str, Any]:
        """Delete a resource in one conditional call matching both id and owner.

        Missing and not-owned are reported identically as NotFoundError.
        """
        with store_errors():
            doc = await collection.find_one_and_delete(build_owned_filter(resource_id, requester_id, owner_field))
        if doc is None:
            logger.info(
                "owned_mutation_denied",
                collection=collection.name,
                resource_id=str(resource_id),
                requester_id=str(requester_id),
                kind="delete",
            )
            raise NotFoundError(f"Resource '{resource_id}' not found")
        return doc

    async def update_owned(
        self,
        collection: AsyncCollection[dict[str, Any]],
        resource_id: UUID,
        requester_id: UUID,
        changes: dict[str, Any],
        owner_field: str = "author_id",
    ) -> dict[str, Any]:
        """Apply $set changes in one conditional call matching both id and owner."""
        if owner_field in changes or "_id" in changes:
            raise AccessDeniedError("Ownership fields cannot be changed")
        with store_errors():
            doc = await collection.find_one_and_update(
                build_owned_filter(resource_id, requester_id, owner_field),
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            logger.info(
                "owned_mutation_denied",
                collection=collection.name,
                resource_id=str(resource_id),
                requester_id=str(requester_id),
                kind="update",
            )
            raise NotFoundError(f"Resource '{resource_id}' not found")
        return doc
