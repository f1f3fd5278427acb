from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from haven.core.core import Service
from haven.core.db import store_errors
from haven.core.modules.blog.models import Blog, BlogView
from haven.core.pagination import PaginationResult, paginate
from haven.errors import MissingFieldError, ValidationError

logger = structlog.get_logger(__name__)


class BlogService(Service):
    """Blog posts; mutation is restricted to the author through the ownership guard."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("blogs")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_at", -1)])
        await self._collection.create_index([("author_id", 1)])

    async def create_blog(self, author_id: UUID, title: str, content: str, image: str | None = None) -> Blog:
        if not title.strip() or not content.strip():
            raise MissingFieldError("Title and content are required")
        blog = Blog(title=title, content=content, image=image, author_id=author_id)
        with store_errors():
            await self._collection.insert_one(blog.to_mongo())
        logger.info("blog_created", blog_id=str(blog.id), author_id=str(author_id))
        return blog

    async def list_blogs(self, limit: int = 50, offset: int = 0) -> PaginationResult[BlogView]:
        """Get paginated blogs, newest first, with author names resolved."""
        with store_errors():
            page = await paginate(self._collection, Blog, {}, [("created_at", -1)], limit, offset)
        names = await self.core.services.user.get_user_names({b.author_id for b in page.items if b.author_id})
        items = [BlogView.from_domain(b, names.get(b.author_id) if b.author_id else None) for b in page.items]
        return PaginationResult(items=items, total=page.total, limit=page.limit, offset=page.offset)

    async def update_blog(
        self,
        blog_id: UUID,
        requester_id: UUID,
        title: str | None = None,
        content: str | None = None,
        image: str | None = None,
    ) -> Blog:
        """Partially update a blog owned by requester_id."""
        changes: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise ValidationError("Title cannot be empty")
            changes["title"] = title
        if content is not None:
            if not content.strip():
                raise ValidationError("Content cannot be empty")
            changes["content"] = content
        if image is not None:
            changes["image"] = image
        if not changes:
            raise MissingFieldError("Nothing to update")

        doc = await self.core.services.access.update_owned(self._collection, blog_id, requester_id, changes)
        return Blog.model_validate(doc)

    async def delete_blog(self, blog_id: UUID, requester_id: UUID) -> None:
        """Delete a blog owned by requester_id; NotFoundError if missing or owned by someone else."""
        await self.core.services.access.delete_owned(self._collection, blog_id, requester_id)
        logger.info("blog_deleted", blog_id=str(blog_id), author_id=str(requester_id))
