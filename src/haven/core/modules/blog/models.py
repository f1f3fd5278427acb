from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from haven.core.db import MongoModel
from haven.utils import now


class Blog(MongoModel):
    """Blog post owned by its author.

    Indexed on created_at and author_id.
    """

    title: str
    content: str
    image: str | None = None  # image URL or data URI
    author_id: UUID | None = None  # None only for system-created posts
    created_at: datetime = Field(default_factory=now)


class BlogView(BaseModel):
    """Blog post with the author's display name (API representation)."""

    id: UUID
    title: str
    content: str
    image: str | None
    author_id: UUID | None
    author_name: str | None = Field(None, description="Author display name, if the author still exists")
    created_at: datetime

    @classmethod
    def from_domain(cls, blog: Blog, author_name: str | None = None) -> "BlogView":
        return cls(
            id=blog.id,
            title=blog.title,
            content=blog.content,
            image=blog.image,
            author_id=blog.author_id,
            author_name=author_name,
            created_at=blog.created_at,
        )
