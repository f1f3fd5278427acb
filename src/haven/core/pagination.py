from typing import Any, TypeVar

from pydantic import BaseModel, Field
from pymongo.asynchronous.collection import AsyncCollection

from haven.core.db import MongoModel

T = TypeVar("T")
M = TypeVar("M", bound=MongoModel)


class PaginationResult[T](BaseModel):
    """Pagination result wrapper for list endpoints."""

    items: list[T] = Field(..., description="List of items in current page")
    total: int = Field(..., description="Total number of items across all pages", ge=0)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.offset + len(self.items) < self.total


async def paginate(
    collection: AsyncCollection[dict[str, Any]],
    model: type[M],
    query: dict[str, Any],
    sort: list[tuple[str, int]],
    limit: int,
    offset: int,
) -> PaginationResult[M]:
    """Run a sorted, windowed find and wrap the page with the total count."""
    total = await collection.count_documents(query)
    cursor = collection.find(query).sort(sort).skip(offset).limit(limit)
    items = await model.list_cursor(cursor)
    return PaginationResult(items=items, total=total, limit=limit, offset=offset)
