"""Blog endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from haven.core.modules.blog.models import Blog, BlogView
from haven.core.pagination import PaginationResult
from haven.web.deps import AppDep, CurrentUserDep
from haven.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["blogs"])


class CreateBlogRequest(BaseModel):
    """Request to publish a blog post."""

    title: str = Field(..., min_length=1, description="Post title")
    content: str = Field(..., min_length=1, description="Post body")
    image: str | None = Field(None, description="Optional image URL")


class UpdateBlogRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1)
    content: str | None = Field(None, min_length=1)
    image: str | None = None


@router.get(
    "/blogs",
    summary="List blogs",
    description="Get paginated blog posts, newest first. Public.",
    operation_id="listBlogs",
    responses={200: {"description": "Paginated list of blogs"}},
)
async def list_blogs(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[BlogView]:
    return await app.get_blogs(limit, offset)


@router.post(
    "/blogs",
    summary="Create blog",
    description="Publish a blog post authored by the current user.",
    operation_id="createBlog",
    status_code=201,
    responses={
        201: {"description": "Blog created"},
        400: {"model": ErrorResponse, "description": "Title and content are required"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_blog(request: CreateBlogRequest, app: AppDep, user_id: CurrentUserDep) -> Blog:
    return await app.create_blog(user_id, request.title, request.content, request.image)


@router.patch(
    "/blogs/{blog_id}",
    summary="Update blog",
    description="Update a blog post. Only the author can update it.",
    operation_id="updateBlog",
    responses={
        200: {"description": "Blog updated"},
        400: {"model": ErrorResponse, "description": "Nothing to update"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Blog not found"},
    },
)
async def update_blog(blog_id: UUID, request: UpdateBlogRequest, app: AppDep, user_id: CurrentUserDep) -> Blog:
    return await app.update_blog(user_id, blog_id, request.title, request.content, request.image)


@router.delete(
    "/blogs/{blog_id}",
    summary="Delete blog",
    description="Delete a blog post. Posts that do not exist and posts by other authors both answer 404.",
    operation_id="deleteBlog",
    status_code=204,
    responses={
        204: {"description": "Blog deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Blog not found"},
    },
)
async def delete_blog(blog_id: UUID, app: AppDep, user_id: CurrentUserDep) -> None:
    await app.delete_blog(user_id, blog_id)
