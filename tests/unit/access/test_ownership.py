"""Tests for the ownership guard and the blog operations that use it."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest
from pymongo.errors import AutoReconnect, OperationFailure

from haven.core.db import store_errors
from haven.core.modules.access.service import build_owned_filter
from haven.core.modules.blog.models import Blog
from haven.errors import AccessDeniedError, MissingFieldError, NotFoundError, StoreUnavailableError


def test_owned_filter_matches_id_and_owner():
    resource_id, owner_id = uuid4(), uuid4()
    assert build_owned_filter(resource_id, owner_id, "author_id") == {"_id": resource_id, "author_id": owner_id}


class TestDeleteOwned:
    @pytest.mark.asyncio
    async def test_owner_can_delete(self, core, collection, mock_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Coping with stress", "Breathe.")

        await core.services.blog.delete_blog(blog.id, mock_user.id)

        assert collection("blogs").docs == []

    @pytest.mark.asyncio
    async def test_other_user_gets_not_found_and_blog_survives(self, core, collection, mock_user, other_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Coping with stress", "Breathe.")

        with pytest.raises(NotFoundError):
            await core.services.blog.delete_blog(blog.id, other_user.id)

        assert [doc["_id"] for doc in collection("blogs").docs] == [blog.id]

    @pytest.mark.asyncio
    async def test_missing_and_not_owned_are_indistinguishable(self, core, mock_user, other_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Title", "Body")

        with pytest.raises(NotFoundError) as not_owned:
            await core.services.blog.delete_blog(blog.id, other_user.id)
        with pytest.raises(NotFoundError) as missing:
            await core.services.blog.delete_blog(uuid4(), other_user.id)

        assert type(not_owned.value) is type(missing.value)
        assert not_owned.value.error_type == missing.value.error_type == "not_found"

    @pytest.mark.asyncio
    async def test_system_blog_cannot_be_deleted(self, core, collection, mock_user):
        collection("blogs").docs.append({"_id": uuid4(), "title": "Welcome", "content": "Hello", "author_id": None})
        blog_id = collection("blogs").docs[0]["_id"]

        with pytest.raises(NotFoundError):
            await core.services.blog.delete_blog(blog_id, mock_user.id)

    @pytest.mark.asyncio
    async def test_delete_is_a_single_conditional_call(self, core, collection, mock_user, monkeypatch):
        blog = await core.services.blog.create_blog(mock_user.id, "Title", "Body")
        blogs = collection("blogs")
        seen = []
        original = blogs.find_one_and_delete

        async def recording(query):
            seen.append(query)
            return await original(query)

        async def forbidden(*_args, **_kwargs):
            raise AssertionError("ownership must not be checked with a separate read")

        monkeypatch.setattr(blogs, "find_one_and_delete", recording)
        monkeypatch.setattr(blogs, "find_one", forbidden)

        await core.services.blog.delete_blog(blog.id, mock_user.id)
        assert seen == [{"_id": blog.id, "author_id": mock_user.id}]


class TestUpdateOwned:
    @pytest.mark.asyncio
    async def test_owner_can_update(self, core, mock_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Draft", "Body")

        updated = await core.services.blog.update_blog(blog.id, mock_user.id, title="Final")

        assert updated.title == "Final"
        assert updated.content == "Body"

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, core, collection, mock_user, other_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Draft", "Body")

        with pytest.raises(NotFoundError):
            await core.services.blog.update_blog(blog.id, other_user.id, title="Hijacked")

        assert collection("blogs").docs[0]["title"] == "Draft"

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, core, mock_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Draft", "Body")
        with pytest.raises(MissingFieldError):
            await core.services.blog.update_blog(blog.id, mock_user.id)

    @pytest.mark.asyncio
    async def test_owner_field_cannot_be_reassigned(self, core, collection, mock_user, other_user):
        blog = await core.services.blog.create_blog(mock_user.id, "Draft", "Body")
        with pytest.raises(AccessDeniedError):
            await core.services.access.update_owned(
                collection("blogs"), blog.id, mock_user.id, {"author_id": other_user.id}
            )


class TestBlogListing:
    @pytest.mark.asyncio
    async def test_newest_first_with_author_names(self, core, collection, mock_user, other_user):
        blogs = collection("blogs")
        for title, author, month in (("First", mock_user, 1), ("Second", other_user, 2)):
            blog = Blog(title=title, content="Body", author_id=author.id, created_at=datetime(2026, month, 1, tzinfo=UTC))
            blogs.docs.append(blog.to_mongo())

        page = await core.services.blog.list_blogs()

        assert page.total == 2
        assert [b.title for b in page.items] == ["Second", "First"]
        assert [b.author_name for b in page.items] == ["Bob", "Alice"]

    @pytest.mark.asyncio
    async def test_create_requires_title_and_content(self, core, mock_user):
        with pytest.raises(MissingFieldError):
            await core.services.blog.create_blog(mock_user.id, " ", "Body")


class TestStoreErrors:
    def test_connection_failure_becomes_store_unavailable(self):
        with pytest.raises(StoreUnavailableError), store_errors():
            raise AutoReconnect("connection reset")

    def test_other_driver_errors_propagate(self):
        with pytest.raises(OperationFailure), store_errors():
            raise OperationFailure("bad query", code=2)
