"""Shared pytest fixtures.

MongoDB is replaced by an in-memory async collection that implements the
operations the services use. Each operation yields to the event loop once
before running and then matches and mutates without awaiting, so a
conditional update is indivisible just like a single-document update on the
server.
"""

import asyncio
import copy
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import bcrypt
import pytest
from pymongo.errors import DuplicateKeyError

from haven.config import Config
from haven.core.core import Core
from haven.core.modules.event.models import Event, EventCategory
from haven.core.modules.user.models import User

ADMIN_EMAIL = "admin@haven.test"


def _matches_condition(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        for op, arg in condition.items():
            if op == "$gt":
                if value is None or not value > arg:
                    return False
            elif op == "$ne":
                if (arg in value) if isinstance(value, list) else value == arg:
                    return False
            elif op == "$eq":
                if value != arg:
                    return False
            elif op == "$in":
                if value not in arg:
                    return False
            else:
                raise NotImplementedError(op)
        return True
    if isinstance(value, list):
        return condition in value
    return value == condition


def matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(_matches_condition(doc.get(key), condition) for key, condition in query.items())


def apply_update(doc: dict[str, Any], update: dict[str, Any]) -> None:
    for op, fields in update.items():
        for key, arg in fields.items():
            if op == "$set":
                doc[key] = arg
            elif op == "$inc":
                doc[key] = doc.get(key, 0) + arg
            elif op == "$push":
                doc.setdefault(key, []).append(arg)
            elif op == "$pull":
                doc[key] = [item for item in doc.get(key, []) if item != arg]
            else:
                raise NotImplementedError(op)


def project(doc: dict[str, Any], projection: dict[str, Any] | None) -> dict[str, Any]:
    if not projection:
        return copy.deepcopy(doc)
    return {k: copy.deepcopy(v) for k, v in doc.items() if k == "_id" or projection.get(k)}


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key_or_list: Any, direction: int = 1) -> "FakeCursor":
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        for key, order in reversed(keys):
            self._docs.sort(key=lambda d, k=key: d.get(k), reverse=order < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._docs = self._docs[:count]
        return self

    async def __aiter__(self):
        for doc in self._docs:
            yield doc


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.unique_keys: list[str] = []

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        if unique:
            self.unique_keys.append(keys[0][0])
        return "_".join(f"{k}_{v}" for k, v in keys)

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        await asyncio.sleep(0)
        for key in ["_id", *self.unique_keys]:
            if any(existing.get(key) == doc.get(key) for existing in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error: {key}")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: dict[str, Any], projection: dict[str, Any] | None = None) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        for doc in self.docs:
            if matches(doc, query):
                return project(doc, projection)
        return None

    def find(self, query: dict[str, Any] | None = None, projection: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([project(d, projection) for d in self.docs if matches(d, query or {})])

    async def count_documents(self, query: dict[str, Any]) -> int:
        await asyncio.sleep(0)
        return sum(1 for d in self.docs if matches(d, query))

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], return_document: bool = False, **_: Any
    ) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        for doc in self.docs:
            if matches(doc, query):
                before = copy.deepcopy(doc)
                apply_update(doc, update)
                return copy.deepcopy(doc) if return_document else before
        return None

    async def find_one_and_delete(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        for index, doc in enumerate(self.docs):
            if matches(doc, query):
                return self.docs.pop(index)
        return None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        await asyncio.sleep(0)
        for doc in self.docs:
            if matches(doc, query):
                apply_update(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class FakeDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self._collections.setdefault(name, FakeCollection(name))


class FakeMongoClient:
    def __init__(self) -> None:
        self.database = FakeDatabase()
        self.closed = False

    def get_database(self, _: str) -> FakeDatabase:
        return self.database

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def config():
    """Configuration with a fixed signing key and a seeded admin."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/haven_test",
        jwt_secret_key="test-signing-key-with-enough-length-for-hs256",
        admin_email=ADMIN_EMAIL,
        admin_password="admin-password",
    )


@pytest.fixture
def core(config):
    """Core wired to the in-memory store."""
    return Core(config, mongo_client=FakeMongoClient())


@pytest.fixture
def collection(core):
    """Access a fake collection by name."""
    return core.database.get_collection


@pytest.fixture
def make_user(collection):
    """Insert a user directly into the store and return it."""

    def _make_user(name: str = "Test User", email: str | None = None, password: str = "secret-password") -> User:
        user = User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            number="555-0100",
            password_hash=bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8"),
        )
        collection("users").docs.append(user.to_mongo())
        return user

    return _make_user


@pytest.fixture
def mock_user(make_user):
    return make_user("Alice")


@pytest.fixture
def other_user(make_user):
    return make_user("Bob")


@pytest.fixture
def event_doc(collection):
    """Insert an event with the given seat capacity and return its ID."""

    def _event_doc(seat_capacity: int, registrations: list[UUID] | None = None) -> UUID:
        registrations = registrations or []
        event = Event(
            title="Mindfulness workshop",
            description="An evening of guided practice",
            category=EventCategory.WORKSHOP,
            date=datetime(2026, 11, 20, tzinfo=UTC),
            time="18:30",
            location="Community hall",
            seat_capacity=seat_capacity,
            available_seats=seat_capacity - len(registrations),
            registrations=registrations,
        )
        collection("events").docs.append(event.to_mongo())
        return event.id

    return _event_doc
