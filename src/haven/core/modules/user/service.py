from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from haven.core.core import Service
from haven.core.db import store_errors
from haven.core.modules.user.models import User
from haven.core.modules.user.validators import normalize_email, validate_password
from haven.errors import DuplicateEmailError, MissingFieldError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService(Service):
    """Credential store: identities and their salted password hashes."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        with store_errors():
            doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return User.model_validate(doc)

    async def get_user_by_email(self, email: str) -> User | None:
        with store_errors():
            doc = await self._collection.find_one({"email": email.strip().lower()})
        return None if doc is None else User.model_validate(doc)

    async def has_user(self, user_id: UUID) -> bool:
        """Check if user exists by ID."""
        with store_errors():
            doc = await self._collection.find_one({"_id": user_id}, {"_id": 1})
        return doc is not None

    async def get_user_names(self, user_ids: set[UUID]) -> dict[UUID, str]:
        """Map user IDs to display names; unknown IDs are omitted."""
        if not user_ids:
            return {}
        with store_errors():
            cursor = self._collection.find({"_id": {"$in": list(user_ids)}}, {"name": 1})
            return {doc["_id"]: doc["name"] async for doc in cursor}

    async def create_user(self, name: str, email: str, number: str, password: str, *, is_admin: bool = False) -> User:
        """Create user with hashed password.

        Email uniqueness is enforced by the unique index, not by a prior lookup.
        """
        name = name.strip()
        if not name:
            raise MissingFieldError("Name is required")
        email = normalize_email(email)
        validate_password(password)

        user = User(
            name=name, email=email, number=number.strip(), password_hash=hash_password(password), is_admin=is_admin
        )
        try:
            with store_errors():
                await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            logger.info("signup_rejected", email=email, kind="duplicate_email")
            raise DuplicateEmailError from e
        logger.info("user_created", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches the stored hash."""
        user = await self.get_user_by_email(email)
        if user is None or not check_password(password, user.password_hash):
            return None
        return user

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """Change user password after verifying current password."""
        user = await self.get_user(user_id)
        if not check_password(old_password, user.password_hash):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        with store_errors():
            await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": hash_password(new_password)}})

    async def ensure_admin_user_exists(self) -> None:
        """Create the admin identity from config if a password is configured and it does not exist yet."""
        config = self.core.config
        if config.admin_password is None:
            return
        existing = await self.get_user_by_email(config.admin_email)
        if existing is not None:
            if not existing.is_admin:
                # Never promote an account that was signed up with this email
                logger.warning("admin_email_taken", user_id=str(existing.id))
            return
        try:
            await self.create_user("Admin", config.admin_email, "", config.admin_password, is_admin=True)
        except DuplicateEmailError:
            # Another instance created it concurrently
            pass

    async def on_start(self) -> None:
        """Initialize indexes and admin user."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started")
