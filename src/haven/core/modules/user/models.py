from uuid import UUID

from pydantic import BaseModel, Field

from haven.core.db import MongoModel


class User(MongoModel):
    """Identity with credentials.

    Indexed on email - unique.
    """

    name: str
    email: str  # stored lower-case
    number: str = ""  # contact phone number
    password_hash: str  # bcrypt hash
    is_admin: bool = False  # set only when seeding from config


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    number: str = Field(..., description="Contact phone number")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, name=user.name, email=user.email, number=user.number)
