from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from uuid import UUID

from haven import utils
from haven.config import Config
from haven.core.core import Core
from haven.core.modules.appointment.models import Appointment, CounselorType
from haven.core.modules.blog.models import Blog, BlogView
from haven.core.modules.event.models import Event, EventCategory, RegistrationResult
from haven.core.modules.job.models import Job, JobType
from haven.core.modules.token.models import AuthToken, IssuedToken
from haven.core.modules.user.models import UserView
from haven.core.pagination import PaginationResult
from haven.errors import AccessDeniedError, AuthenticationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core.

    Protected operations receive the user ID already extracted from a verified
    token by the web layer.
    """

    def __init__(self, config: Config, core: Core | None = None) -> None:
        self._core = core or Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    def authenticate(self, auth_token: AuthToken) -> UUID:
        """Verify a bearer token and return the user ID it was issued to."""
        return self._core.services.access.ensure_authenticated(auth_token)

    # === Accounts ===
    async def signup(self, name: str, email: str, number: str, password: str) -> UserView:
        user = await self._core.services.user.create_user(name, email, number, password)
        return UserView.from_domain(user)

    async def login(self, email: str, password: str) -> IssuedToken:
        """Check credentials and issue a session token."""
        user = await self._core.services.user.authenticate(email, password)
        if user is None:
            raise AuthenticationError("Invalid email or password")
        return self._core.services.token.issue(user.id)

    async def get_current_user(self, user_id: UUID) -> UserView:
        user = await self._core.services.user.get_user(user_id)
        return UserView.from_domain(user)

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        await self._core.services.user.change_password(user_id, old_password, new_password)

    # === Blogs ===
    async def get_blogs(self, limit: int = 50, offset: int = 0) -> PaginationResult[BlogView]:
        return await self._core.services.blog.list_blogs(limit, offset)

    async def create_blog(self, user_id: UUID, title: str, content: str, image: str | None = None) -> Blog:
        return await self._core.services.blog.create_blog(user_id, title, content, image)

    async def update_blog(
        self, user_id: UUID, blog_id: UUID, title: str | None, content: str | None, image: str | None
    ) -> Blog:
        """Update a blog (author only)."""
        return await self._core.services.blog.update_blog(blog_id, user_id, title, content, image)

    async def delete_blog(self, user_id: UUID, blog_id: UUID) -> None:
        """Delete a blog (author only)."""
        await self._core.services.blog.delete_blog(blog_id, user_id)

    # === Jobs ===
    async def get_jobs(self, limit: int = 50, offset: int = 0) -> PaginationResult[Job]:
        return await self._core.services.job.list_jobs(limit, offset)

    async def create_job(
        self, title: str, company: str, location: str, description: str, type: JobType | None = None
    ) -> Job:
        return await self._core.services.job.create_job(title, company, location, description, type)

    # === Appointments ===
    async def get_appointments(self, limit: int = 50, offset: int = 0) -> PaginationResult[Appointment]:
        return await self._core.services.appointment.list_appointments(limit, offset)

    async def create_appointment(
        self, name: str, email: str, phone: str, date: datetime, time: str, counselor_type: CounselorType | None = None
    ) -> Appointment:
        return await self._core.services.appointment.create_appointment(name, email, phone, date, time, counselor_type)

    # === Events ===
    async def get_events(self, limit: int = 50, offset: int = 0) -> PaginationResult[Event]:
        return await self._core.services.event.list_events(limit, offset)

    async def get_event(self, event_id: UUID) -> Event:
        return await self._core.services.event.get_event(event_id)

    async def create_event(
        self,
        user_id: UUID,
        title: str,
        description: str,
        category: EventCategory,
        date: datetime,
        time: str,
        location: str,
        seat_capacity: int,
        image_url: str | None = None,
    ) -> Event:
        """Create an event (admin only)."""
        await self._core.services.access.ensure_admin(user_id)
        return await self._core.services.event.create_event(
            title, description, category, date, time, location, seat_capacity, image_url
        )

    async def register_for_event(self, user_id: UUID, event_id: UUID, identity_id: str | None = None) -> RegistrationResult:
        """Register the authenticated user for an event.

        An explicit identity_id is accepted for clients that send it, but it must
        name the authenticated user.
        """
        identity: str | UUID = user_id if identity_id is None else identity_id
        # Malformed references fall through to the allocator, which reports them as bad identity
        parsed = utils.parse_uuid(identity)
        if parsed is not None and parsed != user_id:
            raise AccessDeniedError("Cannot register another user")
        return await self._core.services.event.register(event_id, identity)

    async def cancel_registration(self, user_id: UUID, event_id: UUID) -> Event:
        return await self._core.services.event.cancel_registration(event_id, user_id)

    # === Metadata ===
    def get_version(self) -> dict[str, str]:
        config = self._core.config
        try:
            package_version = version("haven-backend")
        except PackageNotFoundError:
            package_version = "unknown"
        return {
            "version": package_version,
            "git_commit_hash": config.git_commit_hash,
            "git_commit_date": config.git_commit_date,
            "build_time": config.build_time,
        }
