from haven.web.routers.appointments import router as appointments_router
from haven.web.routers.auth import router as auth_router
from haven.web.routers.blogs import router as blogs_router
from haven.web.routers.events import router as events_router
from haven.web.routers.jobs import router as jobs_router
from haven.web.routers.metadata import router as metadata_router
from haven.web.routers.profile import router as profile_router

__all__ = [
    "appointments_router",
    "auth_router",
    "blogs_router",
    "events_router",
    "jobs_router",
    "metadata_router",
    "profile_router",
]
