import re
from datetime import UTC, datetime
from uuid import UUID

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def parse_uuid(value: str | UUID) -> UUID | None:
    """Parse a UUID from a string, returning None when malformed."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def now() -> datetime:
    return datetime.now(UTC)
