from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """

    status_code: int = 400
    error_type: str = "bad_request"


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class MissingTokenError(AuthenticationError):
    """No bearer credential was presented."""

    error_type = "missing_token"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class MalformedTokenError(AuthenticationError):
    """The bearer credential could not be decoded or its signature does not match."""

    error_type = "malformed_token"

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ExpiredTokenError(AuthenticationError):
    """The bearer credential is past its expiry."""

    error_type = "expired_token"

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""

    status_code = 403
    error_type = "access_denied"


class ValidationError(UserError):
    """Raised when user input fails validation."""

    error_type = "validation_error"


class BadIdentityError(ValidationError):
    """The identity reference is malformed or names no existing user."""

    error_type = "bad_identity"


class MissingFieldError(ValidationError):
    """A required request field is absent or empty."""

    error_type = "missing_field"


class CapacityError(UserError):
    """Base class for capacity violations."""

    error_type = "capacity_error"


class SoldOutError(CapacityError):
    """The event has no seats left."""

    error_type = "sold_out"

    def __init__(self, message: str = "No available seats") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Base class for uniqueness conflicts."""

    status_code = 409
    error_type = "conflict"


class AlreadyRegisteredError(ConflictError):
    """The identity already holds a seat at the event."""

    error_type = "already_registered"

    def __init__(self, message: str = "Already registered for this event") -> None:
        super().__init__(message)


class DuplicateEmailError(ConflictError):
    """A user with this email already exists."""

    error_type = "duplicate_email"

    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class StoreUnavailableError(Exception):
    """The datastore could not be reached or did not answer in time.

    This is the only transient failure class. It is reported to the caller
    and never retried inside the service.
    """

    status_code = 503
    error_type = "store_unavailable"

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(message)
