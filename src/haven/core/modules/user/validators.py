from haven import utils
from haven.errors import MissingFieldError, ValidationError


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 6 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password:
        raise MissingFieldError("Password is required")

    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")


def normalize_email(email: str) -> str:
    """Return the canonical lower-case form of an email, rejecting malformed input."""
    email = email.strip().lower()
    if not email:
        raise MissingFieldError("Email is required")
    if not utils.is_email(email):
        raise ValidationError(f"Invalid email address: '{email}'")
    return email
