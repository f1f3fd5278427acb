from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    database_timeout_ms: int = 5000  # Client-wide timeout for every MongoDB operation
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5001
    debug: bool = False
    jwt_secret_key: str  # Signing key for session tokens; rotating it invalidates all tokens
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    cors_origins: list[str] = []
    admin_email: str = "admin@haven.local"  # Email of the seeded admin identity
    admin_password: str | None = None  # When set, the admin identity is created on startup if missing
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    git_commit_date: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "HAVEN_",
        "extra": "ignore",
    }
