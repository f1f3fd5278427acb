from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

API_PREFIX = "/api/v1"

# Endpoints reachable without a bearer token
PUBLIC_ENDPOINTS = {
    ("GET", "/health"),
    ("POST", f"{API_PREFIX}/auth/signup"),
    ("POST", f"{API_PREFIX}/auth/login"),
    ("GET", f"{API_PREFIX}/blogs"),
    ("GET", f"{API_PREFIX}/jobs"),
    ("POST", f"{API_PREFIX}/jobs"),
    ("GET", f"{API_PREFIX}/appointments"),
    ("POST", f"{API_PREFIX}/appointments"),
    ("GET", f"{API_PREFIX}/events"),
    ("GET", f"{API_PREFIX}/events/{{event_id}}"),
    ("GET", f"{API_PREFIX}/metadata/choices"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Haven API",
            version="0.1.0",
            summary="Community backend: blogs, counseling appointments, jobs, and events with seat-limited registration",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Session token from /auth/login, valid for one hour",
            },
        }

        # Apply security globally (overridden for public endpoints)
        openapi_schema["security"] = [{"BearerAuth": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Token has expired", "type": "expired_token"},
                {"message": "No available seats", "type": "sold_out"},
                {"message": "Already registered for this event", "type": "already_registered"},
            ]
        }
    }
