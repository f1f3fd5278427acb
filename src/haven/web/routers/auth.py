from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from haven.core.modules.user.models import UserView
from haven.web.deps import AppDep
from haven.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class SignupRequest(BaseModel):
    """Account registration request."""

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=1, description="Email address, unique across accounts")
    number: str = Field("", description="Contact phone number")
    password: str = Field(..., min_length=1, description="Password, at least 6 characters without whitespace")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email for authentication")
    password: str = Field(..., description="Password for authentication")


class LoginResponse(BaseModel):
    """Authentication response."""

    message: str = Field("Login successful")
    token: str = Field(..., description="Bearer token for subsequent requests, valid for one hour")
    expires_at: datetime = Field(..., description="Moment the token stops being accepted")


@router.post(
    "/auth/signup",
    summary="Create account",
    description="Register a new account. Email addresses are unique.",
    operation_id="signup",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Missing or invalid field"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def signup(signup_data: SignupRequest, app: AppDep) -> UserView:
    return await app.signup(signup_data.name, signup_data.email, signup_data.number, signup_data.password)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a bearer token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep) -> LoginResponse:
    issued = await app.login(login_data.email, login_data.password)
    return LoginResponse(token=issued.token, expires_at=issued.expires_at)
