from fastapi import APIRouter
from pydantic import BaseModel, Field

from haven.core.modules.user.models import UserView
from haven.web.deps import AppDep, CurrentUserDep
from haven.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


class ChangePasswordRequest(BaseModel):
    """Request to change user password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")


@router.get(
    "/profile",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getCurrentUserProfile",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_profile(app: AppDep, user_id: CurrentUserDep) -> UserView:
    return await app.get_current_user(user_id)


@router.post(
    "/profile/change-password",
    summary="Change password",
    description="Change the password for the currently authenticated user.",
    operation_id="changePassword",
    status_code=204,
    responses={
        204: {"description": "Password changed successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid current password or new password rejected"},
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, user_id: CurrentUserDep) -> None:
    await app.change_password(user_id, request.old_password, request.new_password)
