"""
User profile endpoints under `/api/users`.
"""

from fastapi import APIRouter, Depends

from collab_todo.models.api_models import success_response
from collab_todo.models.user_models import UpdateProfileRequest, User
from collab_todo.routes.auth.dependencies import get_auth_service, get_current_user_dep
from collab_todo.services.auth_service import AuthService

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/profile/{user_id}")
async def get_profile(
    user_id: str,
    current_user: User = Depends(get_current_user_dep),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Public profile of any registered user."""
    return success_response(await auth_service.get_user_profile(user_id))


@router.put("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    current_user: User = Depends(get_current_user_dep),
    auth_service: AuthService = Depends(get_auth_service),
):
    return success_response(await auth_service.update_profile(current_user.id, request))
