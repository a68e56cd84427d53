"""
Authentication endpoints under `/api/auth`.

`register` and `login` answer with a bare `LoginResponse` (token, expiry, user profile); the other
endpoints use the standard success envelope.
"""

from fastapi import APIRouter, Depends, Request, status

from collab_todo.models.api_models import success_response
from collab_todo.models.user_models import (
    LoginRequest,
    LoginResponse,
    TokenVerificationRequest,
    User,
    UserRegistrationRequest,
)
from collab_todo.routes.auth.dependencies import get_auth_service, get_current_user_dep, oauth2_scheme
from collab_todo.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(request: UserRegistrationRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Create an account and return a token for it."""
    return await auth_service.register(request)


@router.post("/login", response_model=LoginResponse)
async def login(request: Request, credentials: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    client_ip = request.client.host if request.client else None
    return await auth_service.login(credentials, ip_address=client_ip)


@router.get("/me")
async def get_me(
    current_user: User = Depends(get_current_user_dep),
    token: str = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Current user profile plus the remaining lifetime of the token in use."""
    return success_response(await auth_service.get_current_user(current_user.id, token))


@router.post("/verify")
async def verify_token(request: TokenVerificationRequest, auth_service: AuthService = Depends(get_auth_service)):
    return success_response(await auth_service.verify_token(request.token))


@router.get("/status")
async def auth_status(auth_service: AuthService = Depends(get_auth_service)):
    return success_response(await auth_service.get_status())
