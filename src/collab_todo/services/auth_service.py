"""
# Auth Service

Account registration, password login, token inspection and profile maintenance.

Successful registration and login both return a `LoginResponse` carrying a fresh token. Failed
logins and rejected tokens are recorded through `log_security_event`; the error returned to the
client never says whether the email or the password was wrong.
"""

from typing import Any, Dict, Optional

from collab_todo.config import settings
from collab_todo.database.user_store import UserStore
from collab_todo.exceptions import AuthenticationError, NotFoundError, ValidationError
from collab_todo.managers.jwt_manager import JWTManager
from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.user_models import (
    LoginRequest,
    LoginResponse,
    User,
    UpdateProfileRequest,
    UserProfile,
    UserRegistrationRequest,
)
from collab_todo.utils.logging_utils import log_security_event

logger = get_logger(prefix="[AuthService]")


class AuthService:
    def __init__(self, user_store: UserStore, jwt_manager: JWTManager):
        self.user_store = user_store
        self.jwt_manager = jwt_manager

    def _login_response(self, user: User) -> LoginResponse:
        token, expires_at = self.jwt_manager.issue_token(user)
        return LoginResponse(token=token, expires_at=expires_at, user=user.to_profile())

    async def register(self, request: UserRegistrationRequest) -> LoginResponse:
        """
        Create an account and log it in.

        Raises:
            ValidationError: The password is shorter than `settings.MIN_PASSWORD_LENGTH`.
            ConflictError: The email is already registered (case-insensitive).
        """
        if len(request.password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long")

        user = await self.user_store.create_user(request.email, request.password, request.name)
        logger.info("Registered user %s", user.id)
        return self._login_response(user)

    async def login(self, request: LoginRequest, ip_address: Optional[str] = None) -> LoginResponse:
        user = await self.user_store.authenticate_user(request.email, request.password)
        if user is None:
            log_security_event("login_failed", ip_address=ip_address, details={"email": request.email.strip().lower()})
            raise AuthenticationError("Invalid email or password", code="INVALID_CREDENTIALS")

        log_security_event("login_succeeded", user_id=user.id, ip_address=ip_address, success=True)
        return self._login_response(user)

    async def authenticate_token(self, token: str) -> User:
        """Resolve a bearer token to its user; used by the request dependency."""
        try:
            claims = self.jwt_manager.verify_token(token)
        except AuthenticationError as e:
            log_security_event("invalid_token", details={"reason": e.message})
            raise

        user = await self.user_store.find_by_id(claims["sub"])
        if user is None:
            log_security_event("token_for_unknown_user", user_id=claims["sub"])
            raise AuthenticationError("User for this token no longer exists", code="INVALID_TOKEN")
        return user

    async def get_current_user(self, user_id: str, token: str) -> Dict[str, Any]:
        """Profile of the caller plus expiry information for the token in use."""
        user = await self.user_store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        claims = self.jwt_manager.verify_token(token)
        return {
            "user": user.to_profile(),
            "token_info": {
                "expires_at": claims["exp"],
                "remaining_time": self.jwt_manager.get_token_remaining_time(claims),
            },
        }

    async def get_user_profile(self, user_id: str) -> UserProfile:
        user = await self.user_store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return user.to_profile()

    async def update_profile(self, user_id: str, request: UpdateProfileRequest) -> UserProfile:
        """
        Change the caller's display name and/or avatar URL.

        Raises:
            ValidationError: Neither field was given.
            NotFoundError: The user no longer exists.
        """
        if request.is_empty():
            raise ValidationError("No fields to update")
        user = await self.user_store.update_profile(
            user_id, name=request.name, profile_image_url=request.profile_image_url
        )
        logger.info("Updated profile of user %s", user_id)
        return user.to_profile()

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Report whether `token` is valid without requiring it as the request credential.

        Invalid tokens are reported as `{"valid": False}` rather than raised.
        """
        try:
            claims = self.jwt_manager.verify_token(token)
        except AuthenticationError as e:
            log_security_event("token_verification_failed", details={"reason": e.message})
            return {"valid": False, "reason": e.message}

        user: Optional[UserProfile] = None
        found = await self.user_store.find_by_id(claims["sub"])
        if found is not None:
            user = found.to_profile()
        return {
            "valid": user is not None,
            "user_id": claims["sub"],
            "email": claims.get("email"),
            "expires_at": claims["exp"],
            "remaining_time": self.jwt_manager.get_token_remaining_time(claims),
            "user": user,
        }

    async def get_status(self) -> Dict[str, Any]:
        return {
            "status": "active",
            "user_count": await self.user_store.get_user_count(),
            "jwt": self.jwt_manager.get_config_info(),
            "min_password_length": settings.MIN_PASSWORD_LENGTH,
        }
