"""
# User Store

In-memory user accounts keyed by ID, with a secondary email index.

Emails are normalised (trimmed, lower-cased) before every lookup, so `A@B.COM` and `a@b.com`
are the same account. Passwords are hashed with bcrypt before they reach the store's maps.
"""

import asyncio
import uuid
from typing import Dict, Optional

from collab_todo.exceptions import ConflictError, NotFoundError
from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.user_models import User
from collab_todo.utils.security_utils import hash_password, verify_password
from collab_todo.utils.validation import utc_now

logger = get_logger(prefix="[UserStore]")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def __init__(self):
        self._lock = asyncio.Lock()
        self._users: Dict[str, User] = {}
        self._email_index: Dict[str, str] = {}

    async def create_user(self, email: str, password: str, name: str) -> User:
        """
        Register a new account.

        Raises:
            ConflictError: If an account with the same (normalised) email exists.
        """
        email = normalize_email(email)
        # bcrypt runs in a worker thread, outside the lock
        password_hash = await asyncio.to_thread(hash_password, password)
        async with self._lock:
            if email in self._email_index:
                raise ConflictError("User with this email already exists", code="EMAIL_ALREADY_EXISTS")
            now = utc_now()
            user = User(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=password_hash,
                name=name.strip(),
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._email_index[email] = user.id
        logger.info("Created user %s", user.id)
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        async with self._lock:
            user_id = self._email_index.get(normalize_email(email))
            return self._users.get(user_id) if user_id else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        async with self._lock:
            return self._users.get(user_id)

    async def email_exists(self, email: str) -> bool:
        async with self._lock:
            return normalize_email(email) in self._email_index

    async def get_user_count(self) -> int:
        async with self._lock:
            return len(self._users)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Return the user when the password matches, otherwise `None`."""
        user = await self.find_by_email(email)
        if user is None:
            return None
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            return None
        return user

    async def update_profile(
        self, user_id: str, name: Optional[str] = None, profile_image_url: Optional[str] = None
    ) -> User:
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("User not found", code="USER_NOT_FOUND")
            changes = {}
            if name is not None:
                changes["name"] = name.strip()
            if profile_image_url is not None:
                changes["profile_image_url"] = profile_image_url
            if not changes:
                return user
            changes["updated_at"] = utc_now()
            updated = user.model_copy(update=changes)
            self._users[user_id] = updated
            return updated
