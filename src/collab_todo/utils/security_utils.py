"""
Password hashing helpers built on `bcrypt`.

bcrypt embeds a random salt and the cost factor in every hash, so equal passwords never produce
equal hashes and verification needs nothing but the stored string.
"""

from typing import Optional

import bcrypt

from collab_todo.config import settings

# bcrypt only looks at the first 72 bytes of input
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plain-text password.

    Args:
        password (str): The plain-text password.
        rounds (Optional[int]): bcrypt cost factor; defaults to `settings.BCRYPT_ROUNDS`.

    Returns:
        str: The bcrypt hash, including salt and cost.
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a plain-text password against a stored hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False
