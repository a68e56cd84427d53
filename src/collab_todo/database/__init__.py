"""In-memory storage for users, projects, memberships and todos."""

from collab_todo.database.store import InMemoryStore
from collab_todo.database.user_store import UserStore

__all__ = ["InMemoryStore", "UserStore"]
