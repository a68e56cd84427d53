"""Use-case services sitting between the routers and the stores."""

from collab_todo.services.auth_service import AuthService
from collab_todo.services.project_service import ProjectService
from collab_todo.services.todo_service import TodoService

__all__ = ["AuthService", "ProjectService", "TodoService"]
