"""
# Todo Service

Use cases for project-scoped todos. Every operation follows the same sequence:

1.  **Validate** the input (`ValidationError`).
2.  **Load** the todo or project (`NotFoundError`).
3.  **Authorise** against the caller's active membership (`PermissionDeniedError`).
4.  **Mutate** through the store and return the result.

A caller without an active membership in the todo's project is treated as having no access at all.
"""

from typing import List, Optional

from collab_todo.database.store import InMemoryStore
from collab_todo.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from collab_todo.managers import permission_manager
from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.project_models import ProjectMember
from collab_todo.models.todo_models import CreateTodoRequest, Priority, Todo, TodoFilters, UpdateTodoRequest
from collab_todo.utils.validation import utc_now

logger = get_logger(prefix="[TodoService]")


def _ensure_positive_id(value: int, label: str = "ID") -> None:
    if value <= 0:
        raise ValidationError(f"{label} must be a positive integer")


class TodoService:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def _require_membership(self, project_id: int, user_id: str, message: str) -> ProjectMember:
        membership = await self.store.find_project_member(project_id, user_id)
        if membership is None:
            logger.warning("User %s has no access to project %s", user_id, project_id)
            raise PermissionDeniedError(message)
        return membership

    async def _ensure_assignee_is_member(self, project_id: int, assignee_id: Optional[str]) -> None:
        if assignee_id is None:
            return
        if await self.store.find_project_member(project_id, assignee_id) is None:
            raise ValidationError("The assignee is not a member of this project")

    async def create_todo(self, request: CreateTodoRequest, user_id: str) -> Todo:
        """
        Create a todo in `request.project_id` on behalf of `user_id`.

        Raises:
            ValidationError: Non-positive project ID, past due date, or assignee outside the project.
            NotFoundError: The project does not exist.
            PermissionDeniedError: The caller is not a member, or only a VIEWER.
        """
        _ensure_positive_id(request.project_id, "Project ID")
        if request.due_date is not None and request.due_date <= utc_now():
            raise ValidationError("Due date must be in the future")

        project = await self.store.find_project_by_id(request.project_id)
        if project is None:
            raise NotFoundError(f"Project {request.project_id} not found")

        membership = await self._require_membership(project.id, user_id, "You don't have access to this project")
        if not permission_manager.can_create_todo(membership.role):
            logger.warning("User %s (%s) denied todo creation in project %s", user_id, membership.role.value, project.id)
            raise PermissionDeniedError("You don't have permission to create todos in this project")

        await self._ensure_assignee_is_member(project.id, request.assigned_to)

        todo = await self.store.save_todo(
            title=request.title,
            description=request.description,
            priority=request.priority or Priority.MEDIUM,
            project_id=project.id,
            created_by=user_id,
            assigned_to=request.assigned_to,
            due_date=request.due_date,
        )
        logger.info("Created todo %s in project %s by user %s", todo.id, project.id, user_id)
        return todo

    async def get_todo_by_id(self, todo_id: int, user_id: str) -> Todo:
        _ensure_positive_id(todo_id)
        todo = await self.store.find_todo_by_id(todo_id)
        if todo is None:
            raise NotFoundError(f"Todo {todo_id} not found")
        await self._require_membership(todo.project_id, user_id, "You don't have access to this todo")
        return todo

    async def update_todo(self, todo_id: int, request: UpdateTodoRequest, user_id: str) -> Todo:
        """
        Apply a partial update.

        A due date in the past is only accepted when the same update marks the todo completed.
        """
        _ensure_positive_id(todo_id)
        if request.is_empty():
            raise ValidationError("No fields to update")
        if request.due_date is not None and request.due_date <= utc_now() and request.is_completed is not True:
            raise ValidationError("Due date must be in the future")

        todo = await self.get_todo_by_id(todo_id, user_id)
        membership = await self._require_membership(todo.project_id, user_id, "You don't have access to this todo")
        if not permission_manager.can_edit_todo(membership.role, todo, user_id):
            logger.warning("User %s denied edit of todo %s", user_id, todo_id)
            raise PermissionDeniedError("You don't have permission to edit this todo")

        await self._ensure_assignee_is_member(todo.project_id, request.assigned_to)

        updated = await self.store.update_todo(todo_id, **request.model_dump(exclude_none=True))
        if updated is None:
            raise NotFoundError(f"Todo {todo_id} not found")
        logger.info("Updated todo %s by user %s", todo_id, user_id)
        return updated

    async def toggle_todo(self, todo_id: int, user_id: str) -> Todo:
        """Flip the completion flag; needs the same rights as editing."""
        todo = await self.get_todo_by_id(todo_id, user_id)
        return await self.update_todo(todo_id, UpdateTodoRequest(is_completed=not todo.is_completed), user_id)

    async def get_all_todos(self, user_id: str, filters: Optional[TodoFilters] = None) -> List[Todo]:
        """Todos matching `filters` across every project the caller belongs to."""
        accessible = {project.id for project in await self.store.find_projects_by_user_id(user_id)}
        todos = await self.store.find_all_todos(filters or TodoFilters())
        return [todo for todo in todos if todo.project_id in accessible]

    async def get_todos_by_project(
        self, project_id: int, user_id: str, filters: Optional[TodoFilters] = None
    ) -> List[Todo]:
        _ensure_positive_id(project_id, "Project ID")
        if await self.store.find_project_by_id(project_id) is None:
            raise NotFoundError(f"Project {project_id} not found")
        await self._require_membership(project_id, user_id, "You don't have access to this project")
        scoped = (filters or TodoFilters()).model_copy(update={"project_id": project_id})
        return await self.store.find_all_todos(scoped)

    async def delete_todo(self, todo_id: int, user_id: str) -> None:
        todo = await self.get_todo_by_id(todo_id, user_id)
        membership = await self._require_membership(todo.project_id, user_id, "You don't have access to this todo")
        if not permission_manager.can_delete_todo(membership.role, todo, user_id):
            logger.warning("User %s denied deletion of todo %s", user_id, todo_id)
            raise PermissionDeniedError("You don't have permission to delete this todo")

        if not await self.store.delete_todo(todo_id):
            raise NotFoundError(f"Todo {todo_id} not found")
        logger.info("Deleted todo %s by user %s", todo_id, user_id)
