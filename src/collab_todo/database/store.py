"""
# In-Memory Store

Process-local storage for projects, memberships and todos.

## Design

*   **Sequential IDs**: one counter per entity type, starting at 1, never reused.
*   **Immutable records**: entities are frozen Pydantic models; every change replaces the
    stored record with `model_copy(update=...)`, so callers can never mutate stored state.
*   **Manual bookkeeping**: `Project.member_count` and `Project.todo_count` are adjusted on
    every add and remove; deleting a project removes its todos and memberships, and removing a
    member clears them as assignee on that project's todos.
*   **Serialisation**: every public coroutine runs under one `asyncio.Lock`, so each call is
    atomic with respect to concurrent requests. Multi-call sequences in the services are not.

"Not found" is reported as `None` or `False`; nothing here raises for missing entities.
"""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional

from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.project_models import Project, ProjectMember, ProjectRole
from collab_todo.models.todo_models import Priority, SortOrder, Todo, TodoFilters, TodoSortField
from collab_todo.utils.validation import utc_now

logger = get_logger(prefix="[InMemoryStore]")


def _next_timestamp(previous: datetime) -> datetime:
    """Current time, clamped so `updated_at` never moves backwards."""
    now = utc_now()
    return now if now >= previous else previous


class InMemoryStore:
    """Projects, project members and todos, guarded by a single lock."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._projects: Dict[int, Project] = {}
        self._members: Dict[int, ProjectMember] = {}
        self._todos: Dict[int, Todo] = {}
        self._next_project_id = 1
        self._next_member_id = 1
        self._next_todo_id = 1

    # --- Todos ---

    async def save_todo(
        self,
        title: str,
        project_id: int,
        created_by: str,
        description: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
        assigned_to: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> Todo:
        async with self._lock:
            now = utc_now()
            todo = Todo(
                id=self._next_todo_id,
                title=title,
                description=description,
                priority=priority,
                project_id=project_id,
                created_by=created_by,
                assigned_to=assigned_to,
                created_at=now,
                updated_at=now,
                due_date=due_date,
            )
            self._next_todo_id += 1
            self._todos[todo.id] = todo
            self._adjust_project_counter(project_id, "todo_count", 1)
            return todo

    async def find_todo_by_id(self, todo_id: int) -> Optional[Todo]:
        async with self._lock:
            return self._todos.get(todo_id)

    async def update_todo(self, todo_id: int, **fields) -> Optional[Todo]:
        """
        Merge the non-`None` keyword arguments into the stored todo.

        Accepted fields: `title`, `description`, `is_completed`, `priority`, `assigned_to`, `due_date`.
        """
        async with self._lock:
            existing = self._todos.get(todo_id)
            if existing is None:
                return None
            changes = {key: value for key, value in fields.items() if value is not None}
            changes["updated_at"] = _next_timestamp(existing.updated_at)
            updated = existing.model_copy(update=changes)
            self._todos[todo_id] = updated
            return updated

    async def find_all_todos(self, filters: Optional[TodoFilters] = None) -> List[Todo]:
        filters = filters or TodoFilters()
        async with self._lock:
            todos = [todo for todo in self._todos.values() if self._matches(todo, filters)]
        return self._sort_todos(todos, filters.sort, filters.order)

    async def delete_todo(self, todo_id: int) -> bool:
        async with self._lock:
            todo = self._todos.pop(todo_id, None)
            if todo is None:
                return False
            self._adjust_project_counter(todo.project_id, "todo_count", -1)
            return True

    async def count_todos(self) -> int:
        async with self._lock:
            return len(self._todos)

    @staticmethod
    def _matches(todo: Todo, filters: TodoFilters) -> bool:
        if filters.project_id is not None and todo.project_id != filters.project_id:
            return False
        if filters.assigned_to is not None and todo.assigned_to != filters.assigned_to:
            return False
        if filters.created_by is not None and todo.created_by != filters.created_by:
            return False
        if filters.completed is not None and todo.is_completed != filters.completed:
            return False
        if filters.priority is not None and todo.priority != filters.priority:
            return False
        return True

    @staticmethod
    def _sort_todos(todos: List[Todo], field: TodoSortField, order: SortOrder) -> List[Todo]:
        # ties keep id order
        todos = sorted(todos, key=lambda t: t.id)
        reverse = order == SortOrder.DESC

        if field == TodoSortField.DUE_DATE:
            dated = [t for t in todos if t.due_date is not None]
            undated = [t for t in todos if t.due_date is None]
            dated.sort(key=lambda t: t.due_date, reverse=reverse)
            return dated + undated

        key_funcs = {
            TodoSortField.CREATED_AT: lambda t: t.created_at,
            TodoSortField.UPDATED_AT: lambda t: t.updated_at,
            TodoSortField.PRIORITY: lambda t: t.priority.level,
            TodoSortField.TITLE: lambda t: t.title,
        }
        return sorted(todos, key=key_funcs[field], reverse=reverse)

    # --- Projects ---

    async def save_project(
        self, name: str, owner_id: str, description: Optional[str] = None, is_private: bool = False
    ) -> Project:
        """Create a project and the creator's OWNER membership."""
        async with self._lock:
            now = utc_now()
            project = Project(
                id=self._next_project_id,
                name=name,
                description=description,
                owner_id=owner_id,
                is_private=is_private,
                member_count=1,
                todo_count=0,
                created_at=now,
                updated_at=now,
            )
            self._next_project_id += 1
            self._projects[project.id] = project
            self._insert_member(project.id, owner_id, ProjectRole.OWNER, invited_by=None, joined_at=now)
            return project

    async def find_project_by_id(self, project_id: int) -> Optional[Project]:
        async with self._lock:
            return self._projects.get(project_id)

    async def find_projects_by_user_id(self, user_id: str) -> List[Project]:
        async with self._lock:
            project_ids = {m.project_id for m in self._members.values() if m.user_id == user_id and m.is_active}
            return [p for pid, p in sorted(self._projects.items()) if pid in project_ids]

    async def update_project(
        self,
        project_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_private: Optional[bool] = None,
    ) -> Optional[Project]:
        async with self._lock:
            existing = self._projects.get(project_id)
            if existing is None:
                return None
            changes = {
                key: value
                for key, value in (("name", name), ("description", description), ("is_private", is_private))
                if value is not None
            }
            changes["updated_at"] = _next_timestamp(existing.updated_at)
            updated = existing.model_copy(update=changes)
            self._projects[project_id] = updated
            return updated

    async def delete_project(self, project_id: int) -> bool:
        """Remove a project together with its todos and memberships."""
        async with self._lock:
            if self._projects.pop(project_id, None) is None:
                return False
            todo_ids = [tid for tid, t in self._todos.items() if t.project_id == project_id]
            member_ids = [mid for mid, m in self._members.items() if m.project_id == project_id]
            for tid in todo_ids:
                del self._todos[tid]
            for mid in member_ids:
                del self._members[mid]
            logger.debug(
                "Deleted project %s with %d todos and %d memberships", project_id, len(todo_ids), len(member_ids)
            )
            return True

    async def count_projects(self) -> int:
        async with self._lock:
            return len(self._projects)

    # --- Members ---

    async def add_project_member(
        self, project_id: int, user_id: str, role: ProjectRole, invited_by: Optional[str] = None
    ) -> ProjectMember:
        async with self._lock:
            member = self._insert_member(project_id, user_id, role, invited_by=invited_by, joined_at=utc_now())
            self._adjust_project_counter(project_id, "member_count", 1, touch=True)
            return member

    async def find_project_members(self, project_id: int) -> List[ProjectMember]:
        async with self._lock:
            return [m for m in self._members.values() if m.project_id == project_id and m.is_active]

    async def find_project_member(self, project_id: int, user_id: str) -> Optional[ProjectMember]:
        async with self._lock:
            return self._find_member(project_id, user_id)

    async def update_project_member_role(
        self, project_id: int, user_id: str, role: ProjectRole
    ) -> Optional[ProjectMember]:
        async with self._lock:
            member = self._find_member(project_id, user_id)
            if member is None:
                return None
            updated = member.model_copy(update={"role": role})
            self._members[member.id] = updated
            return updated

    async def remove_project_member(self, project_id: int, user_id: str) -> bool:
        """Delete the membership and unassign the user from the project's todos."""
        async with self._lock:
            member = self._find_member(project_id, user_id)
            if member is None:
                return False
            del self._members[member.id]
            self._adjust_project_counter(project_id, "member_count", -1, touch=True)

            unassigned = 0
            for todo_id, todo in list(self._todos.items()):
                if todo.project_id == project_id and todo.assigned_to == user_id:
                    self._todos[todo_id] = todo.model_copy(
                        update={"assigned_to": None, "updated_at": _next_timestamp(todo.updated_at)}
                    )
                    unassigned += 1
            if unassigned:
                logger.debug("Unassigned %d todos from %s in project %s", unassigned, user_id, project_id)
            return True

    # --- Internal helpers (lock must be held) ---

    def _find_member(self, project_id: int, user_id: str) -> Optional[ProjectMember]:
        for member in self._members.values():
            if member.project_id == project_id and member.user_id == user_id and member.is_active:
                return member
        return None

    def _insert_member(
        self, project_id: int, user_id: str, role: ProjectRole, invited_by: Optional[str], joined_at: datetime
    ) -> ProjectMember:
        member = ProjectMember(
            id=self._next_member_id,
            project_id=project_id,
            user_id=user_id,
            role=role,
            joined_at=joined_at,
            invited_by=invited_by,
        )
        self._next_member_id += 1
        self._members[member.id] = member
        return member

    def _adjust_project_counter(self, project_id: int, counter: str, delta: int, touch: bool = False) -> None:
        project = self._projects.get(project_id)
        if project is None:
            return
        changes = {counter: max(getattr(project, counter) + delta, 0)}
        if touch:
            changes["updated_at"] = _next_timestamp(project.updated_at)
        self._projects[project_id] = project.model_copy(update=changes)
