"""
Todo endpoints under `/api/todos`.

Every todo in a response carries its derived `status` and `is_overdue` fields, computed at
response time.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from collab_todo.models.api_models import success_response
from collab_todo.models.todo_models import (
    CreateTodoRequest,
    Priority,
    SortOrder,
    TodoFilters,
    TodoResponse,
    TodoSortField,
    UpdateTodoRequest,
)
from collab_todo.models.user_models import User
from collab_todo.routes.auth.dependencies import get_current_user_dep, get_todo_service
from collab_todo.services.todo_service import TodoService

router = APIRouter(prefix="/api/todos", tags=["Todos"])


def project_todo_filters(
    completed: Optional[bool] = Query(None, description="Filter by completion state"),
    priority: Optional[str] = Query(None, description="Filter by priority (LOW, MEDIUM, HIGH; case-insensitive)"),
    assigned_to: Optional[str] = Query(None, description="Filter by assignee user ID"),
    created_by: Optional[str] = Query(None, description="Filter by creator user ID"),
    sort: TodoSortField = Query(TodoSortField.CREATED_AT, description="Sort field"),
    order: SortOrder = Query(SortOrder.DESC, description="Sort direction"),
) -> TodoFilters:
    """Filters for routes whose path already names the project."""
    return TodoFilters(
        completed=completed,
        priority=Priority.from_string(priority) if priority else None,
        assigned_to=assigned_to,
        created_by=created_by,
        sort=sort,
        order=order,
    )


def todo_filters(
    project_id: Optional[int] = Query(None, description="Filter by project"),
    filters: TodoFilters = Depends(project_todo_filters),
) -> TodoFilters:
    return filters.model_copy(update={"project_id": project_id})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_todo(
    request: CreateTodoRequest,
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    todo = await todo_service.create_todo(request, current_user.id)
    return success_response(TodoResponse.from_todo(todo))


@router.get("")
async def list_todos(
    filters: TodoFilters = Depends(todo_filters),
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    """Todos across all of the caller's projects."""
    todos = await todo_service.get_all_todos(current_user.id, filters)
    return success_response([TodoResponse.from_todo(t) for t in todos], count=len(todos))


@router.get("/{todo_id}")
async def get_todo(
    todo_id: int,
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    todo = await todo_service.get_todo_by_id(todo_id, current_user.id)
    return success_response(TodoResponse.from_todo(todo))


@router.put("/{todo_id}")
async def update_todo(
    todo_id: int,
    request: UpdateTodoRequest,
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    todo = await todo_service.update_todo(todo_id, request, current_user.id)
    return success_response(TodoResponse.from_todo(todo))


@router.patch("/{todo_id}/toggle")
async def toggle_todo(
    todo_id: int,
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    todo = await todo_service.toggle_todo(todo_id, current_user.id)
    return success_response(TodoResponse.from_todo(todo))


@router.delete("/{todo_id}")
async def delete_todo(
    todo_id: int,
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    await todo_service.delete_todo(todo_id, current_user.id)
    return success_response({"deleted": True, "id": todo_id})
