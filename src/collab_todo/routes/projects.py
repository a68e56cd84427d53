"""
Project and membership endpoints under `/api/projects`.
"""

from fastapi import APIRouter, Depends, Query, status

from collab_todo.models.api_models import success_response
from collab_todo.models.project_models import (
    CreateProjectRequest,
    InviteMemberRequest,
    UpdateMemberRoleRequest,
    UpdateProjectRequest,
)
from collab_todo.models.todo_models import TodoFilters, TodoResponse
from collab_todo.models.user_models import User
from collab_todo.routes.auth.dependencies import get_current_user_dep, get_project_service, get_todo_service
from collab_todo.routes.todos import project_todo_filters
from collab_todo.services.project_service import ProjectService
from collab_todo.services.todo_service import TodoService

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: CreateProjectRequest,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    """Create a project; the caller becomes its OWNER."""
    project = await project_service.create_project(request, current_user.id)
    return success_response(project)


@router.get("")
async def list_projects(
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    projects = await project_service.get_user_projects(current_user.id)
    return success_response(projects, count=len(projects))


@router.get("/{project_id}")
async def get_project(
    project_id: int,
    include_members: bool = Query(True, description="Include the member list"),
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    detail = await project_service.get_project_detail(project_id, current_user.id, include_members=include_members)
    return success_response(detail)


@router.put("/{project_id}")
async def update_project(
    project_id: int,
    request: UpdateProjectRequest,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    project = await project_service.update_project(project_id, request, current_user.id)
    return success_response(project)


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    await project_service.delete_project(project_id, current_user.id)
    return success_response({"deleted": True, "id": project_id})


@router.get("/{project_id}/todos")
async def list_project_todos(
    project_id: int,
    filters: TodoFilters = Depends(project_todo_filters),
    current_user: User = Depends(get_current_user_dep),
    todo_service: TodoService = Depends(get_todo_service),
):
    todos = await todo_service.get_todos_by_project(project_id, current_user.id, filters)
    return success_response([TodoResponse.from_todo(t) for t in todos], count=len(todos))


@router.get("/{project_id}/members")
async def list_members(
    project_id: int,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    members = await project_service.get_project_members(project_id, current_user.id)
    return success_response(members, count=len(members))


@router.post("/{project_id}/members", status_code=status.HTTP_201_CREATED)
async def invite_member(
    project_id: int,
    request: InviteMemberRequest,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    member = await project_service.invite_member(project_id, request, current_user.id)
    return success_response(member)


@router.put("/{project_id}/members/{user_id}/role")
async def update_member_role(
    project_id: int,
    user_id: str,
    request: UpdateMemberRoleRequest,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    member = await project_service.update_member_role(project_id, user_id, request.role, current_user.id)
    return success_response(member)


@router.delete("/{project_id}/members/{user_id}")
async def remove_member(
    project_id: int,
    user_id: str,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    await project_service.remove_member(project_id, user_id, current_user.id)
    return success_response({"removed": True, "user_id": user_id})


@router.post("/{project_id}/leave")
async def leave_project(
    project_id: int,
    current_user: User = Depends(get_current_user_dep),
    project_service: ProjectService = Depends(get_project_service),
):
    await project_service.leave_project(project_id, current_user.id)
    return success_response({"left": True, "project_id": project_id})
