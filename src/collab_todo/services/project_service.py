"""
# Project Service

Project and membership use cases.

## Operations

*   **Projects**: create, list the caller's projects, read, read detail (with the caller's role and
    the member list), update (ADMIN+), delete (OWNER only, cascades to todos and memberships).
*   **Members**: list (enriched with email and name), invite by email, change role, remove, leave.

Reading anything about a project requires an active membership; non-members get
`PermissionDeniedError` rather than a partial view.
"""

from typing import List, Optional

from collab_todo.database.store import InMemoryStore
from collab_todo.database.user_store import UserStore
from collab_todo.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from collab_todo.managers import permission_manager
from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.project_models import (
    CreateProjectRequest,
    InviteMemberRequest,
    Project,
    ProjectDetailInfo,
    ProjectMember,
    ProjectMemberInfo,
    ProjectRole,
    UpdateProjectRequest,
)

logger = get_logger(prefix="[ProjectService]")

UNKNOWN_USER_NAME = "Unknown user"


class ProjectService:
    def __init__(self, store: InMemoryStore, user_store: UserStore):
        self.store = store
        self.user_store = user_store

    async def _load_with_membership(self, project_id: int, user_id: str):
        if project_id <= 0:
            raise ValidationError("Project ID must be a positive integer")
        project = await self.store.find_project_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        membership = await self.store.find_project_member(project_id, user_id)
        if membership is None:
            logger.warning("User %s has no access to project %s", user_id, project_id)
            raise PermissionDeniedError("You don't have access to this project")
        return project, membership

    async def _load_target(self, project_id: int, target_user_id: str) -> ProjectMember:
        target = await self.store.find_project_member(project_id, target_user_id)
        if target is None:
            raise NotFoundError("The target user is not a member of this project")
        return target

    async def _enrich(self, member: ProjectMember) -> ProjectMemberInfo:
        user = await self.user_store.find_by_id(member.user_id)
        return ProjectMemberInfo(
            **member.model_dump(),
            user_email=user.email if user else "",
            user_name=user.name if user else UNKNOWN_USER_NAME,
        )

    async def _member_list(self, project_id: int) -> List[ProjectMemberInfo]:
        """Enriched members, highest role first, then by join order."""
        members = sorted(await self.store.find_project_members(project_id), key=lambda m: m.role, reverse=True)
        return [await self._enrich(m) for m in members]

    # --- Projects ---

    async def create_project(self, request: CreateProjectRequest, owner_id: str) -> Project:
        project = await self.store.save_project(
            name=request.name,
            description=request.description,
            owner_id=owner_id,
            is_private=request.is_private,
        )
        logger.info("Created project %s owned by %s", project.id, owner_id)
        return project

    async def get_user_projects(self, user_id: str) -> List[Project]:
        return await self.store.find_projects_by_user_id(user_id)

    async def get_project_by_id(self, project_id: int, user_id: str) -> Project:
        project, _ = await self._load_with_membership(project_id, user_id)
        return project

    async def get_project_detail(
        self, project_id: int, user_id: str, include_members: bool = True
    ) -> ProjectDetailInfo:
        project, membership = await self._load_with_membership(project_id, user_id)
        members: Optional[List[ProjectMemberInfo]] = None
        if include_members:
            members = await self._member_list(project_id)
        return ProjectDetailInfo(project=project, current_user_role=membership.role, members=members)

    async def update_project(self, project_id: int, request: UpdateProjectRequest, user_id: str) -> Project:
        if request.is_empty():
            raise ValidationError("No fields to update")
        _, membership = await self._load_with_membership(project_id, user_id)
        if not permission_manager.can_manage_project(membership.role):
            logger.warning("User %s denied update of project %s", user_id, project_id)
            raise PermissionDeniedError("You don't have permission to update this project")

        updated = await self.store.update_project(
            project_id, name=request.name, description=request.description, is_private=request.is_private
        )
        if updated is None:
            raise NotFoundError(f"Project {project_id} not found")
        logger.info("Updated project %s by user %s", project_id, user_id)
        return updated

    async def delete_project(self, project_id: int, user_id: str) -> None:
        _, membership = await self._load_with_membership(project_id, user_id)
        if not permission_manager.can_delete_project(membership.role):
            logger.warning("User %s denied deletion of project %s", user_id, project_id)
            raise PermissionDeniedError("Only the project owner can delete the project")

        if not await self.store.delete_project(project_id):
            raise NotFoundError(f"Project {project_id} not found")
        logger.info("Deleted project %s by user %s", project_id, user_id)

    # --- Members ---

    async def get_project_members(self, project_id: int, user_id: str) -> List[ProjectMemberInfo]:
        await self._load_with_membership(project_id, user_id)
        return await self._member_list(project_id)

    async def invite_member(self, project_id: int, request: InviteMemberRequest, inviter_id: str) -> ProjectMemberInfo:
        """
        Add an existing user, looked up by email, to the project.

        Raises:
            PermissionDeniedError: The inviter is below ADMIN or requests a role above their own.
            NotFoundError: No account uses `request.email`.
            ConflictError: The user is already an active member.
        """
        _, inviter = await self._load_with_membership(project_id, inviter_id)
        permission_manager.ensure_can_invite(inviter.role, request.role)

        invitee = await self.user_store.find_by_email(request.email)
        if invitee is None:
            raise NotFoundError("No user with this email exists", code="USER_NOT_FOUND")
        if await self.store.find_project_member(project_id, invitee.id) is not None:
            raise ConflictError("User is already a member of this project", code="ALREADY_MEMBER")

        member = await self.store.add_project_member(project_id, invitee.id, request.role, invited_by=inviter_id)
        logger.info("User %s invited %s to project %s as %s", inviter_id, invitee.id, project_id, request.role.value)
        return await self._enrich(member)

    async def update_member_role(
        self, project_id: int, target_user_id: str, new_role: ProjectRole, requester_id: str
    ) -> ProjectMemberInfo:
        _, requester = await self._load_with_membership(project_id, requester_id)
        target = await self._load_target(project_id, target_user_id)
        try:
            permission_manager.ensure_can_change_role(requester, target, new_role)
        except PermissionDeniedError:
            logger.warning("User %s denied role change of %s in project %s", requester_id, target_user_id, project_id)
            raise

        updated = await self.store.update_project_member_role(project_id, target_user_id, new_role)
        if updated is None:
            raise NotFoundError("The target user is not a member of this project")
        logger.info("Changed role of %s in project %s to %s", target_user_id, project_id, new_role.value)
        return await self._enrich(updated)

    async def remove_member(self, project_id: int, target_user_id: str, requester_id: str) -> None:
        _, requester = await self._load_with_membership(project_id, requester_id)
        target = await self._load_target(project_id, target_user_id)
        try:
            permission_manager.ensure_can_remove(requester, target)
        except PermissionDeniedError:
            logger.warning("User %s denied removal of %s from project %s", requester_id, target_user_id, project_id)
            raise

        if not await self.store.remove_project_member(project_id, target_user_id):
            raise NotFoundError("The target user is not a member of this project")
        logger.info("Removed %s from project %s by %s", target_user_id, project_id, requester_id)

    async def leave_project(self, project_id: int, user_id: str) -> None:
        await self.remove_member(project_id, user_id, user_id)
