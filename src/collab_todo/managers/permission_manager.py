"""
# Permission Manager

Pure authorisation rules for projects, todos and memberships. Nothing here touches the store;
services load the caller's membership and hand it in.

## Todo Rules

| Action | Allowed when |
|--------|--------------|
| Create | MEMBER or above |
| Edit | MEMBER or above, the creator, or the assignee |
| Delete | ADMIN or above, or the creator |

## Project Rules

| Action | Allowed when |
|--------|--------------|
| Update project | ADMIN or above |
| Invite / manage members | ADMIN or above |
| Delete project | OWNER |

## Membership Changes

*   **Invite**: the granted role may not exceed the inviter's own role, and never OWNER.
*   **Role change**: the requester must be ADMIN or above and strictly outrank the target; the
    target may not be OWNER; the new role may not be OWNER or exceed the requester's role.
*   **Removal**: an OWNER can never be removed, not even by leaving. Anyone else may remove
    themselves. Removing someone else needs ADMIN or above and a target that does not outrank
    the requester.

The `ensure_*` helpers raise `PermissionDeniedError`; the `can_*` predicates return booleans.
"""

from collab_todo.exceptions import PermissionDeniedError
from collab_todo.models.project_models import ProjectMember, ProjectRole
from collab_todo.models.todo_models import Todo


def can_create_todo(role: ProjectRole) -> bool:
    return role.has_permission_of(ProjectRole.MEMBER)


def can_edit_todo(role: ProjectRole, todo: Todo, user_id: str) -> bool:
    return role.has_permission_of(ProjectRole.MEMBER) or todo.is_created_by(user_id) or todo.is_assigned_to(user_id)


def can_delete_todo(role: ProjectRole, todo: Todo, user_id: str) -> bool:
    return role.has_permission_of(ProjectRole.ADMIN) or todo.is_created_by(user_id)


def can_manage_project(role: ProjectRole) -> bool:
    return role.has_permission_of(ProjectRole.ADMIN)


def can_invite_members(role: ProjectRole) -> bool:
    return role.has_permission_of(ProjectRole.ADMIN)


def can_manage_members(role: ProjectRole) -> bool:
    return role.has_permission_of(ProjectRole.ADMIN)


def can_delete_project(role: ProjectRole) -> bool:
    return role == ProjectRole.OWNER


def ensure_can_invite(inviter_role: ProjectRole, requested_role: ProjectRole) -> None:
    if not can_invite_members(inviter_role):
        raise PermissionDeniedError("You don't have permission to invite members to this project")
    if requested_role == ProjectRole.OWNER:
        raise PermissionDeniedError("Cannot invite a member as OWNER")
    if inviter_role < requested_role:
        raise PermissionDeniedError("Cannot grant a role higher than your own")


def ensure_can_change_role(requester: ProjectMember, target: ProjectMember, new_role: ProjectRole) -> None:
    """
    Raise unless `requester` may move `target` to `new_role`.

    Raises:
        PermissionDeniedError: On any violated rule.
    """
    if not can_manage_members(requester.role):
        raise PermissionDeniedError("You don't have permission to change member roles")
    if target.role == ProjectRole.OWNER:
        raise PermissionDeniedError("Cannot change the role of the project owner")
    if new_role == ProjectRole.OWNER:
        raise PermissionDeniedError("Cannot assign the OWNER role")
    if requester.role <= target.role:
        raise PermissionDeniedError("Cannot change the role of a member with equal or higher permissions")
    if new_role.has_higher_permission_than(requester.role):
        raise PermissionDeniedError("Cannot grant a role higher than your own")


def ensure_can_remove(requester: ProjectMember, target: ProjectMember) -> None:
    if target.role == ProjectRole.OWNER:
        raise PermissionDeniedError("The project owner cannot be removed")
    if requester.user_id == target.user_id:
        return
    if not can_manage_members(requester.role):
        raise PermissionDeniedError("You don't have permission to remove members")
    if target.role.has_higher_permission_than(requester.role):
        raise PermissionDeniedError("Cannot remove a member with higher permissions")
