"""
# Project Models

Pydantic models for **projects and project membership**.

## Roles

Roles are ordered: `VIEWER (1) < MEMBER (2) < ADMIN (3) < OWNER (4)`. Comparison operators on
`ProjectRole` compare these levels, not the string values.

```python
ProjectRole.ADMIN.has_permission_of(ProjectRole.MEMBER)  # True
ProjectRole.MEMBER > ProjectRole.VIEWER                  # True
ProjectRole.from_string("admin")                         # ProjectRole.ADMIN
```

## Cached Counters

`Project.member_count` and `Project.todo_count` are maintained by the store on every add/remove
and are never recomputed from scratch.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collab_todo.utils.validation import ensure_not_blank, ensure_safe_text, looks_like_email

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class ProjectRole(str, Enum):
    """
    Membership roles within a project.

    Attributes:
        VIEWER: Read-only access.
        MEMBER: Can create todos and edit their own or assigned todos.
        ADMIN: Can manage the project, its members and any todo.
        OWNER: Full control; the only role that can delete the project.
    """

    VIEWER = "VIEWER"
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"

    @property
    def level(self) -> int:
        return _ROLE_LEVELS[self]

    def has_permission_of(self, other: "ProjectRole") -> bool:
        return self >= other

    def has_higher_permission_than(self, other: "ProjectRole") -> bool:
        return self > other

    def __lt__(self, other):
        if isinstance(other, ProjectRole):
            return self.level < other.level
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, ProjectRole):
            return self.level <= other.level
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, ProjectRole):
            return self.level > other.level
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, ProjectRole):
            return self.level >= other.level
        return NotImplemented

    @classmethod
    def from_string(cls, value: str) -> "ProjectRole":
        """Case-insensitive lookup; unknown values fall back to MEMBER."""
        for role in cls:
            if role.name == value.strip().upper():
                return role
        return cls.MEMBER


_ROLE_LEVELS = {
    ProjectRole.VIEWER: 1,
    ProjectRole.MEMBER: 2,
    ProjectRole.ADMIN: 3,
    ProjectRole.OWNER: 4,
}


class Project(BaseModel):
    """
    Stored project record.

    Attributes:
        id (int): Sequential identifier assigned by the store.
        name (str): Project name (1-100 characters).
        description (Optional[str]): Optional description (up to 500 characters).
        owner_id (str): User ID of the creator, who holds the OWNER membership.
        is_private (bool): Visibility flag.
        member_count (int): Cached count of active memberships.
        todo_count (int): Cached count of todos in the project.
        created_at (datetime): Creation timestamp (UTC).
        updated_at (datetime): Last modification timestamp (UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: Optional[str] = None
    owner_id: str
    is_private: bool = False
    member_count: int = 1
    todo_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProjectMember(BaseModel):
    """Membership of one user in one project."""

    model_config = ConfigDict(frozen=True)

    id: int
    project_id: int
    user_id: str
    role: ProjectRole
    joined_at: datetime
    invited_by: Optional[str] = None
    is_active: bool = True


class ProjectMemberInfo(ProjectMember):
    """Membership enriched with the member's public profile fields."""

    user_email: str
    user_name: str


class ProjectDetailInfo(BaseModel):
    """A project together with the caller's role and, optionally, its member list."""

    project: Project
    current_user_role: ProjectRole
    members: Optional[List[ProjectMemberInfo]] = None


class CreateProjectRequest(BaseModel):
    """Request model for creating a project."""

    name: str = Field(..., max_length=NAME_MAX_LENGTH, description="Project name")
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH, description="Project description")
    is_private: bool = Field(False, description="Whether the project is private")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        ensure_not_blank(v, "Project name")
        return ensure_safe_text(v, "Project name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return ensure_safe_text(v, "Description")


class UpdateProjectRequest(BaseModel):
    """Partial update; fields left as `None` keep their stored value."""

    name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    is_private: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        ensure_not_blank(v, "Project name")
        return ensure_safe_text(v, "Project name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return ensure_safe_text(v, "Description")

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class InviteMemberRequest(BaseModel):
    """Invite an existing user, identified by email, into a project."""

    email: str = Field(..., description="Email of the user to invite")
    role: ProjectRole = Field(ProjectRole.MEMBER, description="Role to grant (OWNER not allowed)")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not looks_like_email(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v):
        return ProjectRole.from_string(v) if isinstance(v, str) else v

    @field_validator("role")
    @classmethod
    def reject_owner(cls, v: ProjectRole) -> ProjectRole:
        if v == ProjectRole.OWNER:
            raise ValueError("Cannot invite a member as OWNER")
        return v


class UpdateMemberRoleRequest(BaseModel):
    role: ProjectRole

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v):
        return ProjectRole.from_string(v) if isinstance(v, str) else v

    @field_validator("role")
    @classmethod
    def reject_owner(cls, v: ProjectRole) -> ProjectRole:
        if v == ProjectRole.OWNER:
            raise ValueError("Cannot assign the OWNER role")
        return v
