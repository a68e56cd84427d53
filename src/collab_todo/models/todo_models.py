"""
# Todo Models

Data structures for **project-scoped todos**: the stored entity, the derived status view,
request payloads and the filter/sort descriptor used by the store's list query.

## Domain Model Overview

- **Todo**: immutable record owned by the store; updates replace the whole record.
- **Priority**: LOW (1) < MEDIUM (2) < HIGH (3). Sorting by priority uses the numeric level.
- **TodoStatus**: derived on every read, never stored:
    - `COMPLETED` when `is_completed` is set,
    - `OVERDUE` when not completed and the due date has passed,
    - `PENDING` otherwise.

## Usage Examples

```python
request = CreateTodoRequest(title="Write release notes", project_id=1, priority=Priority.HIGH)
filters = TodoFilters(project_id=1, sort=TodoSortField.PRIORITY, order=SortOrder.ASC)
```
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collab_todo.utils.validation import ensure_not_blank, ensure_safe_text, ensure_utc, utc_now

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


class Priority(str, Enum):
    """Todo priority levels.

    Attributes:
        LOW: Level 1.
        MEDIUM: Level 2 (default).
        HIGH: Level 3.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def level(self) -> int:
        return _PRIORITY_LEVELS[self]

    @classmethod
    def from_string(cls, value: str) -> "Priority":
        """Case-insensitive lookup; unknown values fall back to MEDIUM."""
        for priority in cls:
            if priority.name == value.strip().upper():
                return priority
        return cls.MEDIUM


_PRIORITY_LEVELS = {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}


class TodoStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"


class TodoSortField(str, Enum):
    CREATED_AT = "CREATED_AT"
    UPDATED_AT = "UPDATED_AT"
    PRIORITY = "PRIORITY"
    DUE_DATE = "DUE_DATE"
    TITLE = "TITLE"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class Todo(BaseModel):
    """Stored todo record.

    Attributes:
        id (int): Sequential identifier assigned by the store.
        title (str): Todo title (1-255 characters).
        description (Optional[str]): Optional description (up to 1000 characters).
        is_completed (bool): Completion flag.
        priority (Priority): Priority level.
        project_id (int): Owning project.
        created_by (str): User ID of the creator.
        assigned_to (Optional[str]): User ID of the assignee, always an active project member.
        created_at (datetime): Creation timestamp (UTC).
        updated_at (datetime): Last modification timestamp (UTC).
        due_date (Optional[datetime]): Optional deadline (UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: Optional[str] = None
    is_completed: bool = False
    priority: Priority = Priority.MEDIUM
    project_id: int
    created_by: str
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    due_date: Optional[datetime] = None

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None:
            return False
        return (now or utc_now()) > self.due_date

    def get_status(self, now: Optional[datetime] = None) -> TodoStatus:
        if self.is_completed:
            return TodoStatus.COMPLETED
        if self.is_overdue(now):
            return TodoStatus.OVERDUE
        return TodoStatus.PENDING

    def is_assigned_to(self, user_id: str) -> bool:
        return self.assigned_to == user_id

    def is_created_by(self, user_id: str) -> bool:
        return self.created_by == user_id


class TodoResponse(Todo):
    """Todo as returned to clients, with the derived status fields filled in."""

    status: TodoStatus
    is_overdue_now: bool = Field(False, serialization_alias="is_overdue")

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoResponse":
        now = utc_now()
        return cls(**todo.model_dump(), status=todo.get_status(now), is_overdue_now=todo.is_overdue(now))


class CreateTodoRequest(BaseModel):
    """Request model for creating a todo inside a project."""

    title: str = Field(..., max_length=TITLE_MAX_LENGTH, description="Todo title")
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH, description="Todo description")
    priority: Optional[Priority] = Field(None, description="Priority (defaults to MEDIUM)")
    project_id: int = Field(..., description="Owning project ID")
    assigned_to: Optional[str] = Field(None, description="Assignee user ID")
    due_date: Optional[datetime] = Field(None, description="Deadline, must be in the future")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        ensure_not_blank(v, "Title")
        return ensure_safe_text(v, "Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return ensure_safe_text(v, "Description")

    @field_validator("due_date")
    @classmethod
    def normalise_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class UpdateTodoRequest(BaseModel):
    """Partial update; fields left as `None` keep their stored value."""

    title: Optional[str] = Field(None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    is_completed: Optional[bool] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        ensure_not_blank(v, "Title")
        return ensure_safe_text(v, "Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return ensure_safe_text(v, "Description")

    @field_validator("due_date")
    @classmethod
    def normalise_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class TodoFilters(BaseModel):
    """Equality filters plus sort descriptor for todo list queries."""

    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    project_id: Optional[int] = None
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None
    sort: TodoSortField = TodoSortField.CREATED_AT
    order: SortOrder = SortOrder.DESC
