"""
# Domain Errors

Typed failures raised by the store-facing services and mapped to HTTP responses by the
exception handlers registered in `collab_todo.main`.

All errors derive from `TodoAppError`, itself a `ValueError`, so callers that only care about
"the request was rejected" can keep catching `ValueError`.

| Class | HTTP | Default code |
|-------|------|--------------|
| `ValidationError` | 400 | `VALIDATION_ERROR` |
| `AuthenticationError` | 401 | `AUTHENTICATION_REQUIRED` |
| `PermissionDeniedError` | 403 | `PERMISSION_DENIED` |
| `NotFoundError` | 404 | `NOT_FOUND` |
| `ConflictError` | 409 | `CONFLICT` |
"""

from typing import Any, Dict, Optional


class TodoAppError(ValueError):
    """Base class for every domain failure."""

    status_code: int = 400
    code: str = "BAD_REQUEST"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return error


class ValidationError(TodoAppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(TodoAppError):
    status_code = 401
    code = "AUTHENTICATION_REQUIRED"


class PermissionDeniedError(TodoAppError):
    status_code = 403
    code = "PERMISSION_DENIED"


class NotFoundError(TodoAppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(TodoAppError):
    status_code = 409
    code = "CONFLICT"
