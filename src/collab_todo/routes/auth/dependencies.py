"""
# Request Dependencies

FastAPI dependencies shared by every router.

## Authentication

`get_current_user_dep` reads the bearer token through `OAuth2PasswordBearer`, verifies it and
resolves the user. A missing header is answered by FastAPI itself with 401; an invalid or expired
token raises `AuthenticationError`, which the application maps to 401 `INVALID_TOKEN`.

```python
@router.get("/api/todos")
async def list_todos(current_user: User = Depends(get_current_user_dep)):
    ...
```

## Services

Services are built once in the application factory and stored on `app.state`; the `get_*_service`
dependencies hand out those instances.
"""

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.user_models import User
from collab_todo.services.auth_service import AuthService
from collab_todo.services.project_service import ProjectService
from collab_todo.services.todo_service import TodoService

logger = get_logger(prefix="[Security Dependencies]")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_todo_service(request: Request) -> TodoService:
    return request.app.state.todo_service


def get_project_service(request: Request) -> ProjectService:
    return request.app.state.project_service


async def get_current_user_dep(
    token: str = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the authenticated user for the current request.

    Raises:
        AuthenticationError: If the token is invalid, expired, or names an unknown user.
    """
    user = await auth_service.authenticate_token(token)
    logger.debug("Authenticated user %s", user.id)
    return user
