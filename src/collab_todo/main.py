"""
# Collaborative Todo API: Application Entry Point

Builds the FastAPI application: storage, services, middleware, exception handlers and routers.

## Application Factory

`create_app()` constructs exactly one `InMemoryStore`, one `UserStore`, one `JWTManager` and one
instance of each service, and stores them on `app.state`. Route dependencies read them from there;
nothing is re-created per request. Tests call `create_app()` to get an isolated application.

## Error Mapping

| Source | HTTP | `error.code` |
|--------|------|--------------|
| `TodoAppError` subclasses | their `status_code` | their `code` |
| Request body/query validation | 400 | `VALIDATION_ERROR` |
| Framework HTTP errors (missing token, unknown route) | original status | derived from status |
| Anything else | 500 | `INTERNAL_ERROR` (logged with traceback) |

## Running

```bash
uvicorn collab_todo.main:app --host 0.0.0.0 --port 8080
python -m collab_todo.main
```
"""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
import uvicorn

from collab_todo.config import settings
from collab_todo.database.store import InMemoryStore
from collab_todo.database.user_store import UserStore
from collab_todo.exceptions import TodoAppError
from collab_todo.managers.jwt_manager import JWTManager
from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.api_models import error_response
from collab_todo.routes.auth import router as auth_router
from collab_todo.routes.health import router as health_router
from collab_todo.routes.projects import router as projects_router
from collab_todo.routes.todos import router as todos_router
from collab_todo.routes.users import router as users_router
from collab_todo.services.auth_service import AuthService
from collab_todo.services.project_service import ProjectService
from collab_todo.services.todo_service import TodoService
from collab_todo.utils.logging_utils import (
    RequestLoggingMiddleware,
    log_application_lifecycle,
    log_error_with_context,
)

logger = get_logger(prefix="[Main]")

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_REQUIRED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; storage is process memory, so there is nothing to connect or close."""
    startup_time = time.time()
    log_application_lifecycle(
        "startup",
        {"app": settings.APP_NAME, "version": settings.APP_VERSION, "host": settings.HOST, "port": settings.PORT},
    )
    yield
    log_application_lifecycle(
        "shutdown",
        {
            "uptime": f"{time.time() - startup_time:.1f}s",
            "projects": await app.state.store.count_projects(),
            "todos": await app.state.store.count_todos(),
        },
    )


async def todo_app_error_handler(request: Request, exc: TodoAppError) -> JSONResponse:
    if exc.status_code >= 500:
        log_error_with_context(exc, {"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.code, exc.message, exc.details))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    details = {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]}
    return JSONResponse(status_code=400, content=error_response("VALIDATION_ERROR", message, details))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error_with_context(exc, {"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=500, content=error_response("INTERNAL_ERROR", "Internal server error"))


def create_app() -> FastAPI:
    """Build a fully wired application with fresh, empty storage."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Collaborative todo and project management API with JWT authentication.",
        lifespan=lifespan,
    )

    store = InMemoryStore()
    user_store = UserStore()
    jwt_manager = JWTManager.from_settings()
    app.state.store = store
    app.state.user_store = user_store
    app.state.jwt_manager = jwt_manager
    app.state.auth_service = AuthService(user_store, jwt_manager)
    app.state.todo_service = TodoService(store)
    app.state.project_service = ProjectService(store, user_store)

    app.add_exception_handler(TodoAppError, todo_app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    cors_origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    log_application_lifecycle("middleware_configured", {"cors_origins": cors_origins})

    routers_config = [
        ("health", health_router, "Service status endpoints"),
        ("auth", auth_router, "Registration, login and token endpoints"),
        ("todos", todos_router, "Todo management endpoints"),
        ("projects", projects_router, "Project and membership endpoints"),
        ("users", users_router, "User profile endpoints"),
    ]
    for router_name, router, description in routers_config:
        app.include_router(router)
        logger.debug("Included %s router: %s", router_name, description)

    log_application_lifecycle("routers_configured", {"routers": [name for name, _, _ in routers_config]})
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("collab_todo.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG, log_level="info")
