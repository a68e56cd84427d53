"""
Service status endpoints.

*   `GET /` and `GET /health`: liveness plus basic counters.
*   `GET /api`: API index with version and endpoint groups.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from collab_todo.config import settings
from collab_todo.models.api_models import success_response

router = APIRouter(tags=["Health"])


async def _status_payload(request: Request) -> dict:
    store = request.app.state.store
    user_store = request.app.state.user_store
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "stats": {
            "projects": await store.count_projects(),
            "todos": await store.count_todos(),
            "users": await user_store.get_user_count(),
        },
    }


@router.get("/")
async def root(request: Request):
    return success_response(await _status_payload(request))


@router.get("/health")
async def health_check(request: Request):
    return success_response(await _status_payload(request))


@router.get("/api")
async def api_index():
    return success_response(
        {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "endpoints": {
                "auth": "/api/auth",
                "todos": "/api/todos",
                "projects": "/api/projects",
            },
        }
    )
