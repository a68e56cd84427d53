"""
# Logging Utilities

Structured logging helpers shared by the application factory, the services and the auth layer.

*   `RequestLoggingMiddleware`: one line per HTTP request with method, path, status and duration.
*   `log_application_lifecycle`: startup/shutdown milestones.
*   `log_error_with_context`: unexpected failures, with the traceback and a context dict.
*   `log_security_event`: authentication failures and other security-relevant events.
"""

import time
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from collab_todo.managers.logging_manager import get_logger

logger = get_logger(prefix="[Logging]")
request_logger = get_logger(name="CollabTodo.requests", prefix="[Request]")
security_logger = get_logger(name="CollabTodo.security", prefix="[Security]")


def _format_details(details: Optional[Dict[str, Any]]) -> str:
    if not details:
        return ""
    return " " + " ".join(f"{key}={value}" for key, value in details.items())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request once the response is ready."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        client = request.client.host if request.client else "unknown"
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            request_logger.error(
                "%s %s -> unhandled error after %.1fms (client=%s)", request.method, request.url.path, duration_ms, client
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = "warning" if response.status_code >= 400 else "info"
        getattr(request_logger, level)(
            "%s %s -> %d in %.1fms (client=%s)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            client,
        )
        return response


def log_application_lifecycle(event: str, details: Optional[Dict[str, Any]] = None) -> None:
    logger.info("Lifecycle: %s%s", event, _format_details(details))


def log_error_with_context(error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with its traceback and the supplied context."""
    logger.error(
        "%s: %s%s",
        type(error).__name__,
        error,
        _format_details(context),
        exc_info=(type(error), error, error.__traceback__),
    )


def log_security_event(
    event_type: str,
    user_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    success: bool = False,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Record a security-relevant event.

    Args:
        event_type (str): Short event name, e.g. `login_failed` or `invalid_token`.
        user_id (Optional[str]): The user involved, if known.
        ip_address (Optional[str]): Client address, if known.
        success (bool): Whether the guarded action succeeded.
        details (Optional[Dict[str, Any]]): Extra key/value context.
    """
    log = security_logger.info if success else security_logger.warning
    log(
        "event=%s user=%s ip=%s success=%s%s",
        event_type,
        user_id or "-",
        ip_address or "-",
        success,
        _format_details(details),
    )
