"""
# Logging Manager

Central logger factory. Every module obtains its logger through `get_logger()` so that the
handler, format and level are configured exactly once per process.

```python
from collab_todo.managers.logging_manager import get_logger

logger = get_logger(prefix="[TodoService]")
logger.info("Created todo %s", todo.id)
```
"""

import logging
import sys
from typing import Any, MutableMapping, Tuple

DEFAULT_LOGGER_NAME = "CollabTodo"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


class PrefixAdapter(logging.LoggerAdapter):
    """Prepends a fixed prefix such as `[ProjectService]` to every message."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        prefix = self.extra.get("prefix") if self.extra else None
        if prefix:
            return f"{prefix} {msg}", kwargs
        return msg, kwargs


def _configure_root(name: str) -> None:
    global _configured
    if _configured:
        return

    from collab_todo.config import settings

    base_logger = logging.getLogger(name)
    if not base_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        base_logger.addHandler(handler)
    base_logger.setLevel(settings.LOG_LEVEL)
    base_logger.propagate = False
    _configured = True


def get_logger(name: str = DEFAULT_LOGGER_NAME, prefix: str = "") -> PrefixAdapter:
    """
    Return a logger under the application namespace.

    Args:
        name (str): Logger name. Names outside the application namespace are nested under it.
        prefix (str): Optional bracketed prefix added to every message.

    Returns:
        PrefixAdapter: A logger adapter wrapping the configured stdlib logger.
    """
    _configure_root(DEFAULT_LOGGER_NAME)
    if name != DEFAULT_LOGGER_NAME and not name.startswith(f"{DEFAULT_LOGGER_NAME}."):
        name = f"{DEFAULT_LOGGER_NAME}.{name}"
    return PrefixAdapter(logging.getLogger(name), {"prefix": prefix})
