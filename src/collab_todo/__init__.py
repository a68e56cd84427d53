"""
# Collaborative Todo API

A FastAPI service for shared todo lists organised into projects.

## Package Layout

*   `config`: pydantic-settings configuration.
*   `exceptions`: typed domain errors mapped to HTTP statuses.
*   `models`: Pydantic entities, request payloads and response envelopes.
*   `database`: in-memory stores for users, projects, memberships and todos.
*   `managers`: logging, JWT and permission rules.
*   `services`: todo, project and auth use cases.
*   `routes`: FastAPI routers.
*   `main`: application factory and ASGI entry point.
"""

__version__ = "1.0.0"
