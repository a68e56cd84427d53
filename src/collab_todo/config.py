"""
# Configuration Management Module

Configuration for the Collaborative Todo API, built on **Pydantic Settings**.

## Loading Hierarchy

Higher layers override lower layers:

1. **Environment variables** (highest priority)
2. **`COLLAB_TODO_CONFIG_PATH`**: custom config file path
3. **`.todo` file** in the project root
4. **`.env` file** in the project root
5. **Default values** on the `Settings` class (lowest priority)

If no configuration file is found the application runs in environment-only mode.

## Configuration Groups

### Server
```python
HOST: str = "0.0.0.0"
PORT: int = 8080
DEBUG: bool = False
```

### JWT Authentication
```python
SECRET_KEY: SecretStr  # HS256 signing key (REQUIRED)
ALGORITHM: str = "HS256"
JWT_ISSUER: str = "todo-app-server"
JWT_AUDIENCE: str = "todo-app-users"
ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
```

### Accounts
```python
MIN_PASSWORD_LENGTH: int = 6
BCRYPT_ROUNDS: int = 12  # bcrypt cost factor (4-31)
```

## Usage

```python
from collab_todo.config import settings

secret_key = settings.SECRET_KEY.get_secret_value()
```

Note:
    This module must not import the logging manager; it is imported first during startup.
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
TODO_FILENAME: str = ".todo"
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "COLLAB_TODO_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path based on a predefined precedence order.

    1.  **Environment Variable**: `COLLAB_TODO_CONFIG_PATH` (if set and the file exists).
    2.  **Todo Config**: `.todo` file in the project root directory.
    3.  **Dotenv Config**: `.env` file in the project root directory.
    4.  **Fallback**: `None`, which triggers environment-variable-only mode.

    Returns:
        Optional[str]: The path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    todo_path: Path = PROJECT_ROOT / TODO_FILENAME
    if todo_path.exists():
        return str(todo_path)
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=False)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode.
    *   **Security**: JWT signing key, issuer, audience and token lifetime.
    *   **Accounts**: Registration constraints.
    *   **Logging**: Log level.
    *   **CORS**: Extra allowed origins.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DEBUG: bool = False
    APP_NAME: str = "Collaborative Todo API"
    APP_VERSION: str = "1.0.0"

    # JWT configuration
    SECRET_KEY: SecretStr = SecretStr("")  # Must be set in .todo or environment
    ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "todo-app-server"
    JWT_AUDIENCE: str = "todo-app-users"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Account constraints
    MIN_PASSWORD_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12

    # Logging
    LOG_LEVEL: str = "INFO"

    # Comma separated list of additional CORS origins
    CORS_ORIGINS: Optional[str] = None

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def no_hardcoded_secrets(cls, v: Any, info: Any) -> Any:
        """
        Validates that the signing secret is set and is not a placeholder.

        Raises:
            ValueError: If the value is empty or contains placeholder text.
        """
        if not v or "change" in str(v).lower() or "0000" in str(v) or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .todo and not hardcoded!")
        return v

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES", "MIN_PASSWORD_LENGTH", "BCRYPT_ROUNDS", mode="before")
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """Validates that numeric settings are positive integers."""
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {v}")
        return level

    @property
    def is_production(self) -> bool:
        """`True` when running with `DEBUG=False`."""
        return not self.DEBUG

    @property
    def cors_origins(self) -> List[str]:
        """Default development origins plus any configured through `CORS_ORIGINS`."""
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
        if self.CORS_ORIGINS:
            origins.extend(origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip())
        return origins


# Global settings instance
settings: Settings = Settings()
