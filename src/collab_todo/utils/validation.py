"""Shared content checks used by the request models."""

from datetime import datetime, timezone
from typing import Optional

SCRIPT_TAG = "<script>"


def contains_script_tag(value: Optional[str]) -> bool:
    """Naive XSS block-list: a case-insensitive `<script>` substring match."""
    return bool(value) and SCRIPT_TAG in value.lower()


def ensure_safe_text(value: Optional[str], label: str) -> Optional[str]:
    if contains_script_tag(value):
        raise ValueError(f"{label} contains characters that are not allowed")
    return value


def ensure_not_blank(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} must not be blank")
    return value


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so they compare against aware timestamps."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def looks_like_email(value: str) -> bool:
    return "@" in value and "." in value
