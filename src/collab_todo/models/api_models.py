"""
# API Envelope Models

Every endpoint answers with one of two envelopes:

```json
{"success": true, "data": {...}, "count": 3}
{"success": false, "error": {"code": "NOT_FOUND", "message": "Todo not found"}}
```

`count` is only present on list responses.
"""

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel


class ApiResponse(BaseModel):
    success: bool = True
    data: Any = None
    count: Optional[int] = None


class ErrorDetails(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ApiErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetails


def success_response(data: Any = None, count: Optional[int] = None) -> Dict[str, Any]:
    """Build a JSON-ready success envelope; `count` is only included when given."""
    envelope = ApiResponse(data=jsonable_encoder(data), count=count)
    return envelope.model_dump(exclude={"count"} if count is None else None)


def error_response(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    error = ErrorDetails(code=code, message=message, details=details)
    return jsonable_encoder(ApiErrorResponse(error=error), exclude_none=True)
