"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
import math


LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Escape LIKE wildcards in user input. Pair with ``escape=LIKE_ESCAPE``."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(text: str) -> str:
    """Build a substring LIKE pattern from user input."""
    return f"%{escape_like(text)}%"


def page_offset(page: int, limit: int) -> int:
    """Row offset for a 1-based page number."""
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    """Pagination block returned next to list results."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def format_response(message: str, **data: Any) -> Dict[str, Any]:
    """Format a simple acknowledgement response."""
    response = {"message": message}
    response.update(data)
    return response


def format_error(message: str, code: Optional[str] = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"message": message}
    if code:
        response["code"] = code
    return response
