"""Uniform JSON response envelope.

Every response body has the shape::

    {"success": bool, "code": int, "message": str?, "data": any?,
     "count": int?, "pagination": {...}?, "error": any?}

``count`` is filled in automatically when ``data`` is a list.
"""

import math
from dataclasses import dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from authgate import messages


@dataclass
class PaginationOptions:
    page: int
    limit: int
    total_items: int


def calculate_pagination(options: PaginationOptions) -> dict[str, Any]:
    """Derive the pagination block from page, limit and item count."""
    total_pages = math.ceil(options.total_items / options.limit) if options.limit > 0 else 0
    return {
        "page": options.page,
        "limit": options.limit,
        "totalItems": options.total_items,
        "totalPages": total_pages,
        "hasNextPage": options.page < total_pages,
        "hasPrevPage": options.page > 1,
    }


def success_response(
    code: int = 200,
    message: str | None = None,
    data: Any = None,
    pagination: PaginationOptions | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": True, "code": code}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
        if isinstance(data, list):
            body["count"] = len(data)
    if pagination is not None:
        body["pagination"] = calculate_pagination(pagination)
    return JSONResponse(status_code=code, content=jsonable_encoder(body))


def error_response(
    code: int = 500,
    message: str = messages.INTERNAL_SERVER_ERROR,
    error: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "code": code, "message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=code, content=jsonable_encoder(body), headers=headers)
