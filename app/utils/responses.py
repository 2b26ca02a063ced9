"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.schemas.common import StandardResponse, ErrorResponse, OffsetPagination, PagePagination

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200,
    pagination: Optional[dict] = None
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=jsonable_encoder(data),
        pagination=pagination
    )
    return JSONResponse(
        content=response.model_dump(exclude_none=True),
        status_code=status_code
    )

def error_response(
    message: str,
    status_code: int = 400,
    errors: Any = None,
    stack: Optional[str] = None
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        errors=jsonable_encoder(errors),
        stack=stack
    )
    return JSONResponse(
        content=response.model_dump(exclude_none=True),
        status_code=status_code
    )

def offset_pagination(total: int, limit: int, offset: int) -> dict:
    """Pagination block for limit/offset listings"""
    return OffsetPagination(total=total, limit=limit, offset=offset).model_dump()

def page_pagination(total: int, page: int, limit: int) -> dict:
    """Pagination block for page/limit listings"""
    return PagePagination(
        total=total,
        page=page,
        limit=limit,
        pages=(total + limit - 1) // limit
    ).model_dump()
