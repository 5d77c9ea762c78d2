"""
Error taxonomy.

Every error is an HTTPException so services, utilities and routes can all
raise them the same way and FastAPI renders them as {"detail": ...}.

    UnauthorizedError -> 401
    ForbiddenError    -> 403
    NotFoundError     -> 404
    ValidationError   -> 400 (optional field-level errors)
    ConflictError     -> 400
    UpstreamError     -> 500
"""

from typing import List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class UnauthorizedError(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str, errors: Optional[List[dict]] = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.errors = errors or []


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UpstreamError(HTTPException):
    def __init__(self, detail: str = "Upstream service failed"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def _field_errors(exc: RequestValidationError) -> List[dict]:
    errors = []
    for err in exc.errors():
        # drop the leading "body"/"query" segment
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return errors


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render request validation failures as 400 with field-level detail."""
    if isinstance(exc, RequestValidationError):
        errors = _field_errors(exc)
    else:
        errors = getattr(exc, "errors", [])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": getattr(exc, "detail", "Validation error"), "errors": errors},
    )


def register_error_handlers(app) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
