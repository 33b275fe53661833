# backend/utils/errors.py
import logging
from typing import Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None, headers=None):
        super().__init__(status_code=self.status_code, detail=message or self.message, headers=headers)
        self.errors = errors


class ValidationError(ApiError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "The given data was invalid."


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"

    def __init__(self, message: Optional[str] = None, errors=None):
        super().__init__(message, errors, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Permission denied"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class InternalError(ApiError):
    pass


def _body(message, errors=None) -> dict:
    body = {"status": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    errors = getattr(exc, "errors", None)
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content=_body(message, errors), headers=exc.headers)


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Field-keyed messages: {"name": ["String should have at least 3 characters"]}
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if isinstance(part, str) and part not in ("body", "query", "path", "form")]
        field = ".".join(loc) or "body"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_body(ValidationError.message, errors),
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_body(InternalError.message))


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
