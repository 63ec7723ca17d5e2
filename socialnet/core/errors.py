import logging
from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppError(HTTPException):
    """Typed failure surfaced to the client as ``{message, code, errors}``."""

    def __init__(self, code: int, message: str, errors: Optional[Any] = None, headers: Optional[dict] = None):
        super().__init__(status_code=code, detail=message, headers=headers)
        self.code = code
        self.message = message
        self.errors = errors

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class UnauthorizedError(AppError):
    def __init__(self, error_code: Optional[str] = None):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            "Unauthorized. You must login to access this content.",
            {"error_code": error_code},
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.error_code = error_code


class ValidationError(AppError):
    def __init__(self, violations: list):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Validation Error", violations)
        self.violations = violations


class ForbiddenError(AppError):
    def __init__(self):
        super().__init__(status.HTTP_403_FORBIDDEN, "Forbidden. You are not allowed to perform this action")


# Read permission (visibility / follow) failure, as opposed to ownership
class InvalidUserError(AppError):
    def __init__(self):
        super().__init__(status.HTTP_404_NOT_FOUND, "You don't have permission to perform this action on user")


class NotFoundError(AppError):
    def __init__(self, model: Optional[str] = None):
        message = "Not found." + (f" Couldn't find {model}" if model else "")
        super().__init__(status.HTTP_404_NOT_FOUND, message)
        self.model = model


class ConflictError(AppError):
    def __init__(self, error_code: Optional[str] = None):
        super().__init__(status.HTTP_409_CONFLICT, "Conflict", {"error_code": error_code})
        self.error_code = error_code


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.code, content=exc.to_dict(), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    violations = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            "constraint": error["type"],
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return await app_error_handler(request, ValidationError(violations))


async def unhandled_error_handler(request: Request, exc: Exception):
    logging.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "code": status.HTTP_500_INTERNAL_SERVER_ERROR},
    )
