"""
Domain errors and their HTTP mapping.

Services raise these instead of HTTPException so that the same failure reads
the same way whether it comes from the slot checker, the submission path or
a collaborator endpoint. Every error renders as:

    {"detail": "<human readable message>", "status_code": <int>}
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from obsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)


class ObsDeskError(Exception):
    """Base class for every error the service reports to its callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Unexpected error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(ObsDeskError):
    """No session, or the session is invalid or expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(ObsDeskError):
    """Valid session, but role or station does not permit the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to do this action"


class InvalidInputError(ObsDeskError):
    """Malformed hour code, missing required field and similar."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class NotFoundError(ObsDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ObsDeskError):
    """A unique key (e.g. station + observation hour) is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Record already exists"


class ServerError(ObsDeskError):
    """Storage or transport failure. The message never carries the cause."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Attach the ObsDeskError handler to the application."""

    @app.exception_handler(ObsDeskError)
    async def obsdesk_error_handler(request: Request, exc: ObsDeskError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "status_code": exc.status_code,
            },
            headers=headers,
        )
