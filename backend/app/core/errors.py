import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("app.errors")


class ValidationError(ValueError):
    pass


class AuthError(ValueError):
    pass


class AccessError(ValueError):
    pass


class NotFoundError(ValueError):
    pass


class ConflictError(ValueError):
    pass


class UpstreamError(RuntimeError):
    pass


_STATUS_BY_ERROR = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (AccessError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UpstreamError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def StatusForError(exc: Exception) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    if isinstance(exc, ValueError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def AsUpstreamError(exc: SQLAlchemyError, area: str = "app") -> UpstreamError:
    logger.exception("%s database error", area)
    upstream = UpstreamError("Database not available")
    upstream.__cause__ = exc
    return upstream


def HandleServiceError(exc: Exception, area: str = "app") -> None:
    if isinstance(exc, SQLAlchemyError):
        exc = AsUpstreamError(exc, area)
    detail = str(exc) or "Request failed"
    status_code = StatusForError(exc)
    if status_code >= 500:
        logger.error("%s upstream error: %s", area, detail)
    raise HTTPException(status_code=status_code, detail=detail) from exc
