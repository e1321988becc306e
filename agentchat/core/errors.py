# agentchat/core/errors.py
"""
Application error taxonomy.

Function-style endpoints (admin-operations, chat handlers, image upload) render
every error as a generic 500 envelope; the REST routers map them onto status
codes through `to_http_exception`.
"""
from enum import Enum

from fastapi import HTTPException, status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(AppError):
    status_code = 422


class UpstreamFailure(str, Enum):
    """Why an upstream call failed; picks the apology shown to the user."""
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    SAFETY = "safety"
    UNAVAILABLE = "unavailable"


class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, kind: UpstreamFailure = UpstreamFailure.UNAVAILABLE):
        super().__init__(message)
        self.kind = kind


class PersistenceError(UpstreamError):
    pass


def to_http_exception(error: AppError) -> HTTPException:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(error, Unauthenticated) else None
    return HTTPException(status_code=error.status_code, detail=error.message, headers=headers)
