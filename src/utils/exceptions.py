# src/utils/exceptions.py
from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base for every error the API reports on purpose.

    ``message`` is safe to return to clients. ``detail`` carries diagnostic
    text (driver errors and the like) that is logged and only exposed in
    debug mode.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server Error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class InvalidArgument(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request parameters"


class QueryError(InvalidArgument):
    """The store rejected a parameter (e.g. a non-numeric id)."""

    default_message = "Database query error"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class DataUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database connection error"


class Timeout(DataUnavailable):
    default_message = "Database request timed out"


class Unexpected(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server Error"


class Cancelled(AppError):
    """The client went away; remaining queries for the request are skipped."""

    status_code = 499
    default_message = "Client closed request"
