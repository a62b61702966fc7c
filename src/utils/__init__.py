from .exceptions import AppError, InvalidArgument, QueryError, NotFound, DataUnavailable, Timeout, Unexpected, Cancelled
from .responses import success_response, paginated_response, error_response
from .logger import configure_logging

__all__ = [
    "AppError",
    "InvalidArgument",
    "QueryError",
    "NotFound",
    "DataUnavailable",
    "Timeout",
    "Unexpected",
    "Cancelled",
    "success_response",
    "paginated_response",
    "error_response",
    "configure_logging",
]
