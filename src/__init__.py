from .config import config
from .database import db_session
from .utils import exceptions

__all__ = [
    "config",
    "db_session",
    "exceptions"
]
