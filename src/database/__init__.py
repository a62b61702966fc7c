from .dbbase import Base
from .db_session import Database, get_db

__all__ = [
    "Base",
    "Database",
    "get_db",
]
