from typing import Iterator, Optional

from anyio.from_thread import run as run_from_thread
from fastapi import Request
from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.config import (
    DATABASE_URL,
    DB_MAX_OVERFLOW,
    DB_POOL_RECYCLE,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_STATEMENT_TIMEOUT_MS,
)
from src.utils.exceptions import DataUnavailable


class Database:
    """ This Class owns the engine, the connection pool and the session factory.

    It is created once at application startup, handed to requests through
    ``app.state`` and disposed at shutdown.
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False):
        self.url = make_url(url or DATABASE_URL)

        try:
            self.engine = create_engine(self.url, echo=echo, **self._engine_options())
        except Exception as e:
            logger.error(f"Error while configuring the database engine: {e}")
            raise

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def _engine_options(self) -> dict:
        if self.url.get_backend_name() == "sqlite":
            # single shared in-memory connection (tests, local tooling)
            return {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }

        options = {
            "pool_size": DB_POOL_SIZE,
            "max_overflow": DB_MAX_OVERFLOW,
            "pool_timeout": DB_POOL_TIMEOUT,
            "pool_recycle": DB_POOL_RECYCLE,
            "pool_pre_ping": True,
        }
        if self.url.get_backend_name() == "postgresql":
            options["connect_args"] = {
                "connect_timeout": max(int(DB_POOL_TIMEOUT), 1),
                "options": f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS} "
                           f"-c default_transaction_read_only=on",
            }
        return options

    def get_session(self) -> Session:
        """ This function returns a new Session; the caller must close it."""
        return self.SessionLocal()

    def check_connection(self) -> None:
        """Run a trivial query so startup fails fast when the store is unreachable."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database connection error: {e}")
            raise DataUnavailable("Database connection error", detail=str(e)) from e
        logger.info(f"Database connected successfully ({self.url.get_backend_name()})")

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool released")


DISCONNECT_CHECK = "is_disconnected"


def client_disconnected(request: Request) -> bool:
    """Ask the event loop whether the client of ``request`` has gone away.

    Handlers are sync and run in the threadpool; outside a worker thread
    there is no loop to ask, so the answer is ``False``.
    """
    try:
        return run_from_thread(request.is_disconnected)
    except RuntimeError:
        return False


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency: one Session per request, always closed.

    The session carries a disconnect check that the data accessor runs
    before every statement, so an abandoned request stops querying.
    """
    database: Database = request.app.state.database
    session = database.get_session()
    session.info[DISCONNECT_CHECK] = lambda: client_disconnected(request)
    try:
        yield session
    finally:
        session.close()
