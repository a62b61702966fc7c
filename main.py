import uvicorn
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import RedirectResponse
from loguru import logger
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import APPNAME, CORS_ORIGINS, DEBUG, ENVIRONMENT, LOG_LEVEL, VERSION
from src.database import Database, get_db
from src.routers import (states_router, constituencies_router, elections_router,
                         booths_router, booth_analysis_router, candidates_router)
from src.routers.election_data.accessor import ElectionDataAccessor
from src.utils import AppError, Unexpected, configure_logging, error_response, success_response

ENDPOINTS = {
    "health": "/health",
    "states": "/api/states",
    "constituencies": "/api/constituencies",
    "elections": "/api/elections",
    "booths": "/api/booths",
    "booth_analysis": "/api/booth-analysis",
    "candidates": "/api/candidates",
}


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application. A ``Database`` may be passed in (tests); otherwise
    one is created from the environment at startup and disposed at shutdown.
    """
    configure_logging(LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = database is None
        if owned:
            app.state.database = Database()
            app.state.database.check_connection()
        logger.info(f"{APPNAME} {VERSION} started ({ENVIRONMENT})")
        try:
            yield
        finally:
            if owned:
                app.state.database.dispose()
            logger.info(f"{APPNAME} stopped")

    # Defining the application
    app = FastAPI(
        title=APPNAME,
        version=VERSION,
        lifespan=lifespan,
    )
    if database is not None:
        app.state.database = database

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Error envelope
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message} ({exc.detail})")
        else:
            logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.detail if DEBUG else None)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"{request.method} {request.url.path} -> 400: {exc.errors()}")
        return error_response(400, "Invalid request parameters", str(exc.errors()) if DEBUG else None)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return error_response(exc.status_code, message)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        error = Unexpected(detail=str(exc))
        return error_response(error.status_code, error.message, error.detail if DEBUG else None)

    # Including all the routes
    app.include_router(states_router)
    app.include_router(constituencies_router)
    app.include_router(elections_router)
    app.include_router(booths_router)
    app.include_router(booth_analysis_router)
    app.include_router(candidates_router)

    @app.get("/")
    def main_function():
        """
        Redirect to documentation (`/docs/`).
        """
        return RedirectResponse(url="/docs/")

    @app.get("/health")
    def health(db: Session = Depends(get_db)):
        """
        Database connectivity check.
        """
        return success_response(ElectionDataAccessor(db).ping(), status="healthy", environment=ENVIRONMENT)

    @app.get("/api")
    def api_index():
        return success_response({"name": APPNAME, "version": VERSION, "endpoints": ENDPOINTS})

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=5001)
