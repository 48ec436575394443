"""
FastAPI application for the Task Manager
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .api.middleware import ErrorBoundaryMiddleware, SessionGateMiddleware
from .api.routes import auth, categories, dashboard, profile, tasks
from .database.database import create_db_and_tables
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    create_db_and_tables()
    logger.info("Task Manager started version=%s", __version__)
    yield
    logger.info("Task Manager stopped")


def create_app() -> FastAPI:
    """Build the application with every router and middleware installed."""
    app = FastAPI(title="Task Manager", version=__version__, lifespan=lifespan)

    # Added last runs first: the error boundary wraps the session gate
    app.add_middleware(SessionGateMiddleware)
    app.add_middleware(ErrorBoundaryMiddleware)

    app.include_router(auth.router)
    app.include_router(tasks.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")
    app.include_router(profile.router, prefix="/api")
    app.include_router(dashboard.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskmanager.main:app", host="0.0.0.0", port=8000)
