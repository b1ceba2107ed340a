"""
Task tracker backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.errors import register_error_handlers
from api.middleware import register_middleware
from api.tasks import router as task_router
from api.users import router as user_router
from auth.jwt import TokenService
from config.settings import config
from database.session import close_db, init_db
from utils.uploads import upload_root

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio", "multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup and release database connections on shutdown."""
    if config.auto_create_tables:
        await init_db()
    logger.info("Application ready to accept requests.")

    yield

    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    # Built before anything else so a missing JWT_SECRET stops the process.
    token_service = TokenService(config.jwt_secret, expiry_seconds=config.jwt_expiry_seconds)

    app = FastAPI(
        title="Task Tracker",
        version="1.0.0",
        description="Multi-tenant task tracking with bearer-token auth.",
        lifespan=lifespan,
    )
    app.state.token_service = token_service

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_error_handlers(app)

    # Routes
    app.include_router(user_router, prefix="/user")
    app.include_router(task_router, prefix="/task")
    app.mount("/uploads", StaticFiles(directory=str(upload_root())), name="uploads")

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
