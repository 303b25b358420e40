"""
Application factory.

``create_app`` wires the process-wide collaborators (engine, session
factory, token issuer) from a ``Settings`` instance and stores them on
``app.state`` so route dependencies can reach them without globals.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.auth import router as auth_router
from api.exception_handlers import setup_exception_handlers
from api.middleware import register_middleware
from api.users import router as users_router
from auth.jwt import TokenIssuer
from config.settings import Settings, config
from database.session import build_engine, build_session_factory, create_tables

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    engine = build_engine(settings.database_url, echo=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables:
            logger.info("Creating tables…")
            await create_tables(engine)
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title="User Auth API",
        version="1.0.0",
        description="User registration and password login with JWT issuance.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = TokenIssuer(
        settings.jwt_secret,
        expiry_seconds=settings.jwt_expiry_seconds,
    )

    register_middleware(app, settings.cors_origins)
    setup_exception_handlers(app)

    # Routes
    app.include_router(users_router, prefix="/api/users")
    app.include_router(auth_router, prefix="/api/auth")

    return app
