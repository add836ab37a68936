"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from civicpulse import __version__
from civicpulse.api import api_router
from civicpulse.core.config import Settings, get_settings
from civicpulse.core.errors import register_exception_handlers
from civicpulse.core.logging import configure_logging
from civicpulse.core.security import PasswordHasher, TokenSigner
from civicpulse.db.session import Database
from civicpulse.services.categories import seed_categories
from civicpulse.services.users import ensure_admin

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.uses_default_secret:
            logger.warning("Using the built-in secret key; set CIVICPULSE_SECRET_KEY in production")

        database = Database(settings.database_url)
        await database.create_all()
        async with database.session() as session:
            await seed_categories(session)
            await ensure_admin(session, settings, app.state.password_hasher)
            await session.commit()
        app.state.database = database
        logger.info("%s started", settings.app_name)
        try:
            yield
        finally:
            await database.dispose()
            logger.info("%s stopped", settings.app_name)

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_signer = TokenSigner(
        settings.secret_key, max_age_seconds=settings.access_token_expire_minutes * 60
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
