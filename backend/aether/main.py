from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from .api.middleware.error_handlers import register_error_handlers
from .api.middleware.security import SecurityMiddleware
from .api.v1.router import api_router
from .config import settings
from .core.services.vault_service import VaultService
from .dependencies import get_local_repository
from .utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # First launch creates (and seeds) the local vault
    await VaultService(get_local_repository(), seed=settings.seed_vault).init_vault()
    yield


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="Aether Vault API",
        debug=settings.debug,
        version="0.1.0",
        root_path=settings.root_path or "",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Content-Type",
            "Authorization",
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Trusted hosts (configure in env for production)
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    # Exports can be large
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(SecurityMiddleware)

    register_error_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
