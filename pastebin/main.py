"""
Pastebin Lite - Main FastAPI application.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pastebin.config import Settings, settings as default_settings
from pastebin.database import InMemoryStore, PasteStore, connect_store
from pastebin.exceptions import (
    InvalidContent,
    InvalidMaxViews,
    InvalidTTL,
    PasteNotFound,
    PasteValidationError,
    StorageUnavailable,
)
from pastebin.manager import PasteStoreManager
from pastebin.routes import forms, health, pastes

# Configure logging
logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: PasteValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.code})


async def malformed_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report a rejected create body with the code of its first bad field.

    Fields are ranked content, ttl_seconds, max_views, matching the order
    PasteStoreManager.create checks them. A body that is not a JSON object
    counts as bad content.
    """
    failed = {err["loc"][1] for err in exc.errors() if len(err["loc"]) > 1}
    body = exc.body if isinstance(exc.body, dict) else {}
    content = body.get("content")
    if "content" in failed or not isinstance(content, str) or not content.strip():
        code = InvalidContent.code
    elif "ttl_seconds" in failed:
        code = InvalidTTL.code
    else:
        code = InvalidMaxViews.code
    return JSONResponse(status_code=400, content={"error": code})


async def not_found_handler(request: Request, exc: PasteNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "not_found"})


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error(f"Storage unavailable during {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": "storage_unavailable"})


def create_app(
    config: Optional[Settings] = None,
    store: Optional[PasteStore] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to use, defaults to the environment
        store: Storage engine to use; when omitted one is opened at startup
            from config and closed at shutdown
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Pastebin Lite application starting...")
        owned = store is None
        active_store = connect_store(config) if owned else store
        if isinstance(active_store, InMemoryStore):
            logger.warning("DATABASE: Using IN-MEMORY storage (Redis not available)")
            logger.warning("   Data will NOT persist across server restarts!")
        else:
            logger.info("DATABASE: Connected to Redis")

        app.state.settings = config
        app.state.manager = PasteStoreManager(active_store)
        try:
            yield
        finally:
            logger.info("Pastebin Lite application shutting down...")
            if owned:
                active_store.close()

    app = FastAPI(
        title="Pastebin Lite",
        description="A lightweight Pastebin-like application for sharing text",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PasteValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, malformed_body_handler)
    app.add_exception_handler(PasteNotFound, not_found_handler)
    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)

    # Include route modules
    app.include_router(health.router)
    app.include_router(pastes.router)
    app.include_router(forms.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pastebin.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
    )
