"""
FastAPI application for the Snippet Board service.

This module initializes and configures the FastAPI application that serves
the card and comment API and, optionally, the static client page.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from snippet_board.api.endpoints import cards, comments
from snippet_board.api.errors import ApiError, api_error_handler, unhandled_error_handler
from snippet_board.config.settings import Settings, get_settings
from snippet_board.core.store import JsonStore, StoreWriteError
from snippet_board.integrations.reddit import RedditClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Creates the store document if it is missing, creates the Reddit client
    unless one was injected, and closes the client it created on shutdown.

    Raises:
        RuntimeError: If the store document cannot be created
    """
    settings: Settings = app.state.settings
    store: JsonStore = app.state.store
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} with store {store.path}")

    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, store.init)
    except StoreWriteError as e:
        logger.error(f"Cannot start without a store at {store.path}: {e.message}")
        raise RuntimeError(f"Store initialization failed: {e.message}") from e

    owns_client = app.state.reddit_client is None
    if owns_client:
        app.state.reddit_client = RedditClient(
            user_agent=settings.REDDIT_USER_AGENT,
            timeout=settings.REDDIT_TIMEOUT_SECONDS,
            url_pattern=settings.REDDIT_URL_PATTERN,
        )

    yield

    logger.info("Shutting down application")
    if owns_client:
        await app.state.reddit_client.close()
        app.state.reddit_client = None


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[JsonStore] = None,
    reddit_client: Optional[RedditClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        store: Store to use; defaults to a JsonStore at STORE_PATH
        reddit_client: Reddit client to use; defaults to one created in the lifespan

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Share code snippets linked to Reddit comment threads, with comments on each snippet.",
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "cards", "description": "Code snippet cards"},
            {"name": "comments", "description": "Comments on cards"},
            {"name": "health", "description": "Health check and monitoring"},
        ],
    )

    app.state.settings = settings
    app.state.store = store or JsonStore(settings.STORE_PATH)
    app.state.reddit_client = reddit_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(cards.router, prefix="/cards", tags=["cards"])
    app.include_router(comments.router, prefix="/comments", tags=["comments"])

    @app.get("/health", tags=["health"], summary="Health Check")
    async def health_check():
        """Report service status and version."""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Mounted last so the API routes take precedence over files
    if settings.STATIC_DIR:
        static_dir = Path(settings.STATIC_DIR)
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="client")
        else:
            logger.warning(f"STATIC_DIR {static_dir} does not exist; client page not served")

    return app


# Create the application instance
app = create_app()
