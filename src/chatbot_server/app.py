"""FastAPI application factory with middleware and lifecycle management.

Provides a factory function for creating the chatbot API with consistent
configuration, middleware stack, session storage and completion proxy.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatbot_server.completion import CompletionClient
from chatbot_server.config import ServerConfig, StorageConfig
from chatbot_server.middleware import setup_middleware
from chatbot_server.routes import router
from chatbot_state.backends import MemoryBackend, RedisBackend, RedisConfig
from chatbot_state.store import SessionStore

logger = logging.getLogger(__name__)


def build_store(config: StorageConfig) -> SessionStore:
    """Create the session store selected by the storage configuration."""
    if config.backend == "redis":
        backend = RedisBackend(RedisConfig(url=config.redis_url))
    else:
        backend = MemoryBackend()
    logger.info("Session storage configured", extra={"backend": config.backend})
    return SessionStore(backend, prefix=config.key_prefix, ttl=config.ttl)


def create_app(
    config: ServerConfig | None = None,
    store: SessionStore | None = None,
    completion: CompletionClient | None = None,
) -> FastAPI:
    """Create the chatbot FastAPI application.

    Factory function that creates a FastAPI app with:
    - The /api routes (health, chat proxy, render, sessions)
    - Middleware for request logging and error handling
    - CORS configuration
    - Shutdown of the storage backend and upstream client

    Args:
        config: Server configuration (loads from env vars if None).
        store: Session store (built from ``config.storage`` if None).
        completion: Completion client (built from ``config.completion`` if None).

    Returns:
        Configured FastAPI application.

    Example:
        ```python
        app = create_app(ServerConfig(port=3000))
        ```
    """
    if config is None:
        config = ServerConfig()
    if store is None:
        store = build_store(config.storage)
    if completion is None:
        completion = CompletionClient(config.completion)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up")
        if config.completion.missing:
            logger.warning(
                "Chat-completion API not configured; /api/chat will fail",
                extra={"missing": config.completion.missing},
            )

        yield

        logger.info("Application shutting down")
        await completion.close()
        await store.backend.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=config.title,
        version=config.version,
        docs_url=config.docs_url,
        redoc_url=config.redoc_url,
        openapi_url=config.openapi_url,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.store = store
    app.state.completion = completion

    if config.cors.enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors.allow_origins,
            allow_credentials=config.cors.allow_credentials,
            allow_methods=config.cors.allow_methods,
            allow_headers=config.cors.allow_headers,
        )
        logger.info("CORS enabled with origins: %s", config.cors.allow_origins)

    setup_middleware(app)
    app.include_router(router)

    logger.info(
        "FastAPI application created",
        extra={
            "title": config.title,
            "version": config.version,
            "docs_enabled": config.enable_docs,
        },
    )

    return app
