"""Server runner with uvicorn integration."""

import logging
from typing import Any

import uvicorn

from chatbot_server.config import ServerConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "info") -> None:
    """Configure root logging once for CLI and server processes."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def run_server(config: ServerConfig | None = None, **uvicorn_kwargs: Any) -> None:
    """Run the chatbot API with uvicorn.

    The app is passed as a factory import string so ``reload`` works and each
    worker builds its own app from the environment.

    Args:
        config: Server configuration (loads from env vars if None).
        **uvicorn_kwargs: Additional keyword arguments to pass to uvicorn.run().
            These override config values if provided.
    """
    if config is None:
        config = ServerConfig()

    uvicorn_config: dict[str, Any] = {
        "host": config.host,
        "port": config.port,
        "reload": config.reload,
        "log_level": config.log_level,
        "access_log": config.access_log,
        "factory": True,
    }
    uvicorn_config.update(uvicorn_kwargs)

    logger.info(
        "Starting uvicorn server",
        extra={
            "host": uvicorn_config["host"],
            "port": uvicorn_config["port"],
            "reload": uvicorn_config["reload"],
        },
    )

    try:
        uvicorn.run("chatbot_server.app:create_app", **uvicorn_config)
    except KeyboardInterrupt:
        logger.info("Server shutdown by user")
    except Exception as e:
        logger.exception("Server failed: %s", e)
        raise
