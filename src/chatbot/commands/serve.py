"""Serve command implementation."""

from typing import Any

from chatbot.display import console, print_error, print_info
from chatbot_server.config import ServerConfig
from chatbot_server.run import configure_logging, run_server


def serve_command(host: str | None, port: int | None, reload: bool) -> None:
    """Start the chat API server.

    Options given on the command line override the CHATBOT_SERVER_*
    environment settings.
    """
    config = ServerConfig()
    overrides: dict[str, Any] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if reload:
        overrides["reload"] = True

    configure_logging(config.log_level)

    bind_host = overrides.get("host", config.host)
    bind_port = overrides.get("port", config.port)
    print_info(f"Starting chatbot server on http://{bind_host}:{bind_port}")
    console.print()
    console.print("[dim]Endpoints:[/]")
    console.print(f"  POST http://{bind_host}:{bind_port}/api/chat")
    console.print(f"  POST http://{bind_host}:{bind_port}/api/render")
    console.print(f"  GET  http://{bind_host}:{bind_port}/api/sessions")
    console.print()

    try:
        run_server(config, **overrides)
    except Exception as e:
        print_error(f"Server failed: {e}")
        raise SystemExit(1) from None
