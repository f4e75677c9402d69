"""chatbot CLI - Main entry point.

Commands:
- render: Convert an assistant message to display markup
- serve: Start the chat API server
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from chatbot import __version__
from chatbot.commands import render_command, serve_command

app = typer.Typer(
    help="chatbot - chat client backend.\n\nRender assistant replies and serve the chat API.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"chatbot {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """chatbot - chat client backend."""
    pass


@app.command()
def render(
    source: Annotated[
        Optional[str],
        typer.Argument(help="Message file to render ('-' or omitted reads stdin)"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write markup to this file instead of stdout"),
    ] = None,
    no_escape: Annotated[
        bool, typer.Option("--no-escape", help="Pass raw HTML in the message through unescaped")
    ] = False,
) -> None:
    """Render an assistant message to HTML.

    Examples:
        chatbot render reply.md
        cat reply.md | chatbot render -
        chatbot render reply.md -o reply.html
    """
    render_command(source, output, escape=not no_escape)


@app.command()
def serve(
    host: Annotated[
        Optional[str], typer.Option("--host", help="Bind address")
    ] = None,
    port: Annotated[
        Optional[int], typer.Option("--port", "-p", help="Port to listen on")
    ] = None,
    reload: Annotated[
        bool, typer.Option("--reload", help="Auto-reload on code changes (development only)")
    ] = False,
) -> None:
    """Start the chat API server.

    Examples:
        chatbot serve
        chatbot serve --port 8080
    """
    serve_command(host, port, reload)


if __name__ == "__main__":
    app()
