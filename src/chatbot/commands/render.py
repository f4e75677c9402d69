"""Render command implementation."""

import sys
from pathlib import Path

import typer

from chatbot.display import print_error, print_success
from chatbot.markdown import RenderOptions, render_markdown


def _read_source(source: str | None) -> str:
    if source is None or source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        print_error(f"File not found: {source}")
        raise SystemExit(1)
    return path.read_text(encoding="utf-8")


def render_command(source: str | None, output: Path | None, escape: bool) -> None:
    """Render a message file (or stdin) and write the markup.

    The markup goes to stdout unless an output path is given; status
    messages go to stderr so the output can be piped.
    """
    text = _read_source(source)
    options = RenderOptions().model_copy(update={"escape_html": escape})
    html = render_markdown(text, options)

    if output is None:
        typer.echo(html)
        return

    output.write_text(html + "\n", encoding="utf-8")
    print_success(f"Rendered {len(text)} characters to {output}")
