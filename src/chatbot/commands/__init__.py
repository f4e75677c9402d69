"""CLI command implementations."""

from chatbot.commands.render import render_command
from chatbot.commands.serve import serve_command

__all__ = ["render_command", "serve_command"]
