"""Rich display utilities for the chatbot CLI."""

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[bold red]✗[/] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    err_console.print(f"[bold blue]ℹ[/] {message}")
