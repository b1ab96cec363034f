"""
Helpers shared by the CLI commands.
"""

import logging
from typing import NoReturn, Union

import typer
from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)
console = Console()


def exit_with_error(error: Union[str, Exception]) -> NoReturn:
    """Print an error and stop the command with a non-zero exit code."""
    logger.debug("Command failed", exc_info=isinstance(error, Exception))
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


def confirm(prompt: str) -> bool:
    """Ask a yes/no question; anything but yes cancels."""
    if typer.confirm(f"\n{prompt}", default=False):
        return True
    console.print("Operation cancelled.")
    return False
