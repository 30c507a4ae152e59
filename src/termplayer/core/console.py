"""Rich console for output outside the blessed UI.

Only startup and shutdown messages go here; while the UI owns the terminal
everything is logged to file instead.
"""

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Get or create the shared stderr Console."""
    global _console
    if _console is None:
        _console = Console(stderr=True, highlight=False)
    return _console


def safe_print(message: str, style: str | None = None) -> None:
    """Print a message to stderr, optionally styled (e.g. "bold red")."""
    get_console().print(message, style=style, markup=False)


def print_failure(message: str) -> None:
    """Report a fatal startup problem to the user."""
    safe_print(f"termplayer: {message}", style="bold red")
