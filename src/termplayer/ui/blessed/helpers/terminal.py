"""Terminal ownership and output utilities."""

from contextlib import ExitStack
from typing import Optional

from blessed import Terminal
from loguru import logger

from termplayer.errors import TerminalError


def write_at(
    term: Terminal, x: int, y: int, content: str, *, clear: bool = True
) -> None:
    """Write content at position, clearing the rest of the line by default.

    This prevents text overlap artifacts when new content is shorter than
    previous content at the same position.

    Args:
        term: Blessed terminal instance
        x: Column position (0-indexed)
        y: Row position (0-indexed)
        content: Text to write (can include terminal formatting)
        clear: Whether to clear to end of line (default True)
    """
    if clear:
        term.stream.write(term.move_xy(x, y) + term.clear_eol + content)
    else:
        term.stream.write(term.move_xy(x, y) + content)


class TerminalSession:
    """Full-screen, cbreak, hidden-cursor terminal for the lifetime of a with-block.

    Everything entered is restored on exit, including when the body raises
    or initialisation fails half way.
    """

    def __init__(self, term: Optional[Terminal] = None, require_tty: bool = True):
        self._term = term
        self._require_tty = require_tty
        self._stack: Optional[ExitStack] = None

    def __enter__(self) -> Terminal:
        stack = ExitStack()
        try:
            term = self._term or Terminal()
            if self._require_tty and not term.is_a_tty:
                raise TerminalError("stdout is not a terminal")
            stack.enter_context(term.fullscreen())
            stack.enter_context(term.cbreak())
            stack.enter_context(term.hidden_cursor())
        except TerminalError:
            stack.close()
            raise
        except Exception as e:
            stack.close()
            raise TerminalError(f"Could not initialise terminal: {e}") from e

        self._term = term
        self._stack = stack
        logger.debug(f"Terminal session started ({term.width}x{term.height})")
        return term

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._stack is not None:
            self._stack.close()
            self._stack = None
        if self._term is not None:
            self._term.stream.flush()
        logger.debug("Terminal session closed")
