"""Blessed UI helper functions."""

from .terminal import TerminalSession, write_at

__all__ = ["TerminalSession", "write_at"]
