"""Blessed-based full-screen terminal UI."""

from .app import BlessedDisplay, run_interactive_ui

__all__ = ["BlessedDisplay", "run_interactive_ui"]
