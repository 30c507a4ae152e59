"""Keyboard event handling."""

from .keyboard import parse_key

__all__ = ["parse_key"]
