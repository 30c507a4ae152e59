"""Keyboard bindings: map blessed keystrokes to logical transport commands."""

from typing import Optional

from blessed.keyboard import Keystroke

from termplayer.domain.playback.transport import Command

KEY_NAME_COMMANDS = {
    "KEY_UP": Command.CURSOR_UP,
    "KEY_DOWN": Command.CURSOR_DOWN,
    "KEY_LEFT": Command.SEEK_BACKWARD,
    "KEY_RIGHT": Command.SEEK_FORWARD,
    "KEY_ENTER": Command.SELECT,
    "KEY_ESCAPE": Command.STOP,
}

CHAR_COMMANDS = {
    "q": Command.QUIT,
    "Q": Command.QUIT,
    "\x03": Command.QUIT,  # Ctrl+C
    "r": Command.REFRESH,
    "R": Command.REFRESH,
    " ": Command.PAUSE_RESUME,
    "\n": Command.SELECT,
    "\r": Command.SELECT,
    "+": Command.VOLUME_UP,
    "=": Command.VOLUME_UP,
    "-": Command.VOLUME_DOWN,
    "_": Command.VOLUME_DOWN,
    "<": Command.PREVIOUS,
    ",": Command.PREVIOUS,
    ">": Command.NEXT,
    ".": Command.NEXT,
    "m": Command.TOGGLE_PLAY_MODE,
    "M": Command.TOGGLE_PLAY_MODE,
}


def parse_key(key: Keystroke) -> Optional[Command]:
    """
    Translate a keystroke into a command.

    Args:
        key: blessed Keystroke

    Returns:
        The bound Command, or None for unbound keys
    """
    if key.is_sequence:
        return KEY_NAME_COMMANDS.get(key.name)
    return CHAR_COMMANDS.get(str(key))
