"""Exception hierarchy for termplayer.

Only catalog construction at startup and terminal initialisation are fatal.
Everything else is logged and absorbed where it happens.
"""


class TermPlayerError(Exception):
    """Base class for all termplayer errors."""


class ScanError(TermPlayerError):
    """A scan root could not be read."""


class EmptyCatalogError(TermPlayerError):
    """A scan finished without finding any playable media."""


class MetadataError(TermPlayerError):
    """Tags could not be read from a single media file."""


class BackendStartError(TermPlayerError):
    """No external player could be launched for an item."""


class TerminalError(TermPlayerError):
    """The terminal could not be put into full-screen interactive mode."""
