"""termplayer - terminal audio/video player controller."""

__version__ = "0.1.0"
