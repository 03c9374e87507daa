"""TaskTrack: multi-user task tracking service."""

__version__ = "0.1.0"
