"""Engine exceptions."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for rendering engine failures."""


class NoContextError(EngineError):
    """No drawing surface was supplied. Fatal, never retried."""

    def __init__(self, message: str = "No Context") -> None:
        super().__init__(message)


class ImageDecodeError(EngineError, ValueError):
    """Image bytes or data URL could not be decoded."""


class CollageTimeoutError(EngineError, TimeoutError):
    """Collage encode did not finish within the allotted time."""
