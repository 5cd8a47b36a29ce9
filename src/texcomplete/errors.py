"""Exception types raised inside the completion engine."""

from __future__ import annotations

from pathlib import Path


class TexCompleteError(Exception):
    """Base class for texcomplete errors."""


class ResourceError(TexCompleteError):
    """A static resource could not be turned into definitions."""

    def __init__(self, name: str, path: Path, reason: str):
        self.name = name
        self.path = path
        self.reason = reason
        super().__init__(f"{name} ({path}): {reason}")


class ResourceLoadError(ResourceError):
    """Reading a resource file failed."""


class ResourceParseError(ResourceError):
    """A resource file was read but its content is malformed."""
