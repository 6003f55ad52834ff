"""Exceptions raised by file rotation."""

from __future__ import annotations

from pathlib import Path


class FileRotationError(Exception):
    """Base class for rotation failures that abort the whole call."""


class NotAFileError(FileRotationError):
    """The target path denotes a directory or has no usable file name."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"Not a file: {path}")


class RotationIOError(FileRotationError):
    """The directory holding the rotation family could not be listed."""

    def __init__(self, directory: Path, error: OSError) -> None:
        self.directory = directory
        self.error = error
        super().__init__(f"FileRotation io error: {error}")
