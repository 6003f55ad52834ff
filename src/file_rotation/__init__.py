"""Rotate a log file and its numbered siblings on demand."""

from __future__ import annotations

from .errors import FileRotationError, NotAFileError, RotationIOError
from .rotator import (
    DEFAULT_EXTENSION,
    FileRotation,
    RotationCandidate,
    RotationPlan,
    RotationReport,
    RotationResult,
)

__all__ = [
    "DEFAULT_EXTENSION",
    "FileRotation",
    "FileRotationError",
    "NotAFileError",
    "RotationCandidate",
    "RotationIOError",
    "RotationPlan",
    "RotationReport",
    "RotationResult",
]
