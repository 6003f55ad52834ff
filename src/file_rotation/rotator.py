"""Rotate a file and its numbered siblings on demand.

Given ``app.log``, a rotation renames an existing ``app.1.log`` to
``app.2.log`` (and so on up the chain) before renaming ``app.log`` itself
to ``app.1.log``. An optional cap deletes the oldest rotations. Nothing is
watched or scheduled: each call to :meth:`FileRotation.rotate` is a single
synchronous pass over the directory.

Example::

    FileRotation("my.log").max_old_files(2).rotate()

"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import NotAFileError, RotationIOError

DEFAULT_EXTENSION = "log"

# Names that pathlib reports but that never denote a regular file
_NON_FILE_NAMES = frozenset({"", ".", ".."})

logger = logging.getLogger("file-rotation")


@dataclass(frozen=True)
class RotationCandidate:
    """A directory entry that belongs to the rotation family."""

    path: Path
    new_name: str
    prefix: str
    generation: int  # 0 for the active file
    extension: str
    active: bool = False

    @property
    def new_generation(self) -> int:
        """Generation the entry will have after rotation."""
        return self.generation + 1


@dataclass
class RotationPlan:
    """Filesystem operations a rotation will perform, in application order."""

    directory: Path
    renames: list[RotationCandidate] = field(default_factory=list)
    deletions: list[RotationCandidate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.renames and not self.deletions

    def destination(self, candidate: RotationCandidate) -> Path:
        """Get the path a candidate is renamed to."""
        return self.directory / candidate.new_name


@dataclass
class RotationResult:
    """Outcome of a single rename or delete."""

    path: Path
    success: bool
    action: str  # "renamed", "deleted", "error"
    destination: Path | None = None
    error: str | None = None


@dataclass
class RotationReport:
    """Collected outcomes of one rotation pass."""

    directory: Path
    results: list[RotationResult] = field(default_factory=list)

    @property
    def renamed(self) -> list[RotationResult]:
        return [r for r in self.results if r.action == "renamed"]

    @property
    def deleted(self) -> list[RotationResult]:
        return [r for r in self.results if r.action == "deleted"]

    @property
    def errors(self) -> list[RotationResult]:
        return [r for r in self.results if not r.success]

    @property
    def ok(self) -> bool:
        """True when every individual operation succeeded."""
        return not self.errors


def parse_rotated_name(name: str) -> tuple[str, int, str] | None:
    """Split a rotated file name into ``(prefix, generation, extension)``.

    Args:
        name: File name such as ``app.3.log``.

    Returns:
        The parsed components, or None if the name is not of the form
        ``<prefix>.<generation>.<ext>`` with a non-empty prefix and a
        decimal generation (an optional leading ``+`` is accepted).

    """
    parts = name.split(".")
    if len(parts) != 3:
        return None

    prefix, number, extension = parts
    digits = number.removeprefix("+")
    if not prefix or not (digits.isascii() and digits.isdigit()):
        return None

    return prefix, int(number), extension


def classify_entry(path: Path, data_file_name: str) -> RotationCandidate | None:
    """Decide whether a directory entry belongs to the rotation family.

    Args:
        path: Directory entry to check.
        data_file_name: Name of the active file, extension included.

    Returns:
        RotationCandidate if the entry is the active file or one of its
        rotations, None otherwise.

    """
    name = path.name

    if name == data_file_name:
        active = Path(data_file_name)
        return RotationCandidate(
            path=path,
            new_name=f"{active.stem}.1{active.suffix}",
            prefix=active.stem,
            generation=0,
            extension=active.suffix.lstrip("."),
            active=True,
        )

    parsed = parse_rotated_name(name)
    if parsed is None:
        return None

    prefix, generation, extension = parsed
    if not data_file_name.startswith(prefix):
        return None

    return RotationCandidate(
        path=path,
        new_name=f"{prefix}.{generation + 1}.{extension}",
        prefix=prefix,
        generation=generation,
        extension=extension,
    )


def _lexicographic_key(candidate: RotationCandidate) -> Any:
    return candidate.new_name


def _numeric_key(candidate: RotationCandidate) -> Any:
    return (candidate.prefix, candidate.new_generation, candidate.extension)


class FileRotation:
    """A rotation request for a single file.

    The setters return an updated copy, so a request can be built by
    chaining and reused without one configuration leaking into another.
    """

    def __init__(self, file: str | os.PathLike[str]) -> None:
        """Create a request with no retention cap and the default extension.

        Args:
            file: Path of the active file.

        """
        self.file = os.fspath(file)
        self.retention: int | None = None
        self.default_extension = DEFAULT_EXTENSION
        self.numeric = False

    def __repr__(self) -> str:
        return (
            f"FileRotation({self.file!r}, retention={self.retention}, "
            f"extension={self.default_extension!r}, numeric={self.numeric})"
        )

    def _with(self, **changes: Any) -> FileRotation:
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    def max_old_files(self, max_old_files: int) -> FileRotation:
        """Set how many rotated files to keep."""
        if max_old_files < 0:
            raise ValueError(f"max_old_files must be >= 0, got {max_old_files}")
        return self._with(retention=max_old_files)

    def file_extension(self, extension: str) -> FileRotation:
        """Set the extension to use if the file name has none."""
        extension = extension.lstrip(".")
        if not extension:
            raise ValueError("file extension must not be empty")
        return self._with(default_extension=extension)

    def numeric_order(self, enabled: bool = True) -> FileRotation:
        """Order generations numerically instead of by destination name.

        By default candidates are ordered by their new file name as plain
        strings, so ``app.10.log`` sorts before ``app.2.log`` and is kept
        while ``app.2.log`` is deleted once a retention cap applies.
        """
        return self._with(numeric=enabled)

    def _resolve_target(self) -> Path:
        """Get the data file path, with the default extension if needed."""
        separators = tuple(sep for sep in (os.sep, os.altsep) if sep)
        if self.file.endswith(separators):
            raise NotAFileError(self.file)

        data_file = Path(self.file)
        if data_file.name in _NON_FILE_NAMES:
            raise NotAFileError(self.file)

        if not data_file.suffix:
            data_file = data_file.with_name(f"{data_file.name}.{self.default_extension}")

        return data_file

    def _scan(self, directory: Path, data_file_name: str) -> list[RotationCandidate]:
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise RotationIOError(directory, e) from e

        candidates: list[RotationCandidate] = []
        for entry in entries:
            if candidate := classify_entry(entry, data_file_name):
                logger.debug("Rotation candidate: %s -> %s", entry.name, candidate.new_name)
                candidates.append(candidate)

        return candidates

    def plan(self) -> RotationPlan:
        """Compute the renames and deletions without touching the filesystem.

        Returns:
            RotationPlan with renames in the order they must be applied.

        Raises:
            NotAFileError: The path denotes a directory or has no file name.
            RotationIOError: The containing directory cannot be listed.

        """
        data_file = self._resolve_target()
        directory = data_file.parent

        candidates = self._scan(directory, data_file.name)
        candidates.sort(key=_numeric_key if self.numeric else _lexicographic_key)

        deletions: list[RotationCandidate] = []
        if self.retention is not None:
            while len(candidates) > self.retention:
                deletions.append(candidates.pop())

        # Highest destination first, so every target name is vacated before it is claimed
        plan = RotationPlan(directory=directory, renames=candidates[::-1], deletions=deletions)
        logger.debug(
            "Planned rotation of %s: %d renames, %d deletions",
            data_file,
            len(plan.renames),
            len(plan.deletions),
        )
        return plan

    def rotate(self) -> RotationReport:
        """Rotate the file and its existing rotations.

        Failures to rename or delete an individual file are logged and
        recorded in the report; they do not stop the remaining operations.

        Returns:
            RotationReport with one result per attempted operation.

        Raises:
            NotAFileError: The path denotes a directory or has no file name.
            RotationIOError: The containing directory cannot be listed.

        """
        plan = self.plan()
        report = RotationReport(directory=plan.directory)

        for candidate in plan.deletions:
            report.results.append(_delete(candidate))

        for candidate in plan.renames:
            report.results.append(_rename(candidate, plan.destination(candidate)))

        return report


def _delete(candidate: RotationCandidate) -> RotationResult:
    path = candidate.path
    try:
        path.unlink()
    except OSError as e:
        logger.warning("Rotating logs: cannot remove file %s: %s", path, e)
        return RotationResult(path=path, success=False, action="error", error=str(e))

    logger.info("Removed old rotation: %s", path)
    return RotationResult(path=path, success=True, action="deleted")


def _rename(candidate: RotationCandidate, destination: Path) -> RotationResult:
    path = candidate.path
    try:
        path.replace(destination)
    except OSError as e:
        logger.warning("Error rotating file %s: %s", path, e)
        return RotationResult(
            path=path,
            success=False,
            action="error",
            destination=destination,
            error=str(e),
        )

    logger.info("Rotated: %s -> %s", path.name, destination.name)
    return RotationResult(path=path, success=True, action="renamed", destination=destination)
