"""Configuration management for file rotation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from .rotator import DEFAULT_EXTENSION

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

if TYPE_CHECKING:
    from .rotator import FileRotation


def parse_bool(value: Any, default: bool) -> bool:
    """Interpret a YAML value as a boolean.

    Quoted strings such as ``"false"`` or ``"off"`` are read by meaning, not
    by truthiness.

    Args:
        value: Raw value from the config file.
        default: Result when the value is None.

    Returns:
        Parsed boolean.

    """
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "on", "1"}
    return bool(value)


@dataclass
class RotationConfig:
    """Defaults applied to rotation requests made from the command line."""

    # Rotated files to keep (None keeps all of them)
    max_old_files: int | None = None

    # Extension assumed when the target has none
    extension: str = DEFAULT_EXTENSION

    # Order generations numerically instead of by file name
    numeric_order: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / ".config/file-rotation/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> RotationConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        with config_path.open(encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        config = cls._from_dict(data)
        config.validate()
        return config

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> RotationConfig:
        """Create config from dictionary."""
        config = cls()

        if "rotation" in data:
            rotation = data["rotation"] or {}
            if "max_old_files" in rotation:
                value = rotation["max_old_files"]
                config.max_old_files = None if value is None else int(value)
            if rotation.get("extension") is not None:
                config.extension = str(rotation["extension"])
            if "numeric_order" in rotation:
                config.numeric_order = parse_bool(rotation["numeric_order"], config.numeric_order)

        if "logging" in data:
            logging_cfg = data["logging"] or {}
            if "level" in logging_cfg:
                config.log_level = str(logging_cfg["level"]).upper()
            if logging_cfg.get("file"):
                config.log_file = Path(os.path.expanduser(logging_cfg["file"]))

        return config

    def validate(self) -> None:
        """Check that the loaded values are usable.

        Raises:
            ValueError: A setting is out of range.

        """
        if self.max_old_files is not None and self.max_old_files < 0:
            raise ValueError(f"max_old_files must be >= 0, got {self.max_old_files}")
        if not self.extension.lstrip("."):
            raise ValueError("extension must not be empty")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

    def apply(self, rotation: FileRotation) -> FileRotation:
        """Configure a rotation request with these defaults.

        Args:
            rotation: Request to configure.

        Returns:
            The configured request.

        """
        rotation = rotation.file_extension(self.extension).numeric_order(self.numeric_order)
        if self.max_old_files is not None:
            rotation = rotation.max_old_files(self.max_old_files)
        return rotation

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "rotation": {
                "max_old_files": self.max_old_files,
                "extension": self.extension,
                "numeric_order": self.numeric_order,
            },
            "logging": {
                "level": self.log_level,
                "file": str(self.log_file) if self.log_file else None,
            },
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
