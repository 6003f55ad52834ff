"""Command line interface for file rotation."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import RotationConfig
from .errors import FileRotationError
from .rotator import FileRotation


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses sys.argv if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="file-rotation",
        description="Rotate a log file and its numbered siblings",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every rotation decision",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    rotate_parser = subparsers.add_parser("rotate", help="Rotate a file")
    plan_parser = subparsers.add_parser("plan", help="Show what a rotation would do")

    for sub in (rotate_parser, plan_parser):
        sub.add_argument("path", help="File to rotate")
        sub.add_argument(
            "--max-old-files",
            "-n",
            type=int,
            default=None,
            help="Number of rotated files to keep",
        )
        sub.add_argument(
            "--extension",
            "-e",
            default=None,
            help="Extension to assume when the file has none",
        )
        sub.add_argument(
            "--numeric",
            action="store_true",
            default=None,
            help="Order generations numerically instead of by file name",
        )

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser.parse_args(argv)


def setup_logging(config: RotationConfig, *, verbose: bool = False) -> logging.Logger:
    """Set up logging for the command line.

    Args:
        config: Rotation configuration.
        verbose: Lower the console level to DEBUG.

    Returns:
        Configured logger instance.

    """
    logger = logging.getLogger("file-rotation")
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO))

    # Clear existing handlers to avoid duplicates if setup runs again
    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def build_rotation(config: RotationConfig, args: argparse.Namespace) -> FileRotation:
    """Build a rotation request from config defaults and command line overrides."""
    rotation = config.apply(FileRotation(args.path))

    if args.max_old_files is not None:
        rotation = rotation.max_old_files(args.max_old_files)
    if args.extension is not None:
        rotation = rotation.file_extension(args.extension)
    if args.numeric is not None:
        rotation = rotation.numeric_order(args.numeric)

    return rotation


def cmd_rotate(config: RotationConfig, args: argparse.Namespace) -> int:
    """Execute rotate command.

    Args:
        config: Rotation configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    try:
        report = build_rotation(config, args).rotate()
    except (FileRotationError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        return 1

    if not report.results:
        console.print("[green]Nothing to rotate[/green]")
        return 0

    table = Table(title=f"Rotated in {report.directory}")
    table.add_column("File", style="cyan")
    table.add_column("Action")
    table.add_column("Result", style="dim")

    for result in report.results:
        if result.action == "renamed" and result.destination is not None:
            table.add_row(result.path.name, "[green]renamed[/green]", result.destination.name)
        elif result.action == "deleted":
            table.add_row(result.path.name, "[yellow]deleted[/yellow]", "")
        else:
            table.add_row(result.path.name, "[red]error[/red]", result.error or "")

    console.print(table)

    if not report.ok:
        console.print(f"[yellow]{len(report.errors)} operations failed[/yellow]")
    return 0


def cmd_plan(config: RotationConfig, args: argparse.Namespace) -> int:
    """Execute plan command.

    Args:
        config: Rotation configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    try:
        plan = build_rotation(config, args).plan()
    except (FileRotationError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        return 1

    if plan.is_empty:
        console.print("[green]Nothing to rotate[/green]")
        return 0

    table = Table(title=f"Rotation plan for {plan.directory}")
    table.add_column("File", style="cyan")
    table.add_column("Action")
    table.add_column("New name", style="green")

    for candidate in plan.deletions:
        table.add_row(candidate.path.name, "[yellow]delete[/yellow]", "")
    for candidate in plan.renames:
        table.add_row(candidate.path.name, "rename", candidate.new_name)

    console.print(table)
    return 0


def cmd_config(config: RotationConfig, args: argparse.Namespace) -> int:
    """Execute config command.

    Args:
        config: Rotation configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    if args.init:
        config_path = args.config or RotationConfig.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            return 1
        config.save(config_path)
        console.print(f"[green]Created config: {config_path}[/green]")
        return 0

    if args.show:
        table = Table(title="Current Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        max_old = "unbounded" if config.max_old_files is None else str(config.max_old_files)
        table.add_row("Max old files", max_old)
        table.add_row("Default extension", config.extension)
        table.add_row("Numeric order", str(config.numeric_order))
        table.add_row("Log level", config.log_level)
        table.add_row("Log file", str(config.log_file) if config.log_file else "-")

        console.print(table)
        return 0

    console.print("[yellow]Use --init or --show[/yellow]")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)
    try:
        config = RotationConfig.load(args.config)
    except ValueError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        return 1
    setup_logging(config, verbose=args.verbose)

    if args.command == "rotate":
        return cmd_rotate(config, args)
    elif args.command == "plan":
        return cmd_plan(config, args)
    elif args.command == "config":
        return cmd_config(config, args)
    else:
        print("Specify a command: rotate, plan or config")
        return 1


if __name__ == "__main__":
    sys.exit(main())
