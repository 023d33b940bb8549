"""CLI utility functions for bindbuild.

This module provides common utilities used across CLI commands including:
- Logging setup
- Locating the registry and installation files of a crate
- Error handling and formatting
"""

import logging
import sys
from pathlib import Path
from typing import Optional

REGISTRY_FILENAME = "known_targets.json"
INSTALLATION_FILENAME = "installation.json"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Setup logging for CLI commands.

    Args:
        verbose: Log DEBUG messages instead of INFO
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once in a process
    for handler in list(logger.handlers):
        if getattr(handler, "_bindbuild", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._bindbuild = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)


class ProjectFiles:
    """Locates the registry and installation files of a crate."""

    @staticmethod
    def registry_path(project_dir: Path, registry: Optional[Path] = None) -> Path:
        """Return the explicit registry path or project_dir/known_targets.json."""
        if registry is not None:
            return registry
        return project_dir / REGISTRY_FILENAME

    @staticmethod
    def installation_path(project_dir: Path, installation: Optional[Path] = None) -> Path:
        """Return the explicit installation path or project_dir/installation.json."""
        if installation is not None:
            return installation
        return project_dir / INSTALLATION_FILENAME


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Unsupported version")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print(f"{ErrorFormatter.YELLOW}! {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}")
            sys.exit(2)
        if not project_dir.is_dir():
            print(f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}")
            sys.exit(2)
