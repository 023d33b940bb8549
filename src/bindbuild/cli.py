"""
Command-line interface for bindbuild.

This module provides the `bindbuild` CLI tool used from build scripts of
generated binding crates.
"""

import argparse
import json
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

from bindbuild import __version__
from bindbuild.build import BuildOrchestrator, BuildResult, resolve_version
from bindbuild.cli_utils import ErrorFormatter, PathValidator, ProjectFiles, setup_logging
from bindbuild.config import (
    BuildSettings,
    InstallationData,
    KnownTargetRegistry,
    LibraryType,
)
from bindbuild.errors import BindBuildError
from bindbuild.version import Version

OUTPUT_FORMATS = ("json", "cargo", "text")


@dataclass
class ResolveArgs:
    """Arguments for the resolve command."""

    project_dir: Path
    registry: Optional[Path] = None
    installation: Optional[Path] = None
    library_version: Optional[str] = None
    library_type: Optional[str] = None
    allow_unsupported: bool = False
    output_format: str = "text"
    verbose: bool = False


@dataclass
class TargetsArgs:
    """Arguments for the targets command."""

    project_dir: Path
    registry: Optional[Path] = None
    verbose: bool = False


@dataclass
class ClosestArgs:
    """Arguments for the closest command."""

    current: str
    known: List[str]
    verbose: bool = False


def _print_result(result: BuildResult, output_format: str) -> None:
    config = result.config
    if config is None:
        return

    if output_format == "json":
        print(json.dumps(config.to_dict(), indent=2))
    elif output_format == "cargo":
        for warning in result.warnings:
            print(f"cargo:warning={warning}")
        for line in result.listing.splitlines():
            print(f"cargo:warning={line}")
        for line in config.cargo_directives():
            print(line)
    else:
        for warning in result.warnings:
            ErrorFormatter.print_warning(warning)
        if result.listing:
            print(result.listing)
        ErrorFormatter.print_success(result.message)
        print()
        print(f"Library type: {config.library_type.value}")
        for label, values in (
            ("Include dirs", config.include_dirs),
            ("Library dirs", config.library_dirs),
            ("Framework dirs", config.framework_dirs),
            ("Libraries", config.libraries),
            ("Frameworks", config.frameworks),
            ("Compiler flags", config.compiler_flags),
        ):
            if values:
                print(f"{label}:")
                for value in values:
                    print(f"  {value}")


def resolve_command(args: ResolveArgs) -> None:
    """Select the build configuration for the installed library.

    Examples:
        bindbuild resolve                          # Use ./known_targets.json and ./installation.json
        bindbuild resolve --format cargo          # Print cargo directives
        bindbuild resolve --library-version 5.12.2
        bindbuild resolve --allow-unsupported     # Warn instead of failing on old versions
    """
    setup_logging(args.verbose)

    try:
        registry = KnownTargetRegistry.from_json_file(
            ProjectFiles.registry_path(args.project_dir, args.registry)
        )
        installation = InstallationData.from_json_file(
            ProjectFiles.installation_path(args.project_dir, args.installation)
        )

        settings = BuildSettings.load(args.project_dir).with_values(
            {
                "library_version": args.library_version,
                "library_type": args.library_type,
            },
            source="command line",
        )
        if args.allow_unsupported:
            settings = replace(settings, allow_unsupported=True)

        result = BuildOrchestrator(registry, settings).run(installation)

        if result.success:
            _print_result(result, args.output_format)
            sys.exit(0)
        else:
            ErrorFormatter.print_error("Build configuration failed!", result.message)
            if result.listing:
                print(result.listing)
            sys.exit(result.exit_code or 1)

    except BindBuildError as e:
        ErrorFormatter.print_error(f"Error: {type(e).__name__}", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def targets_command(args: TargetsArgs) -> None:
    """List the known targets of a crate.

    Examples:
        bindbuild targets
        bindbuild targets --registry path/to/known_targets.json
    """
    setup_logging(args.verbose)

    try:
        registry = KnownTargetRegistry.from_json_file(
            ProjectFiles.registry_path(args.project_dir, args.registry)
        )
        registry.ensure_not_empty()
        print(registry.listing())
        sys.exit(0)

    except BindBuildError as e:
        ErrorFormatter.print_error(f"Error: {type(e).__name__}", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def closest_command(args: ClosestArgs) -> None:
    """Print the known version closest to an installed one.

    Examples:
        bindbuild closest --current 5.13.1 5.11.0 5.12.2    # 5.12.2 (cross-line-older)
        bindbuild closest --current 5.9.1 5.10.7 5.11.0     # unsupported
    """
    setup_logging(args.verbose)

    try:
        resolution = resolve_version(
            [Version.parse(v) for v in args.known],
            Version.parse(args.current),
        )
        if resolution.version is None:
            print(resolution.reason.value)
            sys.exit(1)
        print(f"{resolution.version} ({resolution.reason.value})")
        sys.exit(0)

    except BindBuildError as e:
        ErrorFormatter.print_error(f"Error: {type(e).__name__}", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main(argv: Optional[List[str]] = None) -> None:
    """bindbuild - build configuration selection for generated bindings."""
    parser = argparse.ArgumentParser(
        prog="bindbuild",
        description="Select the build configuration of a generated binding crate",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"bindbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Select the build configuration for the installed library",
    )
    resolve_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Crate directory (default: current directory)",
    )
    resolve_parser.add_argument(
        "-r",
        "--registry",
        type=Path,
        default=None,
        help="Known-target registry (default: <project_dir>/known_targets.json)",
    )
    resolve_parser.add_argument(
        "-i",
        "--installation",
        type=Path,
        default=None,
        help="Installation data from the probe (default: <project_dir>/installation.json)",
    )
    resolve_parser.add_argument(
        "--library-version",
        default=None,
        help="Force a known library version instead of resolving one",
    )
    resolve_parser.add_argument(
        "--library-type",
        choices=[t.value for t in LibraryType],
        default=None,
        help="Force static or shared linkage",
    )
    resolve_parser.add_argument(
        "--allow-unsupported",
        action="store_true",
        help="Warn instead of failing when the installed version is unsupported",
    )
    resolve_parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)",
    )
    resolve_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output",
    )

    # Targets command
    targets_parser = subparsers.add_parser(
        "targets",
        help="List the known targets of a crate",
    )
    targets_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Crate directory (default: current directory)",
    )
    targets_parser.add_argument(
        "-r",
        "--registry",
        type=Path,
        default=None,
        help="Known-target registry (default: <project_dir>/known_targets.json)",
    )
    targets_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output",
    )

    # Closest command
    closest_parser = subparsers.add_parser(
        "closest",
        help="Print the known version closest to an installed one",
    )
    closest_parser.add_argument(
        "--current",
        required=True,
        help="Installed library version",
    )
    closest_parser.add_argument(
        "known",
        nargs="+",
        help="Known library versions",
    )
    closest_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output",
    )

    # Parse arguments
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    # Validate project directory exists
    if hasattr(parsed_args, "project_dir"):
        PathValidator.validate_project_dir(parsed_args.project_dir)

    # Execute command
    if parsed_args.command == "resolve":
        resolve_command(
            ResolveArgs(
                project_dir=parsed_args.project_dir,
                registry=parsed_args.registry,
                installation=parsed_args.installation,
                library_version=parsed_args.library_version,
                library_type=parsed_args.library_type,
                allow_unsupported=parsed_args.allow_unsupported,
                output_format=parsed_args.output_format,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "targets":
        targets_command(
            TargetsArgs(
                project_dir=parsed_args.project_dir,
                registry=parsed_args.registry,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "closest":
        closest_command(
            ClosestArgs(
                current=parsed_args.current,
                known=parsed_args.known,
                verbose=parsed_args.verbose,
            )
        )


if __name__ == "__main__":
    main()
