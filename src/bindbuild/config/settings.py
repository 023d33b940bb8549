"""
Build settings chosen by the invoking crate.

Settings are read from the [bindbuild] section of an INI file and then from
environment variables, so a user can force a version for a single build
without editing the crate.

Example bindbuild.ini:
    [bindbuild]
    library_version = 5.12.2
    library_type = static
    allow_unsupported = false

Environment variables (override the file):
    BINDBUILD_LIBRARY_VERSION
    BINDBUILD_LIBRARY_TYPE
    BINDBUILD_ALLOW_UNSUPPORTED
"""

import configparser
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..errors import BindBuildError
from .build_params import BuildParamsError, LibraryType

SECTION = "bindbuild"
ENV_PREFIX = "BINDBUILD_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class SettingsError(BindBuildError):
    """Exception raised for invalid build settings."""

    pass


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise SettingsError(f"Invalid boolean for {name}: {value!r}")


@dataclass(frozen=True)
class BuildSettings:
    """Settings that change how a target is selected and linked."""

    library_version: Optional[str] = None
    library_type: Optional[LibraryType] = None
    allow_unsupported: bool = False

    def with_values(self, values: Mapping[str, Optional[str]], source: str) -> "BuildSettings":
        """
        Return a copy with raw string values applied.

        Args:
            values: Mapping of setting name to raw value (None leaves it unchanged)
            source: Where the values came from (for error messages)

        Raises:
            SettingsError: If a value is invalid
        """
        updates: Dict[str, object] = {}

        version = values.get("library_version")
        if version is not None and version.strip():
            updates["library_version"] = version.strip()

        library_type = values.get("library_type")
        if library_type is not None and library_type.strip():
            try:
                updates["library_type"] = LibraryType.parse(library_type)
            except BuildParamsError as e:
                raise SettingsError(f"{source}: {e}") from e

        allow = values.get("allow_unsupported")
        if allow is not None:
            updates["allow_unsupported"] = _parse_bool(f"{source} allow_unsupported", allow)

        return replace(self, **updates)

    @classmethod
    def from_ini(cls, ini_path: Path) -> "BuildSettings":
        """
        Load settings from the [bindbuild] section of an INI file.

        A missing file or missing section yields the defaults.

        Raises:
            SettingsError: If the file cannot be parsed or holds invalid values
        """
        settings = cls()
        if not ini_path.exists():
            return settings

        parser = configparser.ConfigParser()
        try:
            parser.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise SettingsError(f"Failed to parse {ini_path}: {e}") from e

        if SECTION not in parser:
            return settings

        section = parser[SECTION]
        return settings.with_values(
            {
                "library_version": section.get("library_version"),
                "library_type": section.get("library_type"),
                "allow_unsupported": section.get("allow_unsupported"),
            },
            source=str(ini_path),
        )

    def with_environ(self, environ: Optional[Mapping[str, str]] = None) -> "BuildSettings":
        """Apply BINDBUILD_* environment overrides."""
        if environ is None:
            environ = os.environ
        return self.with_values(
            {
                "library_version": environ.get(f"{ENV_PREFIX}LIBRARY_VERSION"),
                "library_type": environ.get(f"{ENV_PREFIX}LIBRARY_TYPE"),
                "allow_unsupported": environ.get(f"{ENV_PREFIX}ALLOW_UNSUPPORTED"),
            },
            source="environment",
        )

    @classmethod
    def load(cls, project_dir: Path, environ: Optional[Mapping[str, str]] = None) -> "BuildSettings":
        """Load settings from project_dir/bindbuild.ini and the environment."""
        return cls.from_ini(project_dir / "bindbuild.ini").with_environ(environ)
