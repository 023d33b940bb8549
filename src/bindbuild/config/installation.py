"""
Installation data reported by the native library probe.

The probe (qmake, pkg-config or a custom script) runs before bindbuild and
writes a small JSON record describing the installed library:

    {
        "version": "5.12.4",
        "paths": {
            "include_root": "/usr/include/x86_64-linux-gnu/qt5",
            "library_root": "/usr/lib/x86_64-linux-gnu",
            "prefix": "/usr"
        }
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from ..errors import BindBuildError
from ..version import Version


class InstallationDataError(BindBuildError):
    """Exception raised when the probe record cannot be read."""

    pass


@dataclass(frozen=True)
class InstallationData:
    """Installed library version and named path bindings."""

    version: str
    paths: Mapping[str, str] = field(default_factory=dict)

    def parsed_version(self) -> Version:
        """
        Raises:
            InvalidVersion: If the reported version is malformed
        """
        return Version.parse(self.version)

    def path(self, slot: str) -> str:
        """Return the path bound to a slot (KeyError if absent)."""
        return self.paths[slot]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallationData":
        if not isinstance(data, dict):
            raise InstallationDataError(f"Installation data must be an object, got {type(data).__name__}")
        if "version" not in data:
            raise InstallationDataError("Installation data is missing required field: version")

        paths = data.get("paths", {})
        if not isinstance(paths, dict):
            raise InstallationDataError("'paths' must be an object mapping slot names to paths")

        return cls(
            version=str(data["version"]),
            paths={str(slot): str(value) for slot, value in paths.items()},
        )

    @classmethod
    def from_json_file(cls, path: Path) -> "InstallationData":
        """
        Load installation data written by the probe.

        Raises:
            InstallationDataError: If the file is missing or malformed
        """
        if not path.exists():
            raise InstallationDataError(f"Installation data not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InstallationDataError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise InstallationDataError(f"Failed to read {path}: {e}") from e

        return cls.from_dict(data)
