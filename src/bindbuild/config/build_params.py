"""
Native build parameters.

This module describes the build parameters a known target contributes to the
native build: linkage mode, include/library/framework directory templates,
linked library names and extra compiler flags.

Directory entries are templates. A "{slot}" placeholder is replaced with the
matching path binding from the installation probe when the configuration is
merged (see bindbuild.build.merger).

Example JSON ("build" object in known_targets.json):
    {
        "library_type": "shared",
        "include_dirs": ["{include_root}", "{include_root}/QtCore"],
        "library_dirs": ["{library_root}"],
        "libraries": ["Qt5Core"]
    }
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from ..errors import BindBuildError


class BuildParamsError(BindBuildError):
    """Exception raised for malformed build parameter records."""

    pass


class ConflictingLinkage(BuildParamsError):
    """Raised when two merged records declare different linkage modes."""

    pass


class LibraryType(Enum):
    """Linkage mode of the native library."""

    STATIC = "static"
    SHARED = "shared"

    @classmethod
    def parse(cls, value: str) -> "LibraryType":
        """Parse a linkage mode name ("static", "shared" or "dylib").

        Raises:
            BuildParamsError: If the name is not a linkage mode
        """
        normalized = value.strip().lower()
        if normalized == "dylib":
            normalized = "shared"
        try:
            return cls(normalized)
        except ValueError:
            raise BuildParamsError(
                f"Unknown library type: {value!r}. Expected 'static' or 'shared'"
            )

    @property
    def cargo_kind(self) -> str:
        return "static" if self is LibraryType.STATIC else "dylib"


def _append_unique(base: Tuple[str, ...], extra: Iterable[str]) -> Tuple[str, ...]:
    merged = list(base)
    for item in extra:
        if item not in merged:
            merged.append(item)
    return tuple(merged)


@dataclass(frozen=True)
class BuildParameters:
    """Build parameters contributed by a known target or a build layer."""

    library_type: Optional[LibraryType] = None
    include_dirs: Tuple[str, ...] = ()
    library_dirs: Tuple[str, ...] = ()
    framework_dirs: Tuple[str, ...] = ()
    libraries: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    compiler_flags: Tuple[str, ...] = ()

    LIST_FIELDS = (
        "include_dirs",
        "library_dirs",
        "framework_dirs",
        "libraries",
        "frameworks",
        "compiler_flags",
    )

    def merged_with(self, other: "BuildParameters") -> "BuildParameters":
        """
        Layer another record on top of this one.

        Lists are concatenated in order with duplicates dropped. The linkage
        mode is taken from whichever side declares one.

        Raises:
            ConflictingLinkage: If both sides declare different linkage modes
        """
        if (
            self.library_type is not None
            and other.library_type is not None
            and self.library_type != other.library_type
        ):
            raise ConflictingLinkage(
                f"Conflicting library types: {self.library_type.value} "
                f"and {other.library_type.value}"
            )

        return BuildParameters(
            library_type=self.library_type or other.library_type,
            **{
                name: _append_unique(getattr(self, name), getattr(other, name))
                for name in self.LIST_FIELDS
            },
        )

    def templates(self) -> Tuple[str, ...]:
        """Return every directory template in this record."""
        return self.include_dirs + self.library_dirs + self.framework_dirs

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "BuildParameters":
        """
        Build parameters from their JSON form.

        Raises:
            BuildParamsError: On unknown keys or wrongly typed values
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise BuildParamsError(f"Build parameters must be an object, got {data!r}")

        unknown = set(data) - set(cls.LIST_FIELDS) - {"library_type"}
        if unknown:
            raise BuildParamsError(f"Unknown build parameter keys: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        for name in cls.LIST_FIELDS:
            items = data.get(name, [])
            if isinstance(items, str) or not isinstance(items, list):
                raise BuildParamsError(f"'{name}' must be a list of strings, got {items!r}")
            values[name] = tuple(str(item) for item in items)

        library_type = data.get("library_type")
        if library_type is not None:
            values["library_type"] = LibraryType.parse(str(library_type))

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "library_type": self.library_type.value if self.library_type else None,
        }
        for name in self.LIST_FIELDS:
            data[name] = list(getattr(self, name))
        return data
