"""Native Library Version Model.

This module parses the version strings reported for native library
installations and orders them by major.minor.patch.

Design:
    - Parsing is delegated to semantic_version (strict MAJOR.MINOR.PATCH)
    - Pre-release and build metadata are kept for diagnostics only
    - Equality and ordering use (major, minor, patch) exclusively
"""

from dataclasses import dataclass, field
from typing import Tuple

import semantic_version

from .errors import BindBuildError


class InvalidVersion(BindBuildError, ValueError):
    """Raised when a version string does not parse as major.minor.patch."""

    pass


@dataclass(frozen=True, order=True)
class Version:
    """A parsed native library version.

    Example:
        >>> Version.parse("5.12.2") < Version.parse("5.13.0")
        True
        >>> str(Version.parse("5.12.2-rc1+build7"))
        '5.12.2'
    """

    major: int
    minor: int
    patch: int
    raw: str = field(default="", compare=False, repr=False)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string.

        Args:
            text: Version string (e.g., "5.12.2", "6.5.0-beta1")

        Returns:
            Version instance

        Raises:
            InvalidVersion: If the string is not a valid version
        """
        if not isinstance(text, str):
            raise InvalidVersion(f"Version must be a string, got {type(text).__name__}")

        stripped = text.strip()
        try:
            parsed = semantic_version.Version(stripped)
        except ValueError as e:
            raise InvalidVersion(f"Invalid version '{text}': {e}") from e

        return cls(
            major=parsed.major,
            minor=parsed.minor,
            patch=parsed.patch,
            raw=stripped,
        )

    @property
    def minor_line(self) -> Tuple[int, int]:
        """Return the (major, minor) pair shared by all patches of a line."""
        return (self.major, self.minor)

    @property
    def metadata(self) -> str:
        """Return the pre-release/build suffix of the original string, if any."""
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.raw.startswith(base):
            return self.raw[len(base):]
        return ""

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
