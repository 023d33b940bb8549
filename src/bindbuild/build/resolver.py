"""Closest Known Version Resolver.

This module picks which known library version a crate should build against
when the installed version is not one the crate was generated for.

Selection order:
    1. Exact match
    2. Same major.minor line: the closest older patch, else the oldest patch
       of that line
    3. Any line: the closest older known version
    4. Installed version predates every known version: no choice
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from ..config.registry import EmptyRegistry
from ..errors import BindBuildError
from ..version import Version


class UnsupportedVersion(BindBuildError):
    """Raised when the installed version predates every known version."""

    def __init__(self, message: str, version: Optional[Version] = None, listing: str = ""):
        super().__init__(message)
        self.version = version
        self.listing = listing


class ResolutionReason(Enum):
    """Why a version was chosen."""

    EXACT = "exact"
    SAME_MINOR_OLDER = "same-minor-older"
    SAME_MINOR_NEWER = "same-minor-fallback-newer"
    CROSS_LINE_OLDER = "cross-line-older"
    UNSUPPORTED = "unsupported"
    OVERRIDE = "override"


@dataclass(frozen=True)
class Resolution:
    """Outcome of matching an installed version against the known versions."""

    requested: Version
    version: Optional[Version]
    reason: ResolutionReason

    @property
    def supported(self) -> bool:
        return self.version is not None

    @property
    def is_exact(self) -> bool:
        return self.reason is ResolutionReason.EXACT

    def describe(self) -> str:
        """Render the decision as a single log line."""
        if self.reason is ResolutionReason.EXACT:
            return f"Using known version {self.version} (exact match)"
        if self.reason is ResolutionReason.OVERRIDE:
            return f"Using forced version {self.version} (installed {self.requested}, override)"
        if self.version is None:
            return f"Unsupported library version {self.requested}: older than every known version (unsupported)"
        return (
            f"Installed version {self.requested} is unknown. "
            f"Using closest known version {self.version} ({self.reason.value})"
        )


def resolve_version(known: Iterable[Version], current: Version) -> Resolution:
    """
    Select the known version closest to the installed one.

    The result does not depend on the order of known.

    Args:
        known: Known versions (duplicates allowed)
        current: Installed version

    Returns:
        Resolution with the chosen version and reason; version is None
        when current predates every known version

    Raises:
        EmptyRegistry: If known is empty
    """
    versions: List[Version] = sorted(set(known))
    if not versions:
        raise EmptyRegistry("No known versions to resolve against")

    if current in versions:
        return Resolution(current, current, ResolutionReason.EXACT)

    same_line = [v for v in versions if v.minor_line == current.minor_line]
    if same_line:
        older = [v for v in same_line if v < current]
        if older:
            return Resolution(current, max(older), ResolutionReason.SAME_MINOR_OLDER)
        return Resolution(current, min(same_line), ResolutionReason.SAME_MINOR_NEWER)

    older = [v for v in versions if v < current]
    if older:
        return Resolution(current, max(older), ResolutionReason.CROSS_LINE_OLDER)

    return Resolution(current, None, ResolutionReason.UNSUPPORTED)


def closest_version(known: Iterable[Version], current: Version) -> Optional[Version]:
    """Return the closest known version, or None if there is no safe choice."""
    return resolve_version(known, current).version
