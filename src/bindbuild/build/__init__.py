"""
Build configuration selection for bindbuild.

This module provides:
- Closest known version resolution
- Merging of known-target parameters with installation paths
- Build orchestration
"""

from .merger import BuildConfigMerger, MissingPathBinding, ResolvedConfig
from .orchestrator import BuildOrchestrator, BuildResult
from .resolver import (
    Resolution,
    ResolutionReason,
    UnsupportedVersion,
    closest_version,
    resolve_version,
)

__all__ = [
    "BuildConfigMerger",
    "MissingPathBinding",
    "ResolvedConfig",
    "BuildOrchestrator",
    "BuildResult",
    "Resolution",
    "ResolutionReason",
    "UnsupportedVersion",
    "closest_version",
    "resolve_version",
]
