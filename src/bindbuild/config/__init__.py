"""Configuration modules for bindbuild."""

from .build_params import BuildParameters, ConflictingLinkage, LibraryType
from .condition import ALWAYS_TRUE, AlwaysTrue, And, Leaf, Not, Or, evaluate, summarize
from .installation import InstallationData, InstallationDataError
from .registry import (
    BuildLayer,
    EmptyRegistry,
    KnownTarget,
    KnownTargetRegistry,
    RegistryError,
    UnknownOverrideVersion,
)
from .settings import BuildSettings, SettingsError

__all__ = [
    "ALWAYS_TRUE",
    "AlwaysTrue",
    "And",
    "Leaf",
    "Not",
    "Or",
    "evaluate",
    "summarize",
    "BuildParameters",
    "ConflictingLinkage",
    "LibraryType",
    "InstallationData",
    "InstallationDataError",
    "BuildLayer",
    "EmptyRegistry",
    "KnownTarget",
    "KnownTargetRegistry",
    "RegistryError",
    "UnknownOverrideVersion",
    "BuildSettings",
    "SettingsError",
]
