"""
Known-target registry.

The registry is the immutable table of configurations a generated crate was
validated against. It is written by the generator next to the crate sources
(known_targets.json) and is only read at build time.

Example known_targets.json:
    {
        "library": "Qt5Core",
        "known_targets": [
            {
                "version": "5.12.2",
                "condition": {"os": "linux"},
                "build": {
                    "include_dirs": ["{include_root}", "{include_root}/QtCore"],
                    "library_dirs": ["{library_root}"],
                    "libraries": ["Qt5Core"]
                }
            }
        ],
        "build_layers": [
            {"condition": {"os": "macos"}, "build": {"frameworks": ["QtCore"]}}
        ]
    }
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import BindBuildError
from ..platform_utils import HostFacts
from ..version import InvalidVersion, Version
from .build_params import BuildParameters, BuildParamsError
from .condition import ALWAYS_TRUE, Condition, ConditionError, condition_from_data, evaluate, summarize

LISTING_HEADER = "This crate supports the following targets:"
LISTING_PREFIX = "* "


class RegistryError(BindBuildError):
    """Exception raised when the registry resource is malformed."""

    pass


class EmptyRegistry(RegistryError):
    """Raised when a registry holds no known targets.

    A generated crate always ships at least one target, so this indicates a
    corrupt or miscompiled crate rather than an unsupported installation.
    """

    pass


class UnknownOverrideVersion(BindBuildError):
    """Raised when a forced library version is not among the known targets."""

    def __init__(self, message: str, listing: str = ""):
        super().__init__(message)
        self.listing = listing


@dataclass(frozen=True)
class KnownTarget:
    """One configuration the crate was validated against."""

    version: Version
    condition: Condition = ALWAYS_TRUE
    parameters: BuildParameters = BuildParameters()

    def applies_to(self, facts: HostFacts) -> bool:
        return evaluate(self.condition, facts)

    def short_text(self) -> str:
        return f"{self.version} on {summarize(self.condition)}"


@dataclass(frozen=True)
class BuildLayer:
    """Build parameters applied to every known version where the condition holds."""

    condition: Condition
    parameters: BuildParameters

    def applies_to(self, facts: HostFacts) -> bool:
        return evaluate(self.condition, facts)


class KnownTargetRegistry:
    """
    Immutable table of known targets and common build layers.

    Usage:
        registry = KnownTargetRegistry.from_json_file(Path("known_targets.json"))
        eligible = registry.for_host(PlatformDetector.detect())
        versions = registry.versions(eligible)
    """

    def __init__(
        self,
        targets: Iterable[KnownTarget],
        layers: Iterable[BuildLayer] = (),
        library: Optional[str] = None,
    ):
        """
        Initialize the registry.

        Args:
            targets: Known targets, in generator order
            layers: Common build layers, in application order
            library: Name of the native library (for diagnostics)
        """
        self._targets: Tuple[KnownTarget, ...] = tuple(targets)
        self._layers: Tuple[BuildLayer, ...] = tuple(layers)
        self.library = library

    @property
    def targets(self) -> Tuple[KnownTarget, ...]:
        return self._targets

    @property
    def layers(self) -> Tuple[BuildLayer, ...]:
        return self._layers

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self):
        return iter(self._targets)

    def ensure_not_empty(self) -> None:
        """
        Raises:
            EmptyRegistry: If the registry holds no known targets
        """
        if not self._targets:
            name = f" for {self.library}" if self.library else ""
            raise EmptyRegistry(f"Known-target registry{name} is empty; the crate was not generated correctly")

    def for_host(self, facts: HostFacts) -> Tuple[KnownTarget, ...]:
        """Return the targets whose condition holds on this host, in registry order."""
        return tuple(target for target in self._targets if target.applies_to(facts))

    def layers_for_host(self, facts: HostFacts) -> Tuple[BuildLayer, ...]:
        return tuple(layer for layer in self._layers if layer.applies_to(facts))

    @staticmethod
    def versions(targets: Iterable[KnownTarget]) -> List[Version]:
        """Return the distinct versions of the given targets, sorted ascending."""
        return sorted({target.version for target in targets})

    def find(self, version: Version, facts: Optional[HostFacts] = None) -> Tuple[KnownTarget, ...]:
        """
        Find the targets declared for a version.

        Args:
            version: Version to look up
            facts: If given, only targets applicable to this host are returned

        Returns:
            Matching targets in registry order (may be empty)
        """
        candidates = self.for_host(facts) if facts is not None else self._targets
        return tuple(target for target in candidates if target.version == version)

    def listing(self) -> str:
        """
        Render the stable, line-oriented target listing used in diagnostics.

        Format:
            This crate supports the following targets:
            * 5.11.0 on os=linux
            * 5.12.2 on any host
        """
        lines = [LISTING_HEADER]
        lines.extend(f"{LISTING_PREFIX}{target.short_text()}" for target in self._targets)
        return "\n".join(lines)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnownTargetRegistry":
        """
        Build a registry from its decoded JSON form.

        Raises:
            RegistryError: If any entry is malformed
        """
        if not isinstance(data, dict):
            raise RegistryError(f"Registry must be a JSON object, got {type(data).__name__}")

        entries = data.get("known_targets", [])
        if not isinstance(entries, list):
            raise RegistryError("'known_targets' must be a list")
        layer_entries = data.get("build_layers", [])
        if not isinstance(layer_entries, list):
            raise RegistryError("'build_layers' must be a list")

        targets = []
        for index, entry in enumerate(entries):
            try:
                if not isinstance(entry, dict) or "version" not in entry:
                    raise RegistryError("entry must be an object with a 'version' key")
                targets.append(
                    KnownTarget(
                        version=Version.parse(entry["version"]),
                        condition=condition_from_data(entry.get("condition")),
                        parameters=BuildParameters.from_dict(entry.get("build")),
                    )
                )
            except (InvalidVersion, ConditionError, BuildParamsError, RegistryError) as e:
                raise RegistryError(f"Invalid known target #{index}: {e}") from e

        layers = []
        for index, entry in enumerate(layer_entries):
            try:
                if not isinstance(entry, dict):
                    raise RegistryError("layer must be an object")
                layers.append(
                    BuildLayer(
                        condition=condition_from_data(entry.get("condition")),
                        parameters=BuildParameters.from_dict(entry.get("build")),
                    )
                )
            except (ConditionError, BuildParamsError, RegistryError) as e:
                raise RegistryError(f"Invalid build layer #{index}: {e}") from e

        return cls(targets, layers, library=data.get("library"))

    @classmethod
    def from_json_file(cls, path: Path) -> "KnownTargetRegistry":
        """
        Load a registry from a known_targets.json resource.

        Raises:
            RegistryError: If the file is missing, not JSON, or malformed
        """
        if not path.exists():
            raise RegistryError(f"Known-target registry not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RegistryError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise RegistryError(f"Failed to read {path}: {e}") from e

        return cls.from_dict(data)

    def __repr__(self) -> str:
        return f"KnownTargetRegistry(library={self.library!r}, targets={len(self._targets)}, layers={len(self._layers)})"
