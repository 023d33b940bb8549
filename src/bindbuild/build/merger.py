"""Build Configuration Merger.

This module turns the selected known target into the concrete configuration
handed to the native build step.

Design:
    - Starts from the selected target's parameters
    - Layers every common build layer that applies to the host, in order
    - Substitutes "{slot}" placeholders with the probe's path bindings
    - Appends directories from BINDBUILD_*_PATH environment variables
    - Applies the invoking crate's linkage override
"""

import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..config.build_params import BuildParameters, LibraryType
from ..config.installation import InstallationData
from ..config.registry import BuildLayer, KnownTarget
from ..errors import BindBuildError
from ..version import Version
from .resolver import ResolutionReason

PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

DEFAULT_LIBRARY_TYPE = LibraryType.SHARED

# Environment variables holding extra os.pathsep separated directories
ENV_PATH_VARIABLES = {
    "include_dirs": "BINDBUILD_INCLUDE_PATH",
    "library_dirs": "BINDBUILD_LIBRARY_PATH",
    "framework_dirs": "BINDBUILD_FRAMEWORK_PATH",
}


class MissingPathBinding(BindBuildError):
    """Raised when a path template names a slot the probe did not report."""

    def __init__(self, slot: str, template: str, available: Iterable[str] = ()):
        available = sorted(available)
        super().__init__(
            f"Path template '{template}' references '{slot}', which the installation "
            + f"probe did not report. Available bindings: {', '.join(available) or 'none'}"
        )
        self.slot = slot
        self.template = template


@dataclass(frozen=True)
class ResolvedConfig:
    """Final build configuration consumed by the native build step."""

    version: Optional[Version]
    reason: ResolutionReason
    library_type: LibraryType
    include_dirs: Tuple[str, ...] = ()
    library_dirs: Tuple[str, ...] = ()
    framework_dirs: Tuple[str, ...] = ()
    libraries: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    compiler_flags: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": str(self.version) if self.version else None,
            "reason": self.reason.value,
            "library_type": self.library_type.value,
            "include_dirs": list(self.include_dirs),
            "library_dirs": list(self.library_dirs),
            "framework_dirs": list(self.framework_dirs),
            "libraries": list(self.libraries),
            "frameworks": list(self.frameworks),
            "compiler_flags": list(self.compiler_flags),
        }

    def cargo_directives(self) -> List[str]:
        """
        Render the configuration as cargo build-script directives.

        Example:
            cargo:rustc-link-search=native=/usr/lib/x86_64-linux-gnu
            cargo:rustc-link-lib=dylib=Qt5Core
        """
        lines = [f"cargo:rustc-link-search=native={d}" for d in self.library_dirs]
        lines.extend(f"cargo:rustc-link-search=framework={d}" for d in self.framework_dirs)
        kind = self.library_type.cargo_kind
        lines.extend(f"cargo:rustc-link-lib={kind}={name}" for name in self.libraries)
        lines.extend(f"cargo:rustc-link-lib=framework={name}" for name in self.frameworks)
        lines.extend(f"cargo:include={d}" for d in self.include_dirs)
        return lines


class BuildConfigMerger:
    """Merges known-target parameters with installation paths.

    Example usage:
        merger = BuildConfigMerger(installation, library_type=LibraryType.STATIC)
        config = merger.merge(targets, layers, version, ResolutionReason.EXACT)
    """

    def __init__(
        self,
        installation: InstallationData,
        library_type: Optional[LibraryType] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the merger.

        Args:
            installation: Probe record providing the path bindings
            library_type: Linkage override from the invoking crate
            environ: Environment for BINDBUILD_*_PATH lookups (default: os.environ)
        """
        self.installation = installation
        self.library_type = library_type
        self.environ = os.environ if environ is None else environ

    def substitute(self, template: str) -> str:
        """Replace every {slot} placeholder in a path template.

        Raises:
            MissingPathBinding: If a slot has no binding
        """
        paths = self.installation.paths

        def replace(match: "re.Match[str]") -> str:
            slot = match.group(1)
            if slot not in paths:
                raise MissingPathBinding(slot, template, paths.keys())
            return paths[slot]

        return PLACEHOLDER.sub(replace, template)

    def _env_paths(self, field_name: str) -> List[str]:
        value = self.environ.get(ENV_PATH_VARIABLES[field_name], "")
        return [item for item in value.split(os.pathsep) if item]

    def _concrete_dirs(self, templates: Iterable[str], field_name: str) -> Tuple[str, ...]:
        dirs: List[str] = []
        for template in templates:
            path = self.substitute(template)
            if path not in dirs:
                dirs.append(path)
        for path in self._env_paths(field_name):
            if path not in dirs:
                dirs.append(path)
        return tuple(dirs)

    def merge(
        self,
        targets: Iterable[KnownTarget],
        layers: Iterable[BuildLayer],
        version: Optional[Version],
        reason: ResolutionReason,
    ) -> ResolvedConfig:
        """Merge targets and layers into a resolved configuration.

        Args:
            targets: Host-applicable targets declared for the chosen version
                (empty when an unsupported version was allowed to continue)
            layers: Host-applicable common build layers
            version: Chosen version (None if unsupported)
            reason: Why the version was chosen

        Returns:
            ResolvedConfig with concrete paths

        Raises:
            MissingPathBinding: If a template names an unknown slot
            ConflictingLinkage: If merged records disagree on linkage
        """
        params = BuildParameters()
        for target in targets:
            params = params.merged_with(target.parameters)
        for layer in layers:
            params = params.merged_with(layer.parameters)

        library_type = self.library_type or params.library_type or DEFAULT_LIBRARY_TYPE

        return ResolvedConfig(
            version=version,
            reason=reason,
            library_type=library_type,
            include_dirs=self._concrete_dirs(params.include_dirs, "include_dirs"),
            library_dirs=self._concrete_dirs(params.library_dirs, "library_dirs"),
            framework_dirs=self._concrete_dirs(params.framework_dirs, "framework_dirs"),
            libraries=params.libraries,
            frameworks=params.frameworks,
            compiler_flags=tuple(self.substitute(flag) for flag in params.compiler_flags),
        )
