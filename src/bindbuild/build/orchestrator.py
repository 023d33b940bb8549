"""
Build orchestration for generated binding crates.

This module sequences target selection for one build:
1. Check the known-target registry
2. Parse the installed library version
3. Filter known targets by host applicability
4. Pick the closest known version (or the forced one)
5. Merge build parameters with the installation paths

It is the only place that reports decisions to the build log.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config.installation import InstallationData
from ..config.registry import KnownTarget, KnownTargetRegistry, UnknownOverrideVersion
from ..config.settings import BuildSettings
from ..errors import BindBuildError
from ..platform_utils import HostFacts, PlatformDetector
from ..version import Version
from .merger import BuildConfigMerger, ResolvedConfig
from .resolver import Resolution, ResolutionReason, UnsupportedVersion, resolve_version


@dataclass
class BuildResult:
    """Result of selecting a build configuration."""

    success: bool
    config: Optional[ResolvedConfig]
    message: str
    exit_code: int = 0
    listing: str = ""
    warnings: List[str] = field(default_factory=list)


class BuildOrchestrator:
    """
    Selects and merges the build configuration for the installed library.

    Example usage:
        registry = KnownTargetRegistry.from_json_file(Path("known_targets.json"))
        installation = InstallationData.from_json_file(Path("installation.json"))
        orchestrator = BuildOrchestrator(registry, BuildSettings.load(Path(".")))
        result = orchestrator.run(installation)
        if result.success:
            for line in result.config.cargo_directives():
                print(line)
    """

    def __init__(
        self,
        registry: KnownTargetRegistry,
        settings: Optional[BuildSettings] = None,
        host_facts: Optional[HostFacts] = None,
    ):
        """
        Initialize build orchestrator.

        Args:
            registry: Known-target registry shipped with the crate
            settings: Invoking crate settings (default: BuildSettings())
            host_facts: Host facts (default: detected from the environment)
        """
        self.registry = registry
        self.settings = settings or BuildSettings()
        self.host_facts = host_facts or PlatformDetector.from_environ()

    def select(self, installation: InstallationData) -> Tuple[Resolution, Tuple[KnownTarget, ...]]:
        """
        Choose the version to build against and its applicable targets.

        Returns:
            (resolution, targets declared for the chosen version on this host)

        Raises:
            EmptyRegistry: If the registry is empty
            InvalidVersion: If the installed or forced version is malformed
            UnknownOverrideVersion: If the forced version is not known for this host
            UnsupportedVersion: If no known version is a safe choice
        """
        self.registry.ensure_not_empty()
        current = installation.parsed_version()
        eligible = self.registry.for_host(self.host_facts)

        logging.debug(f"Host: {self.host_facts.short_text()}")
        logging.debug(f"Known targets for this host: {len(eligible)} of {len(self.registry)}")

        if self.settings.library_version is not None:
            forced = Version.parse(self.settings.library_version)
            targets = tuple(t for t in eligible if t.version == forced)
            if not targets:
                where = "for this host" if self.registry.find(forced) else "in the registry"
                raise UnknownOverrideVersion(
                    f"Forced library version {forced} is not known {where}",
                    listing=self.registry.listing(),
                )
            return Resolution(current, forced, ResolutionReason.OVERRIDE), targets

        if not eligible:
            raise UnsupportedVersion(
                f"No known target applies to this host ({self.host_facts.short_text()})",
                version=current,
                listing=self.registry.listing(),
            )

        resolution = resolve_version(KnownTargetRegistry.versions(eligible), current)
        if resolution.version is None:
            raise UnsupportedVersion(
                f"Unsupported library version: {current}",
                version=current,
                listing=self.registry.listing(),
            )

        targets = tuple(t for t in eligible if t.version == resolution.version)
        return resolution, targets

    def resolve(self, installation: InstallationData) -> ResolvedConfig:
        """
        Select and merge the build configuration.

        Raises:
            BindBuildError: Any of the selection or merge errors
        """
        resolution, targets = self.select(installation)

        if resolution.is_exact:
            logging.info(resolution.describe())
        else:
            logging.warning(resolution.describe())

        merger = BuildConfigMerger(installation, library_type=self.settings.library_type)
        return merger.merge(
            targets,
            self.registry.layers_for_host(self.host_facts),
            resolution.version,
            resolution.reason,
        )

    def _continue_unsupported(self, installation: InstallationData, error: UnsupportedVersion) -> BuildResult:
        warning = f"{error} (continuing without a known target)"
        logging.warning(warning)
        if error.listing:
            logging.warning(error.listing)

        merger = BuildConfigMerger(installation, library_type=self.settings.library_type)
        config = merger.merge(
            (),
            self.registry.layers_for_host(self.host_facts),
            None,
            ResolutionReason.UNSUPPORTED,
        )
        return BuildResult(
            success=True,
            config=config,
            message="Continuing without a known target",
            listing=error.listing,
            warnings=[warning],
        )

    def run(self, installation: InstallationData) -> BuildResult:
        """
        Select the build configuration and report the outcome.

        Never raises for bindbuild errors; failures come back as an
        unsuccessful BuildResult with exit_code 1.

        Args:
            installation: Probe record for the installed library

        Returns:
            BuildResult
        """
        try:
            config = self.resolve(installation)
        except UnsupportedVersion as e:
            if self.settings.allow_unsupported:
                try:
                    return self._continue_unsupported(installation, e)
                except BindBuildError as merge_error:
                    logging.error(str(merge_error))
                    return BuildResult(False, None, str(merge_error), exit_code=1)
            logging.error(str(e))
            return BuildResult(False, None, str(e), exit_code=1, listing=e.listing)
        except UnknownOverrideVersion as e:
            logging.error(str(e))
            return BuildResult(False, None, str(e), exit_code=1, listing=e.listing)
        except BindBuildError as e:
            logging.error(f"{type(e).__name__}: {e}")
            return BuildResult(False, None, str(e), exit_code=1)

        warnings = []
        if config.reason not in (ResolutionReason.EXACT, ResolutionReason.OVERRIDE):
            warnings.append(
                f"Installed version {installation.version} is unknown to this crate. "
                f"Using closest known version {config.version}"
            )

        return BuildResult(
            success=True,
            config=config,
            message=f"Selected version {config.version} ({config.reason.value})",
            warnings=warnings,
        )
