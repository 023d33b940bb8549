"""Host Fact Detection Utilities.

This module provides the snapshot of host facts that platform conditions in
the known-target registry are evaluated against.

Facts:
    - arch: x86, x86_64, arm, aarch64, ...
    - os: linux, macos, windows, freebsd, ...
    - family: unix, windows
    - env: gnu, msvc, musl, none
    - pointer_width: 32, 64
    - endian: little, big

When cargo runs a build script it exports CARGO_CFG_TARGET_* variables
describing the compilation target. Those take precedence over the running
interpreter so cross builds pick the right entries.
"""

import os
import platform
import sys
from dataclasses import asdict, dataclass
from typing import Dict, Mapping, Optional

# Value reported for any fact that is not known
UNKNOWN = "unknown"

FACT_NAMES = ("arch", "os", "family", "env", "pointer_width", "endian")

_CARGO_PREFIX = "CARGO_CFG_TARGET_"


@dataclass(frozen=True)
class HostFacts:
    """Read-only snapshot of the facts describing the build host."""

    arch: str = UNKNOWN
    os: str = UNKNOWN
    family: str = UNKNOWN
    env: str = UNKNOWN
    pointer_width: str = UNKNOWN
    endian: str = UNKNOWN

    def get(self, name: str) -> str:
        """Get a fact by name.

        Unknown fact names and unset facts both read as UNKNOWN.
        """
        if name not in FACT_NAMES:
            return UNKNOWN
        value = getattr(self, name)
        return value if value else UNKNOWN

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)

    def short_text(self) -> str:
        return f"{self.arch}-{self.os}-{self.env} ({self.pointer_width}-bit, {self.endian} endian)"


class PlatformDetector:
    """Detects host facts from the running interpreter or cargo's environment."""

    @staticmethod
    def detect_arch() -> str:
        machine = platform.machine().lower()
        if machine in ("x86_64", "amd64"):
            return "x86_64"
        elif machine in ("i386", "i686", "x86"):
            return "x86"
        elif machine in ("aarch64", "arm64"):
            return "aarch64"
        elif machine.startswith("arm"):
            return "arm"
        elif machine:
            return machine
        return UNKNOWN

    @staticmethod
    def detect_os() -> str:
        system = platform.system().lower()
        if system == "darwin":
            return "macos"
        return system or UNKNOWN

    @staticmethod
    def detect_env(os_name: str) -> str:
        """Detect the compiler/toolchain environment.

        Args:
            os_name: Normalized operating system name

        Returns:
            "msvc" or "gnu" on Windows, "gnu" or "musl" on Linux, "none" elsewhere
        """
        if os_name == "windows":
            return "msvc" if "MSC" in sys.version else "gnu"
        if os_name == "linux":
            libc, _ = platform.libc_ver()
            return "gnu" if libc == "glibc" else "musl"
        return "none"

    @staticmethod
    def detect() -> HostFacts:
        """Detect facts for the running interpreter.

        Returns:
            HostFacts snapshot
        """
        os_name = PlatformDetector.detect_os()
        if os_name == "windows":
            family = "windows"
        elif os_name == UNKNOWN:
            family = UNKNOWN
        else:
            family = "unix"

        return HostFacts(
            arch=PlatformDetector.detect_arch(),
            os=os_name,
            family=family,
            env=PlatformDetector.detect_env(os_name),
            pointer_width="64" if sys.maxsize > 2**32 else "32",
            endian=sys.byteorder,
        )

    @staticmethod
    def from_environ(environ: Optional[Mapping[str, str]] = None) -> HostFacts:
        """Build host facts from CARGO_CFG_TARGET_* variables.

        Falls back to detect() when cargo has not exported the target OS.

        Args:
            environ: Environment mapping (default: os.environ)

        Returns:
            HostFacts snapshot
        """
        if environ is None:
            environ = os.environ

        if f"{_CARGO_PREFIX}OS" not in environ:
            return PlatformDetector.detect()

        values = {}
        for name in FACT_NAMES:
            raw = environ.get(f"{_CARGO_PREFIX}{name.upper()}")
            if raw is None:
                values[name] = UNKNOWN
                continue
            # target_family may list several families (e.g. "unix,wasm")
            value = raw.split(",")[0].strip().lower()
            values[name] = value or "none"

        return HostFacts(**values)
