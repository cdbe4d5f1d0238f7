# SPDX-License-Identifier: MIT
"""Apple platform families, CPU architectures and SDK platform resolution.

A PlatformType is one of a closed set of OS families. Every family knows
which CPUs it supports, which of those run in the simulator, and what the
device and simulator SDK platforms are called inside Xcode:

    ios       iPhoneOS / iPhoneSimulator
    watchos   WatchOS / WatchSimulator
    tvos      AppleTVOS / AppleTVSimulator
    macos     MacOSX (no simulator)
    visionos  XROS / XRSimulator
"""

from __future__ import annotations

import enum
import functools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from unibuild.core.errors import ConfigurationError

if TYPE_CHECKING:
    from unibuild.toolchains.xcode import VersionOverrides

logger = logging.getLogger(__name__)


class Environment(enum.Enum):
    DEVICE = "device"
    SIMULATOR = "simulator"


@dataclass(frozen=True)
class _FamilyInfo:
    device_platform: str
    simulator_platform: str | None
    device_cpus: tuple[str, ...]
    simulator_cpus: tuple[str, ...]
    triple_os: str
    default_minimum_os: str


_FAMILIES: dict[str, _FamilyInfo] = {
    "ios": _FamilyInfo(
        device_platform="iPhoneOS",
        simulator_platform="iPhoneSimulator",
        device_cpus=("arm64", "arm64e", "armv7", "armv7s"),
        simulator_cpus=("i386", "x86_64", "sim_arm64"),
        triple_os="ios",
        default_minimum_os="8.4",
    ),
    "watchos": _FamilyInfo(
        device_platform="WatchOS",
        simulator_platform="WatchSimulator",
        device_cpus=("armv7k", "arm64_32", "arm64e"),
        simulator_cpus=("i386", "x86_64", "arm64"),
        triple_os="watchos",
        default_minimum_os="2.0",
    ),
    "tvos": _FamilyInfo(
        device_platform="AppleTVOS",
        simulator_platform="AppleTVSimulator",
        device_cpus=("arm64",),
        simulator_cpus=("x86_64", "sim_arm64"),
        triple_os="tvos",
        default_minimum_os="9.0",
    ),
    "macos": _FamilyInfo(
        device_platform="MacOSX",
        simulator_platform=None,
        device_cpus=("x86_64", "arm64", "arm64e"),
        simulator_cpus=(),
        triple_os="macosx",
        default_minimum_os="10.11",
    ),
    "visionos": _FamilyInfo(
        device_platform="XROS",
        simulator_platform="XRSimulator",
        device_cpus=("arm64",),
        simulator_cpus=("sim_arm64",),
        triple_os="xros",
        default_minimum_os="1.0",
    ),
}


class PlatformType(enum.Enum):
    """Closed set of Apple OS families a binary can target."""

    IOS = "ios"
    WATCHOS = "watchos"
    TVOS = "tvos"
    MACOS = "macos"
    VISIONOS = "visionos"

    @classmethod
    def parse(cls, value: str | PlatformType) -> PlatformType:
        """Look up a platform type by its lowercase name.

        Raises:
            ConfigurationError: If the name is not a known family.
        """
        if isinstance(value, PlatformType):
            return value
        try:
            return cls(value.lower())
        except ValueError:
            known = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"unsupported platform type {value!r} (expected one of: {known})",
                field="apple_platform_type",
            ) from None

    @property
    def _info(self) -> _FamilyInfo:
        return _FAMILIES[self.value]

    @property
    def device_platform(self) -> str:
        return self._info.device_platform

    @property
    def simulator_platform(self) -> str | None:
        return self._info.simulator_platform

    @property
    def default_minimum_os(self) -> str:
        return self._info.default_minimum_os

    @property
    def triple_os(self) -> str:
        return self._info.triple_os

    def supported_cpus(self) -> dict[str, Environment]:
        """Return every recognized bare cpu name mapped to its environment."""
        cpus = {cpu: Environment.DEVICE for cpu in self._info.device_cpus}
        cpus.update({cpu: Environment.SIMULATOR for cpu in self._info.simulator_cpus})
        return cpus

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Architecture:
    """A CPU identifier within one platform family.

    Attributes:
        platform_type: Family the cpu belongs to.
        cpu: Bare cpu name (e.g. "arm64", "sim_arm64", "armv7k").
        environment: Whether this cpu runs on a device or in the simulator.
    """

    platform_type: PlatformType
    cpu: str
    environment: Environment

    @classmethod
    def parse(cls, platform_type: PlatformType | str, cpu: str) -> Architecture:
        """Create an Architecture from a bare or platform-prefixed cpu.

        Both "armv7k" and "watchos_armv7k" are accepted for watchos.

        Raises:
            ConfigurationError: If the cpu is not recognized for the family.
        """
        platform_type = PlatformType.parse(platform_type)
        prefix = f"{platform_type.value}_"
        bare = cpu[len(prefix):] if cpu.startswith(prefix) else cpu
        environment = platform_type.supported_cpus().get(bare)
        if environment is None:
            raise ConfigurationError(
                f"cpu {cpu!r} is not supported for platform type {platform_type}",
                field=f"{platform_type.value}_cpus",
            )
        return cls(platform_type, bare, environment)

    @property
    def name(self) -> str:
        """Platform-prefixed name, e.g. "ios_x86_64"."""
        return f"{self.platform_type.value}_{self.cpu}"

    @property
    def is_simulator(self) -> bool:
        return self.environment is Environment.SIMULATOR

    @property
    def arch(self) -> str:
        """The -arch value the compiler expects ("sim_arm64" is just arm64)."""
        if self.cpu.startswith("sim_"):
            return self.cpu[len("sim_"):]
        return self.cpu

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PlatformSpec:
    """Resolved platform information for one architecture."""

    sdk_platform_name: str
    minimum_os_version: str


def sdk_platform_name(platform_type: PlatformType, environment: Environment) -> str:
    """Name of the Xcode SDK platform for a family and environment.

    Raises:
        ConfigurationError: If the family has no platform for the environment
            (macOS has no simulator).
    """
    if environment is Environment.SIMULATOR:
        name = platform_type.simulator_platform
        if name is None:
            raise ConfigurationError(
                f"platform type {platform_type} has no simulator platform",
                field="apple_platform_type",
            )
        return name
    return platform_type.device_platform


@functools.lru_cache(maxsize=256)
def resolve_platform_spec(
    platform_type: PlatformType,
    architecture: Architecture,
    overrides: VersionOverrides,
) -> PlatformSpec:
    """Resolve the SDK platform name and minimum OS for an architecture.

    The SDK platform depends only on the family and on whether the
    architecture is a simulator one. The minimum OS version is the
    family's explicit override if there is one, else the compiled-in
    default for that family.

    Args:
        platform_type: Family being built for.
        architecture: Architecture being built.
        overrides: Explicit version overrides.

    Returns:
        The resolved PlatformSpec.

    Raises:
        ConfigurationError: If the architecture does not belong to the family.
    """
    if (
        architecture.platform_type is not platform_type
        or platform_type.supported_cpus().get(architecture.cpu)
        is not architecture.environment
    ):
        raise ConfigurationError(
            f"architecture {architecture.name} ({architecture.environment.value}) "
            f"cannot be built for platform type {platform_type}",
            field="cpu",
        )

    minimum_os = overrides.minimum_os_for(platform_type)
    if minimum_os is None:
        minimum_os = platform_type.default_minimum_os

    spec = PlatformSpec(
        sdk_platform_name=sdk_platform_name(platform_type, architecture.environment),
        minimum_os_version=minimum_os,
    )
    logger.debug("Resolved %s for %s: %s", architecture, platform_type, spec)
    return spec
