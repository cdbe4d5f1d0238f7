# SPDX-License-Identifier: MIT
"""Build options consumed from the command line or a build script.

Options use the same spelling as the Apple rule flags they mirror:

    --apple_platform_type=ios
    --xcode_version=5.8
    --ios_minimum_os=12.345 --watchos_minimum_os=11.111
    --ios_sdk_version=9.1
    --ios_multi_cpus=arm64,x86_64 --watchos_cpus=armv7k
    --cpu=ios_x86_64

Values are treated as already validated strings; semantic checks happen
in the resolvers.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from unibuild.core.errors import ConfigurationError
from unibuild.toolchains.platforms import PlatformType
from unibuild.toolchains.xcode import VersionOverrides

logger = logging.getLogger(__name__)

# Flag used for each family's multi-architecture cpu list.
CPU_FLAGS: dict[PlatformType, str] = {
    PlatformType.IOS: "ios_multi_cpus",
    PlatformType.WATCHOS: "watchos_cpus",
    PlatformType.TVOS: "tvos_cpus",
    PlatformType.MACOS: "macos_cpus",
    PlatformType.VISIONOS: "visionos_cpus",
}

# Architectures built when no cpus are given for a family.
DEFAULT_CPUS: dict[PlatformType, tuple[str, ...]] = {
    PlatformType.IOS: ("x86_64",),
    PlatformType.WATCHOS: ("i386",),
    PlatformType.TVOS: ("x86_64",),
    PlatformType.MACOS: ("x86_64",),
    PlatformType.VISIONOS: ("sim_arm64",),
}


def _split_cpus(value: str | None) -> list[str]:
    if not value:
        return []
    return [cpu.strip() for cpu in value.split(",") if cpu.strip()]


@dataclass
class BuildOptions:
    """Resolved command-line style options for one build.

    Attributes:
        platform_type: Family for single-architecture builds.
        xcode_version: Explicit Xcode version, or None for the default.
        minimum_os: Explicit minimum OS version per family.
        sdk_version: Explicit SDK version per family.
        cpus: Multi-architecture cpu list per family.
        cpu: Single-architecture cpu (e.g. "ios_x86_64"), or None.
    """

    platform_type: PlatformType = PlatformType.IOS
    xcode_version: str | None = None
    minimum_os: dict[PlatformType, str] = field(default_factory=dict)
    sdk_version: dict[PlatformType, str] = field(default_factory=dict)
    cpus: dict[PlatformType, list[str]] = field(default_factory=dict)
    cpu: str | None = None

    def overrides(self) -> VersionOverrides:
        """Explicit version values as a hashable VersionOverrides."""
        return VersionOverrides.create(
            xcode_version=self.xcode_version,
            minimum_os=self.minimum_os,
            sdk_versions=self.sdk_version,
        )

    def cpus_for(self, platform_type: PlatformType) -> list[str]:
        """Architectures to build for a family.

        Uses the family's cpu list if one was given, otherwise the
        single --cpu value when it names this family, otherwise the
        family default.
        """
        cpus = self.cpus.get(platform_type)
        if cpus:
            return list(cpus)
        if self.cpu and self.cpu.startswith(f"{platform_type.value}_"):
            return [self.cpu]
        return list(DEFAULT_CPUS[platform_type])

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Register all option flags on a parser."""
        parser.add_argument(
            "--apple_platform_type",
            "--apple-platform-type",
            dest="apple_platform_type",
            default=None,
            help="Platform family for single-architecture builds (default: ios)",
        )
        parser.add_argument(
            "--xcode_version",
            "--xcode-version",
            dest="xcode_version",
            default=None,
            help="Xcode version to build with",
        )
        parser.add_argument(
            "--cpu",
            default=None,
            help="Single target cpu, e.g. ios_x86_64",
        )
        for platform_type in PlatformType:
            name = platform_type.value
            parser.add_argument(
                f"--{name}_minimum_os",
                dest=f"{name}_minimum_os",
                default=None,
                help=f"Minimum {name} version to target",
            )
            parser.add_argument(
                f"--{name}_sdk_version",
                dest=f"{name}_sdk_version",
                default=None,
                help=f"{name} SDK version to build against",
            )
            parser.add_argument(
                f"--{CPU_FLAGS[platform_type]}",
                dest=CPU_FLAGS[platform_type],
                default=None,
                help=f"Comma-separated {name} architectures for multi-arch builds",
            )

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> BuildOptions:
        """Create options from a namespace filled by add_arguments()."""
        options = cls(xcode_version=args.xcode_version, cpu=args.cpu)
        if args.apple_platform_type:
            options.platform_type = PlatformType.parse(args.apple_platform_type)
        elif args.cpu:
            # --cpu=watchos_armv7k implies the platform type.
            family = args.cpu.split("_", 1)[0]
            if family in {p.value for p in PlatformType}:
                options.platform_type = PlatformType(family)

        for platform_type in PlatformType:
            name = platform_type.value
            minimum_os = getattr(args, f"{name}_minimum_os")
            if minimum_os is not None:
                options.minimum_os[platform_type] = minimum_os
            sdk_version = getattr(args, f"{name}_sdk_version")
            if sdk_version is not None:
                options.sdk_version[platform_type] = sdk_version
            cpus = _split_cpus(getattr(args, CPU_FLAGS[platform_type]))
            if cpus:
                options.cpus[platform_type] = cpus

        logger.debug("Build options: %s", options)
        return options

    @classmethod
    def from_args(cls, argv: Sequence[str]) -> BuildOptions:
        """Parse option flags from an argument list.

        Raises:
            ConfigurationError: If an argument is not a recognized flag.
        """
        parser = argparse.ArgumentParser(
            prog="unibuild", add_help=False, allow_abbrev=False
        )
        cls.add_arguments(parser)
        args, unknown = parser.parse_known_args(list(argv))
        if unknown:
            raise ConfigurationError(
                f"unrecognized options: {' '.join(unknown)}", field="options"
            )
        return cls.from_namespace(args)
