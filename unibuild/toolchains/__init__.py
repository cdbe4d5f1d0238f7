# SPDX-License-Identifier: MIT
"""Apple toolchain resolution.

Provides platform families and architectures (platforms) and Xcode/SDK
version resolution (xcode).
"""

from unibuild.toolchains.platforms import (
    Architecture,
    Environment,
    PlatformSpec,
    PlatformType,
    resolve_platform_spec,
)
from unibuild.toolchains.xcode import (
    DEFAULT_XCODE_CONFIG,
    ToolchainVersion,
    VersionOverrides,
    XcodeConfig,
    XcodeVersionProperties,
    resolve_toolchain_version,
)

__all__ = [
    "Architecture",
    "Environment",
    "PlatformSpec",
    "PlatformType",
    "resolve_platform_spec",
    "DEFAULT_XCODE_CONFIG",
    "ToolchainVersion",
    "VersionOverrides",
    "XcodeConfig",
    "XcodeVersionProperties",
    "resolve_toolchain_version",
]
