# SPDX-License-Identifier: MIT
"""Build variables for one Apple compile/link invocation.

A BuildVariableSet is the flat name -> value mapping handed to command
templates. The core only knows about get_variables(); the variable names
themselves are the well-known names the Apple toolchain templates use:

    xcode_version_override_value      Xcode version, e.g. "7.3.1"
    apple_sdk_version_override_value  SDK version, e.g. "8.4"
    apple_sdk_platform_value          SDK platform, e.g. "iPhoneSimulator"
    version_min                       Minimum OS version, e.g. "12.345"

Additional formatting-only variables (triple, SDK paths) are added after
those four and never replace them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from unibuild.core.errors import VariableNotFoundError
from unibuild.toolchains.platforms import PlatformType

if TYPE_CHECKING:
    from unibuild.configure.options import BuildOptions
    from unibuild.toolchains.platforms import Architecture, PlatformSpec
    from unibuild.toolchains.xcode import ToolchainVersion, XcodeConfig

XCODE_VERSION = "xcode_version_override_value"
SDK_VERSION = "apple_sdk_version_override_value"
SDK_PLATFORM = "apple_sdk_platform_value"
VERSION_MIN = "version_min"

REQUIRED_VARIABLES = (XCODE_VERSION, SDK_VERSION, SDK_PLATFORM, VERSION_MIN)

# Placeholders rewritten by the executor's xcrun wrapper at run time.
SDKROOT_PLACEHOLDER = "__XCODE_SDKROOT__"
DEVELOPER_DIR_PLACEHOLDER = "__XCODE_DEVELOPER_DIR__"

SYSTEM_FRAMEWORK_PATH = "/System/Library/Frameworks"
DEVELOPER_FRAMEWORK_PATH = "/Developer/Library/Frameworks"


class BuildVariableSet:
    """Immutable, ordered build variables for one (platform, architecture) pair.

    Lookups of names that are not defined raise VariableNotFoundError;
    an empty-string value is a defined value.

    Attributes:
        platform_type: Family the variables were resolved for.
        architecture: Architecture the variables were resolved for.
    """

    __slots__ = ("platform_type", "architecture", "_variables")

    def __init__(
        self,
        platform_type: PlatformType,
        architecture: Architecture,
        variables: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> None:
        self.platform_type = platform_type
        self.architecture = architecture
        self._variables = MappingProxyType(dict(variables))

    def get_variables(self) -> dict[str, str]:
        """Return a copy of the variables as a plain dict (in order)."""
        return dict(self._variables)

    def value_for(self, name: str) -> str:
        """Return the value of a variable.

        Raises:
            VariableNotFoundError: If no variable with that name exists.
        """
        try:
            return self._variables[name]
        except KeyError:
            raise VariableNotFoundError(name) from None

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._variables.get(name, default)

    def names(self) -> list[str]:
        return list(self._variables)

    def items(self) -> Iterable[tuple[str, str]]:
        return self._variables.items()

    def __getitem__(self, name: str) -> str:
        return self.value_for(name)

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuildVariableSet):
            return NotImplemented
        return (
            self.platform_type == other.platform_type
            and self.architecture == other.architecture
            and tuple(self._variables.items()) == tuple(other._variables.items())
        )

    def __hash__(self) -> int:
        return hash(
            (self.platform_type, self.architecture, tuple(self._variables.items()))
        )

    def __repr__(self) -> str:
        return (
            f"BuildVariableSet({self.architecture.name}, "
            f"{dict(self._variables)!r})"
        )


def _version_key(version: str) -> tuple[int, ...]:
    parts = []
    for part in version.split("."):
        match = re.match(r"\d+", part)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts)


def sdk_framework_dir(platform_type: PlatformType, sdk_version: str) -> str:
    """Framework directory inside the SDK.

    iOS SDKs before 9.0 kept frameworks under /Developer; everything else
    uses /System/Library/Frameworks.
    """
    if platform_type is PlatformType.IOS and _version_key(sdk_version) < (9, 0):
        return f"{SDKROOT_PLACEHOLDER}{DEVELOPER_FRAMEWORK_PATH}"
    return f"{SDKROOT_PLACEHOLDER}{SYSTEM_FRAMEWORK_PATH}"


def assemble(
    platform_spec: PlatformSpec,
    toolchain_version: ToolchainVersion,
    architecture: Architecture,
) -> BuildVariableSet:
    """Combine resolved platform and toolchain values into build variables.

    Args:
        platform_spec: Output of resolve_platform_spec().
        toolchain_version: Output of resolve_toolchain_version().
        architecture: Architecture the variables are for.

    Returns:
        A BuildVariableSet containing at least REQUIRED_VARIABLES.
    """
    platform_type = architecture.platform_type
    triple = (
        f"{architecture.arch}-apple-{platform_type.triple_os}"
        f"{platform_spec.minimum_os_version}"
    )
    if architecture.is_simulator:
        triple += "-simulator"

    variables = {
        XCODE_VERSION: toolchain_version.xcode_version,
        SDK_VERSION: toolchain_version.sdk_version,
        SDK_PLATFORM: platform_spec.sdk_platform_name,
        VERSION_MIN: platform_spec.minimum_os_version,
        "apple_platform_type": platform_type.value,
        "cpu": architecture.name,
        "arch": architecture.arch,
        "target_triple": triple,
        "sdk_dir": SDKROOT_PLACEHOLDER,
        "sdk_framework_dir": sdk_framework_dir(
            platform_type, toolchain_version.sdk_version
        ),
        "platform_developer_framework_dir": (
            f"{DEVELOPER_DIR_PLACEHOLDER}/Platforms/"
            f"{platform_spec.sdk_platform_name}.platform/Developer/Library/Frameworks"
        ),
    }
    return BuildVariableSet(platform_type, architecture, variables)


def resolve_build_variables(
    options: BuildOptions,
    architecture: Architecture,
    xcode_config: XcodeConfig | None = None,
) -> BuildVariableSet:
    """Run both resolvers and assemble the variables for one architecture.

    Args:
        options: Parsed build options.
        architecture: Architecture to resolve for.
        xcode_config: Xcode version table (defaults to the built-in one).

    Raises:
        ConfigurationError: If resolution fails.
    """
    from unibuild.toolchains.platforms import resolve_platform_spec
    from unibuild.toolchains.xcode import (
        DEFAULT_XCODE_CONFIG,
        resolve_toolchain_version,
    )

    platform_type = architecture.platform_type
    overrides = options.overrides()
    spec = resolve_platform_spec(platform_type, architecture, overrides)
    toolchain = resolve_toolchain_version(
        overrides.xcode_version,
        overrides.sdk_version_for(platform_type),
        platform_type,
        xcode_config or DEFAULT_XCODE_CONFIG,
    )
    return assemble(spec, toolchain, architecture)
