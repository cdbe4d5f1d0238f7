# SPDX-License-Identifier: MIT
"""Xcode and SDK version resolution.

An XcodeConfig is the read-only table of known Xcode versions and the
default SDK version each one ships for every platform family. It is
normally produced by toolchain discovery; unibuild only reads it.

Resolution is override-first, default-second. Version strings are
atomic: an explicit value is used verbatim and never merged with a
default.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from unibuild.core.errors import ConfigurationError
from unibuild.toolchains.platforms import PlatformType

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

logger = logging.getLogger(__name__)


def _check_version(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(
            f"version must be a non-empty string, got {value!r}", field=field_name
        )
    return value


def _per_platform(
    values: Mapping[PlatformType | str, str] | None, suffix: str
) -> tuple[tuple[PlatformType, str], ...]:
    if not values:
        return ()
    result: dict[PlatformType, str] = {}
    for key, value in values.items():
        platform_type = PlatformType.parse(key)
        result[platform_type] = _check_version(value, f"{platform_type.value}_{suffix}")
    return tuple(sorted(result.items(), key=lambda item: item[0].value))


@dataclass(frozen=True)
class VersionOverrides:
    """Explicit version values that take precedence over defaults.

    Per-family values are stored as sorted tuples so the object stays
    hashable; use create() to build one from plain dicts.

    Attributes:
        xcode_version: Explicit Xcode version, or None.
        minimum_os: (platform type, version) pairs for minimum OS overrides.
        sdk_versions: (platform type, version) pairs for SDK overrides.
    """

    xcode_version: str | None = None
    minimum_os: tuple[tuple[PlatformType, str], ...] = ()
    sdk_versions: tuple[tuple[PlatformType, str], ...] = ()

    def __post_init__(self) -> None:
        if self.xcode_version is not None:
            _check_version(self.xcode_version, "xcode_version")
        # Keys may be given as strings; store parsed, sorted pairs.
        object.__setattr__(
            self, "minimum_os", _per_platform(dict(self.minimum_os), "minimum_os")
        )
        object.__setattr__(
            self, "sdk_versions", _per_platform(dict(self.sdk_versions), "sdk_version")
        )

    @classmethod
    def create(
        cls,
        *,
        xcode_version: str | None = None,
        minimum_os: Mapping[PlatformType | str, str] | None = None,
        sdk_versions: Mapping[PlatformType | str, str] | None = None,
    ) -> VersionOverrides:
        return cls(
            xcode_version=xcode_version,
            minimum_os=_per_platform(minimum_os, "minimum_os"),
            sdk_versions=_per_platform(sdk_versions, "sdk_version"),
        )

    def minimum_os_for(self, platform_type: PlatformType) -> str | None:
        return dict(self.minimum_os).get(platform_type)

    def sdk_version_for(self, platform_type: PlatformType) -> str | None:
        return dict(self.sdk_versions).get(platform_type)


@dataclass(frozen=True)
class XcodeVersionProperties:
    """One installed (or mocked) Xcode and the SDKs it ships.

    Attributes:
        version: Canonical version string (e.g. "7.3.1").
        aliases: Other spellings that select this version (e.g. "7.3").
        default_sdk_versions: Default SDK version per platform family.
    """

    version: str
    aliases: tuple[str, ...] = ()
    default_sdk_versions: Mapping[PlatformType, str] = field(default_factory=dict)

    def matches(self, version: str) -> bool:
        return version == self.version or version in self.aliases

    def default_sdk_version(self, platform_type: PlatformType) -> str | None:
        return self.default_sdk_versions.get(platform_type)


@dataclass(frozen=True)
class XcodeConfig:
    """Read-only table of known Xcode versions.

    Example TOML accepted by from_toml():

        default = "7.3.1"

        [versions."7.3.1"]
        aliases = ["7.3"]
        default_sdk_versions = { ios = "8.4", watchos = "2.0" }

    Attributes:
        default_version: Xcode used when none is requested, or None.
        versions: Registered Xcode versions.
    """

    default_version: str | None
    versions: tuple[XcodeVersionProperties, ...] = ()

    def lookup(self, version: str) -> XcodeVersionProperties | None:
        """Find a registered Xcode by version or alias."""
        for properties in self.versions:
            if properties.matches(version):
                return properties
        return None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> XcodeConfig:
        """Build a config from parsed TOML/JSON data.

        Raises:
            ConfigurationError: On malformed entries or an unregistered default.
        """
        versions: list[XcodeVersionProperties] = []
        raw_versions = data.get("versions", {})
        if not isinstance(raw_versions, Mapping):
            raise ConfigurationError("must be a table of versions", field="versions")
        for version, entry in raw_versions.items():
            _check_version(version, "versions")
            entry = entry or {}
            aliases = entry.get("aliases", [])
            if isinstance(aliases, str):
                aliases = [aliases]
            sdks = {
                PlatformType.parse(key): _check_version(
                    value, f"versions.{version}.default_sdk_versions.{key}"
                )
                for key, value in entry.get("default_sdk_versions", {}).items()
            }
            versions.append(
                XcodeVersionProperties(
                    version=version,
                    aliases=tuple(_check_version(a, "aliases") for a in aliases),
                    default_sdk_versions=sdks,
                )
            )

        config = cls(default_version=data.get("default"), versions=tuple(versions))
        if config.default_version is not None:
            _check_version(config.default_version, "default")
            if config.lookup(config.default_version) is None:
                raise ConfigurationError(
                    f"default Xcode {config.default_version!r} is not a registered version",
                    field="default",
                )
        return config

    @classmethod
    def from_toml(cls, path: Path | str) -> XcodeConfig:
        """Load a config from a TOML file."""
        path = Path(path)
        logger.debug("Loading Xcode version table from %s", path)
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"{path}: {e}", field="xcode_config") from e
        return cls.from_mapping(data)


def _sdk_table(**versions: str) -> dict[PlatformType, str]:
    return {PlatformType(name): version for name, version in versions.items()}


_DEFAULT_SDKS = _sdk_table(
    ios="8.4", watchos="2.0", tvos="9.0", macos="10.11", visionos="1.0"
)

DEFAULT_XCODE_VERSION = "7.3.1"

DEFAULT_XCODE_CONFIG = XcodeConfig(
    default_version=DEFAULT_XCODE_VERSION,
    versions=(
        XcodeVersionProperties(
            version=DEFAULT_XCODE_VERSION,
            aliases=("7.3",),
            default_sdk_versions=_DEFAULT_SDKS,
        ),
        XcodeVersionProperties(version="5.8", default_sdk_versions=_DEFAULT_SDKS),
    ),
)


@dataclass(frozen=True)
class ToolchainVersion:
    """Resolved Xcode and SDK versions for one platform family."""

    xcode_version: str
    sdk_version: str


def resolve_toolchain_version(
    explicit_xcode_version: str | None,
    explicit_sdk_version: str | None,
    platform_type: PlatformType,
    xcode_config: XcodeConfig = DEFAULT_XCODE_CONFIG,
) -> ToolchainVersion:
    """Resolve the Xcode and SDK versions for a platform family.

    Args:
        explicit_xcode_version: Requested Xcode version, or None for the default.
        explicit_sdk_version: Requested SDK version, or None for the
            resolved Xcode's default SDK for platform_type.
        platform_type: Family being built for.
        xcode_config: Table of known Xcode versions.

    Returns:
        The resolved ToolchainVersion.

    Raises:
        ConfigurationError: If a version has neither an explicit value nor
            a usable default.
    """
    if explicit_xcode_version is not None:
        xcode_version = _check_version(explicit_xcode_version, "xcode_version")
    elif xcode_config.default_version is not None:
        xcode_version = xcode_config.default_version
    else:
        raise ConfigurationError(
            "no Xcode version requested and no default is configured",
            field="xcode_version",
        )

    if explicit_sdk_version is not None:
        sdk_version = _check_version(
            explicit_sdk_version, f"{platform_type.value}_sdk_version"
        )
    else:
        properties = xcode_config.lookup(xcode_version)
        if properties is None:
            raise ConfigurationError(
                f"Xcode {xcode_version!r} is not a registered version",
                field="xcode_version",
            )
        default_sdk = properties.default_sdk_version(platform_type)
        if default_sdk is None:
            raise ConfigurationError(
                f"Xcode {xcode_version} has no default SDK for {platform_type}",
                field=f"{platform_type.value}_sdk_version",
            )
        sdk_version = default_sdk

    logger.debug(
        "Resolved toolchain for %s: xcode=%s sdk=%s",
        platform_type,
        xcode_version,
        sdk_version,
    )
    return ToolchainVersion(xcode_version=xcode_version, sdk_version=sdk_version)

