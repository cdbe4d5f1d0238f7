# SPDX-License-Identifier: MIT
"""Tests for unibuild.toolchains.xcode."""

from pathlib import Path

import pytest

from unibuild.core.errors import ConfigurationError
from unibuild.toolchains.platforms import PlatformType
from unibuild.toolchains.xcode import (
    DEFAULT_XCODE_CONFIG,
    DEFAULT_XCODE_VERSION,
    ToolchainVersion,
    VersionOverrides,
    XcodeConfig,
    XcodeVersionProperties,
    resolve_toolchain_version,
)


class TestVersionOverrides:
    def test_empty(self):
        overrides = VersionOverrides()
        assert overrides.xcode_version is None
        assert overrides.minimum_os_for(PlatformType.IOS) is None
        assert overrides.sdk_version_for(PlatformType.IOS) is None

    def test_create_from_dicts(self):
        overrides = VersionOverrides.create(
            xcode_version="5.8",
            minimum_os={"watchos": "11.111", PlatformType.IOS: "12.345"},
            sdk_versions={"ios": "9.1"},
        )
        assert overrides.xcode_version == "5.8"
        assert overrides.minimum_os_for(PlatformType.IOS) == "12.345"
        assert overrides.minimum_os_for(PlatformType.WATCHOS) == "11.111"
        assert overrides.sdk_version_for(PlatformType.IOS) == "9.1"

    def test_hashable_and_order_independent(self):
        a = VersionOverrides.create(minimum_os={"ios": "1.0", "tvos": "2.0"})
        b = VersionOverrides.create(minimum_os={"tvos": "2.0", "ios": "1.0"})
        assert a == b
        assert hash(a) == hash(b)

    def test_empty_string_rejected(self):
        with pytest.raises(ConfigurationError) as exc:
            VersionOverrides.create(minimum_os={"ios": ""})
        assert exc.value.field == "ios_minimum_os"

    def test_empty_xcode_rejected(self):
        with pytest.raises(ConfigurationError, match="xcode_version"):
            VersionOverrides(xcode_version="  ")

    def test_unknown_platform_rejected(self):
        with pytest.raises(ConfigurationError):
            VersionOverrides.create(minimum_os={"android": "10"})

    def test_direct_construction_with_string_keys(self):
        overrides = VersionOverrides(
            minimum_os=(("watchos", "11.111"), ("ios", "9.0")),
            sdk_versions=(("tvos", "9.0"),),
        )
        assert overrides.minimum_os_for(PlatformType.IOS) == "9.0"
        assert overrides.sdk_version_for(PlatformType.TVOS) == "9.0"
        assert overrides == VersionOverrides.create(
            minimum_os={"ios": "9.0", "watchos": "11.111"},
            sdk_versions={"tvos": "9.0"},
        )

    def test_direct_construction_with_unknown_platform(self):
        with pytest.raises(ConfigurationError) as exc:
            VersionOverrides(minimum_os=(("android", "10"),))
        assert exc.value.field == "apple_platform_type"


class TestXcodeConfig:
    def test_lookup_by_version_and_alias(self):
        assert DEFAULT_XCODE_CONFIG.lookup("7.3.1").version == "7.3.1"
        assert DEFAULT_XCODE_CONFIG.lookup("7.3").version == "7.3.1"
        assert DEFAULT_XCODE_CONFIG.lookup("5.8").version == "5.8"
        assert DEFAULT_XCODE_CONFIG.lookup("99.0") is None

    def test_default_version(self):
        assert DEFAULT_XCODE_CONFIG.default_version == DEFAULT_XCODE_VERSION

    def test_from_mapping(self):
        config = XcodeConfig.from_mapping(
            {
                "default": "15.0",
                "versions": {
                    "15.0": {
                        "aliases": ["15"],
                        "default_sdk_versions": {"ios": "17.0", "watchos": "10.0"},
                    },
                    "14.3": {"default_sdk_versions": {"ios": "16.4"}},
                },
            }
        )
        assert config.default_version == "15.0"
        assert config.lookup("15").default_sdk_version(PlatformType.WATCHOS) == "10.0"
        assert config.lookup("14.3").default_sdk_version(PlatformType.WATCHOS) is None

    def test_from_mapping_unregistered_default(self):
        with pytest.raises(ConfigurationError) as exc:
            XcodeConfig.from_mapping({"default": "1.0", "versions": {}})
        assert exc.value.field == "default"

    def test_from_mapping_without_default(self):
        config = XcodeConfig.from_mapping({"versions": {"15.0": {}}})
        assert config.default_version is None
        assert config.lookup("15.0") == XcodeVersionProperties("15.0")

    def test_from_toml(self, tmp_path: Path):
        toml_file = tmp_path / "xcode.toml"
        toml_file.write_text(
            'default = "15.0"\n'
            "\n"
            '[versions."15.0"]\n'
            'aliases = ["15"]\n'
            'default_sdk_versions = { ios = "17.0", tvos = "17.0" }\n'
        )
        config = XcodeConfig.from_toml(toml_file)
        assert config.lookup("15").default_sdk_version(PlatformType.TVOS) == "17.0"

    def test_from_toml_invalid(self, tmp_path: Path):
        toml_file = tmp_path / "xcode.toml"
        toml_file.write_text("default = \n")
        with pytest.raises(ConfigurationError) as exc:
            XcodeConfig.from_toml(toml_file)
        assert exc.value.field == "xcode_config"


class TestResolveToolchainVersion:
    def test_defaults(self):
        result = resolve_toolchain_version(None, None, PlatformType.IOS)
        assert result == ToolchainVersion(xcode_version="7.3.1", sdk_version="8.4")

    def test_explicit_xcode_default_sdk(self):
        result = resolve_toolchain_version("5.8", None, PlatformType.IOS)
        assert result.xcode_version == "5.8"
        assert result.sdk_version == "8.4"

    def test_watchos_default_sdk(self):
        result = resolve_toolchain_version("5.8", None, PlatformType.WATCHOS)
        assert result.sdk_version == "2.0"

    def test_alias_is_kept_verbatim(self):
        result = resolve_toolchain_version("7.3", None, PlatformType.TVOS)
        assert result.xcode_version == "7.3"
        assert result.sdk_version == "9.0"

    def test_explicit_sdk_wins(self):
        result = resolve_toolchain_version("5.8", "9.3", PlatformType.IOS)
        assert result.sdk_version == "9.3"

    def test_explicit_sdk_with_unknown_xcode(self):
        result = resolve_toolchain_version("42.0", "1.2.3", PlatformType.IOS)
        assert result == ToolchainVersion("42.0", "1.2.3")

    def test_unknown_xcode_without_sdk(self):
        with pytest.raises(ConfigurationError) as exc:
            resolve_toolchain_version("42.0", None, PlatformType.IOS)
        assert exc.value.field == "xcode_version"

    def test_no_default_xcode(self):
        config = XcodeConfig(default_version=None)
        with pytest.raises(ConfigurationError) as exc:
            resolve_toolchain_version(None, None, PlatformType.IOS, config)
        assert exc.value.field == "xcode_version"

    def test_family_without_default_sdk(self):
        config = XcodeConfig.from_mapping(
            {"default": "1.0", "versions": {"1.0": {"default_sdk_versions": {"ios": "8.0"}}}}
        )
        with pytest.raises(ConfigurationError) as exc:
            resolve_toolchain_version(None, None, PlatformType.WATCHOS, config)
        assert exc.value.field == "watchos_sdk_version"

    def test_never_blends_versions(self):
        result = resolve_toolchain_version("5.8", "10", PlatformType.IOS)
        assert result.sdk_version == "10"
