# SPDX-License-Identifier: MIT
"""Tests for unibuild.toolchains.platforms."""

import pytest

from unibuild.core.errors import ConfigurationError
from unibuild.toolchains.platforms import (
    Architecture,
    Environment,
    PlatformSpec,
    PlatformType,
    resolve_platform_spec,
    sdk_platform_name,
)
from unibuild.toolchains.xcode import VersionOverrides


class TestPlatformType:
    def test_parse_lowercase(self):
        assert PlatformType.parse("ios") is PlatformType.IOS
        assert PlatformType.parse("watchos") is PlatformType.WATCHOS

    def test_parse_is_case_insensitive(self):
        assert PlatformType.parse("tvOS") is PlatformType.TVOS

    def test_parse_passes_through_members(self):
        assert PlatformType.parse(PlatformType.MACOS) is PlatformType.MACOS

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError, match="unsupported platform type") as exc:
            PlatformType.parse("android")
        assert exc.value.field == "apple_platform_type"

    def test_default_minimum_os(self):
        assert PlatformType.IOS.default_minimum_os == "8.4"
        assert PlatformType.WATCHOS.default_minimum_os == "2.0"
        assert PlatformType.TVOS.default_minimum_os == "9.0"
        assert PlatformType.MACOS.default_minimum_os == "10.11"

    def test_supported_cpus(self):
        cpus = PlatformType.WATCHOS.supported_cpus()
        assert cpus["armv7k"] is Environment.DEVICE
        assert cpus["i386"] is Environment.SIMULATOR
        assert "arm64e" in PlatformType.IOS.supported_cpus()

    def test_macos_has_no_simulator(self):
        assert PlatformType.MACOS.simulator_platform is None
        envs = set(PlatformType.MACOS.supported_cpus().values())
        assert envs == {Environment.DEVICE}


class TestArchitecture:
    def test_parse_bare_cpu(self):
        arch = Architecture.parse("watchos", "armv7k")
        assert arch.platform_type is PlatformType.WATCHOS
        assert arch.cpu == "armv7k"
        assert arch.environment is Environment.DEVICE
        assert arch.name == "watchos_armv7k"

    def test_parse_prefixed_cpu(self):
        arch = Architecture.parse(PlatformType.IOS, "ios_x86_64")
        assert arch.cpu == "x86_64"
        assert arch.is_simulator
        assert str(arch) == "ios_x86_64"

    def test_prefixed_and_bare_are_equal(self):
        assert Architecture.parse("ios", "arm64") == Architecture.parse("ios", "ios_arm64")

    def test_sim_arm64_arch(self):
        arch = Architecture.parse("ios", "sim_arm64")
        assert arch.is_simulator
        assert arch.arch == "arm64"

    def test_unknown_cpu(self):
        with pytest.raises(ConfigurationError) as exc:
            Architecture.parse("watchos", "x86_64h")
        assert "x86_64h" in str(exc.value)
        assert "watchos" in str(exc.value)
        assert exc.value.field == "watchos_cpus"

    def test_cpu_from_other_family(self):
        with pytest.raises(ConfigurationError):
            Architecture.parse("tvos", "armv7k")

    def test_wrong_prefix_is_not_stripped(self):
        with pytest.raises(ConfigurationError):
            Architecture.parse("ios", "watchos_armv7k")


class TestSdkPlatformName:
    @pytest.mark.parametrize(
        "platform_type,device,simulator",
        [
            (PlatformType.IOS, "iPhoneOS", "iPhoneSimulator"),
            (PlatformType.WATCHOS, "WatchOS", "WatchSimulator"),
            (PlatformType.TVOS, "AppleTVOS", "AppleTVSimulator"),
            (PlatformType.VISIONOS, "XROS", "XRSimulator"),
        ],
    )
    def test_names(self, platform_type, device, simulator):
        assert sdk_platform_name(platform_type, Environment.DEVICE) == device
        assert sdk_platform_name(platform_type, Environment.SIMULATOR) == simulator

    def test_macos_simulator_is_an_error(self):
        with pytest.raises(ConfigurationError, match="no simulator"):
            sdk_platform_name(PlatformType.MACOS, Environment.SIMULATOR)


class TestResolvePlatformSpec:
    def test_simulator_with_override(self):
        overrides = VersionOverrides.create(
            minimum_os={"ios": "12.345", "watchos": "11.111"}
        )
        arch = Architecture.parse("ios", "x86_64")
        spec = resolve_platform_spec(PlatformType.IOS, arch, overrides)
        assert spec == PlatformSpec("iPhoneSimulator", "12.345")

    def test_device_uses_family_default(self):
        arch = Architecture.parse("watchos", "armv7k")
        spec = resolve_platform_spec(PlatformType.WATCHOS, arch, VersionOverrides())
        assert spec.sdk_platform_name == "WatchOS"
        assert spec.minimum_os_version == "2.0"

    def test_override_for_other_family_is_ignored(self):
        overrides = VersionOverrides.create(minimum_os={"ios": "12.345"})
        arch = Architecture.parse("watchos", "armv7k")
        spec = resolve_platform_spec(PlatformType.WATCHOS, arch, overrides)
        assert spec.minimum_os_version == "2.0"

    def test_override_used_verbatim(self):
        overrides = VersionOverrides.create(minimum_os={"tvos": "10.0.0-beta"})
        arch = Architecture.parse("tvos", "arm64")
        spec = resolve_platform_spec(PlatformType.TVOS, arch, overrides)
        assert spec.minimum_os_version == "10.0.0-beta"

    def test_mismatched_pairing(self):
        arch = Architecture.parse("ios", "arm64")
        with pytest.raises(ConfigurationError) as exc:
            resolve_platform_spec(PlatformType.WATCHOS, arch, VersionOverrides())
        assert "ios_arm64" in str(exc.value)
        assert "watchos" in str(exc.value)

    def test_environment_mismatch(self):
        forged = Architecture(PlatformType.IOS, "arm64", Environment.SIMULATOR)
        with pytest.raises(ConfigurationError):
            resolve_platform_spec(PlatformType.IOS, forged, VersionOverrides())

    def test_deterministic(self):
        overrides = VersionOverrides.create(minimum_os={"ios": "12.0"})
        for platform_type in PlatformType:
            for cpu in platform_type.supported_cpus():
                arch = Architecture.parse(platform_type, cpu)
                first = resolve_platform_spec(platform_type, arch, overrides)
                second = resolve_platform_spec(
                    platform_type, arch, VersionOverrides.create(minimum_os={"ios": "12.0"})
                )
                assert first == second
