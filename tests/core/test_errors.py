# SPDX-License-Identifier: MIT
"""Tests for unibuild.core.errors."""

from unibuild.core.errors import (
    ConfigurationError,
    UnibuildError,
    VariableNotFoundError,
)
from unibuild.util.source_location import SourceLocation


class TestConfigurationError:
    def test_field_prefix(self):
        err = ConfigurationError("no default", field="xcode_version")
        assert str(err) == "xcode_version: no default"
        assert err.field == "xcode_version"
        assert err.reason == "no default"

    def test_location(self):
        err = ConfigurationError("bad", location=SourceLocation("BUILD.py", 3))
        assert str(err) == "BUILD.py:3: bad"
        assert isinstance(err, UnibuildError)


class TestVariableNotFoundError:
    def test_is_lookup_error(self):
        err = VariableNotFoundError("version_min")
        assert isinstance(err, LookupError)
        assert not isinstance(err, KeyError)
        assert "version_min" in str(err)
