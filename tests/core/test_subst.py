# SPDX-License-Identifier: MIT
"""Tests for unibuild.core.subst."""

import pytest

from unibuild.core.errors import MissingVariableError, SubstitutionError
from unibuild.core.subst import subst, to_shell_command


class TestSubstSimple:
    def test_no_variables(self):
        assert subst("lipo -create", {}) == ["lipo", "-create"]

    def test_simple_variable(self):
        assert subst("clang -arch $arch", {"arch": "arm64"}) == [
            "clang",
            "-arch",
            "arm64",
        ]

    def test_braced_variable(self):
        result = subst("-mios-version-min=${version_min}", {"version_min": "12.345"})
        assert result == ["-mios-version-min=12.345"]

    def test_embedded_variable(self):
        result = subst(["-F$sdk_dir/Frameworks"], {"sdk_dir": "/sdk"})
        assert result == ["-F/sdk/Frameworks"]

    def test_escaped_dollar(self):
        assert subst("echo $$HOME", {}) == ["echo", "$HOME"]

    def test_values_are_not_reexpanded(self):
        assert subst("$a", {"a": "$b", "b": "x"}) == ["$b"]


class TestSubstLists:
    def test_list_variable_expands_to_tokens(self):
        result = subst("lipo -create $in -output $out", {"in": ["a", "b"], "out": "c"})
        assert result == ["lipo", "-create", "a", "b", "-output", "c"]

    def test_empty_list(self):
        assert subst(["x", "$in"], {"in": []}) == ["x"]

    def test_list_embedded_is_error(self):
        with pytest.raises(SubstitutionError, match="cannot be embedded"):
            subst(["-I$dirs"], {"dirs": ["a", "b"]})

    def test_list_template_keeps_spaces(self):
        result = subst(["$out"], {"out": "path with spaces/bin"})
        assert result == ["path with spaces/bin"]


class TestSubstErrors:
    def test_missing_variable(self):
        with pytest.raises(MissingVariableError) as exc:
            subst("clang $nope", {})
        assert exc.value.variable == "nope"

    def test_missing_embedded_variable(self):
        with pytest.raises(MissingVariableError):
            subst(["-F${nope}/x"], {})


class TestShellCommand:
    def test_quotes_spaces(self):
        assert to_shell_command(["lipo", "a b", "c"]) == "lipo 'a b' c"
