# SPDX-License-Identifier: MIT
"""Action descriptions handed to the build executor.

An Action turns input artifacts into output artifacts by running a
command. Actions are descriptions only: unibuild never runs them. Each
link action keeps a direct reference to the BuildVariableSet it was
created with so diagnostics can read a resolved value without walking
the graph again.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from unibuild.core.build_context import SDK_PLATFORM, SDK_VERSION, XCODE_VERSION
from unibuild.core.errors import ConfigurationError, GraphError, VariableNotFoundError
from unibuild.core.subst import subst

if TYPE_CHECKING:
    from unibuild.core.build_context import BuildVariableSet
    from unibuild.core.node import Artifact
    from unibuild.toolchains.platforms import Architecture
    from unibuild.util.source_location import SourceLocation

LINK_COMMAND = [
    "xcrun",
    "clang",
    "-target",
    "$target_triple",
    "-arch",
    "$arch",
    "-isysroot",
    "$sdk_dir",
    "-F$sdk_framework_dir",
    "-F$platform_developer_framework_dir",
    "-o",
    "$out",
    "$in",
]

LIPO_COMMAND = ["xcrun", "lipo", "-create", "$in", "-output", "$out"]


class Action:
    """A single build step.

    Attributes:
        mnemonic: Short action kind (e.g. "ObjcLink", "Lipo").
        inputs: Artifacts read by the action, in declaration order.
        outputs: Artifacts written by the action.
        command: Command template expanded by command_line().
        variables: Build variables the action was created with, or None.
        defined_at: Where the owning target was declared.
    """

    def __init__(
        self,
        mnemonic: str,
        inputs: Sequence[Artifact],
        outputs: Sequence[Artifact],
        command: Sequence[str],
        *,
        variables: BuildVariableSet | None = None,
        defined_at: SourceLocation | None = None,
    ) -> None:
        self.mnemonic = mnemonic
        self.inputs: tuple[Artifact, ...] = tuple(inputs)
        self.outputs: tuple[Artifact, ...] = tuple(outputs)
        self.command: tuple[str, ...] = tuple(command)
        self.variables = variables
        self.defined_at = defined_at

    @property
    def primary_output(self) -> Artifact:
        return self.outputs[0]

    def input_ending_with(self, suffix: str) -> Artifact | None:
        """First input whose path ends with suffix, or None."""
        for artifact in self.inputs:
            if str(artifact.path).endswith(suffix):
                return artifact
        return None

    def template_variables(self) -> dict[str, Any]:
        """Variables visible to the command template."""
        result: dict[str, Any] = {}
        if self.variables is not None:
            result.update(self.variables.get_variables())
        result["in"] = [str(a.path) for a in self.inputs]
        result["out"] = str(self.primary_output.path)
        return result

    def command_line(self) -> list[str]:
        """Expand the command template into an argument list."""
        return subst(self.command, self.template_variables(), location=self.defined_at)

    def environment(self) -> dict[str, str]:
        """Extra environment variables the executor must set."""
        return {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.mnemonic!r}, out={self.primary_output})"


class LinkAction(Action):
    """Links one architecture's objects into a single-architecture binary."""

    def __init__(
        self,
        architecture: Architecture,
        inputs: Sequence[Artifact],
        output: Artifact,
        variables: BuildVariableSet,
        *,
        command: Sequence[str] = LINK_COMMAND,
        defined_at: SourceLocation | None = None,
    ) -> None:
        super().__init__(
            "ObjcLink",
            inputs,
            [output],
            command,
            variables=variables,
            defined_at=defined_at,
        )
        self.architecture = architecture

    def environment(self) -> dict[str, str]:
        # xcrun picks the Xcode and SDK from these.
        return {
            "XCODE_VERSION_OVERRIDE": variable_value_for(self, XCODE_VERSION),
            "APPLE_SDK_VERSION_OVERRIDE": variable_value_for(self, SDK_VERSION),
            "APPLE_SDK_PLATFORM": variable_value_for(self, SDK_PLATFORM),
        }


class CombineAction(Action):
    """Merges single-architecture binaries into one universal binary."""

    def __init__(
        self,
        inputs: Sequence[Artifact],
        output: Artifact,
        *,
        xcode_version: str,
        command: Sequence[str] = LIPO_COMMAND,
        defined_at: SourceLocation | None = None,
    ) -> None:
        if not inputs:
            raise ConfigurationError(
                "a universal binary needs at least one architecture input",
                field="inputs",
                location=defined_at,
            )
        seen: set[Path] = set()
        for artifact in inputs:
            if artifact.path in seen:
                raise GraphError(
                    f"{artifact.path} is passed to lipo more than once", defined_at
                )
            seen.add(artifact.path)
        super().__init__("Lipo", inputs, [output], command, defined_at=defined_at)
        self.xcode_version = xcode_version

    def environment(self) -> dict[str, str]:
        return {"XCODE_VERSION_OVERRIDE": self.xcode_version}


def variable_value_for(action: Action, name: str) -> str:
    """Look up one resolved build variable on an action.

    Raises:
        VariableNotFoundError: If the action has no variable with that name
            (actions without a variable set have no variables at all).
    """
    if action.variables is None:
        raise VariableNotFoundError(name, action.defined_at)
    return action.variables.value_for(name)
