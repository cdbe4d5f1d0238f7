# SPDX-License-Identifier: MIT
"""Multi-architecture (universal) binary builder.

For a UniversalBinaryTarget the builder emits one link action per
requested architecture and a single lipo action that merges their
outputs:

    a.cc -> ObjcLink -> bin/watchos_armv7k/bin_bin   -+
    a.cc -> ObjcLink -> bin/watchos_arm64_32/bin_bin -+-> Lipo -> bin/bin_lipobin

Every architecture is resolved before anything is added to the graph, so
a configuration error leaves the graph untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from unibuild.configure.options import CPU_FLAGS, BuildOptions
from unibuild.core.action import CombineAction, LinkAction
from unibuild.core.build_context import XCODE_VERSION, resolve_build_variables
from unibuild.core.errors import ConfigurationError
from unibuild.core.graph import BuildGraph
from unibuild.core.node import Artifact
from unibuild.toolchains.platforms import Architecture, PlatformType
from unibuild.toolchains.xcode import DEFAULT_XCODE_CONFIG
from unibuild.util.source_location import SourceLocation, get_caller_location

if TYPE_CHECKING:
    from unibuild.core.build_context import BuildVariableSet
    from unibuild.toolchains.xcode import XcodeConfig

logger = logging.getLogger(__name__)


class UniversalBinaryTarget:
    """A binary to be built for several architectures and merged.

    Example:
        target = UniversalBinaryTarget(
            "bin",
            platform_type="watchos",
            cpus=["armv7k", "arm64_32"],
            sources=["a.cc"],
        )

    Attributes:
        name: Target name; the universal output is "<name>_lipobin".
        platform_type: Family every architecture belongs to.
        cpus: Requested architectures in order, or None to take them
            from the build options.
        sources: Inputs shared by every architecture's link action.
        arch_inputs: Extra per-architecture inputs keyed by cpu.
        build_units: Populated by the builder, one per architecture.
        combine_action: Populated by the builder.
        defined_at: Where the target was declared.
    """

    def __init__(
        self,
        name: str,
        *,
        platform_type: PlatformType | str,
        cpus: Sequence[str] | None = None,
        sources: Sequence[str | Path | Artifact] = (),
        arch_inputs: Mapping[str, Sequence[str | Path | Artifact]] | None = None,
        defined_at: SourceLocation | None = None,
    ) -> None:
        self.name = name
        self.platform_type = PlatformType.parse(platform_type)
        self.cpus = list(cpus) if cpus is not None else None
        self.sources = [_as_artifact(s) for s in sources]
        self.arch_inputs = {
            cpu: [_as_artifact(s) for s in inputs]
            for cpu, inputs in (arch_inputs or {}).items()
        }
        self.defined_at = defined_at or get_caller_location()
        self.build_units: list[ArchitectureBuildUnit] = []
        self.combine_action: CombineAction | None = None

    def __repr__(self) -> str:
        return f"UniversalBinaryTarget({self.name!r}, {self.platform_type})"


def _as_artifact(source: str | Path | Artifact) -> Artifact:
    if isinstance(source, Artifact):
        return source
    return Artifact(source)


@dataclass(frozen=True)
class ArchitectureBuildUnit:
    """Everything needed to link one architecture's binary."""

    architecture: Architecture
    variables: BuildVariableSet
    inputs: tuple[Artifact, ...] = field(default_factory=tuple)


class MultiArchGraphBuilder:
    """Builds the link/lipo action graph for universal binaries.

    Args:
        options: Build options (version overrides and default cpu lists).
        graph: Graph the actions are emitted into.
        xcode_config: Table of known Xcode versions.
        out_dir: Root directory for output artifacts.
    """

    def __init__(
        self,
        options: BuildOptions,
        graph: BuildGraph | None = None,
        *,
        xcode_config: XcodeConfig = DEFAULT_XCODE_CONFIG,
        out_dir: Path | str = "bin",
    ) -> None:
        self.options = options
        self.graph = graph if graph is not None else BuildGraph()
        self.xcode_config = xcode_config
        self.out_dir = Path(out_dir)

    def _architectures(self, target: UniversalBinaryTarget) -> list[Architecture]:
        platform_type = target.platform_type
        cpus = (
            target.cpus
            if target.cpus is not None
            else self.options.cpus_for(platform_type)
        )
        if not cpus:
            raise ConfigurationError(
                f"target {target.name!r} requests no architectures",
                field=CPU_FLAGS[platform_type],
                location=target.defined_at,
            )

        architectures: list[Architecture] = []
        for cpu in cpus:
            try:
                arch = Architecture.parse(platform_type, cpu)
            except ConfigurationError as e:
                raise ConfigurationError(
                    e.reason, field=e.field, location=target.defined_at
                ) from e
            if arch in architectures:
                raise ConfigurationError(
                    f"architecture {arch.name} is requested more than once "
                    f"for target {target.name!r}",
                    field=CPU_FLAGS[platform_type],
                    location=target.defined_at,
                )
            architectures.append(arch)
        return architectures

    def build_units(self, target: UniversalBinaryTarget) -> list[ArchitectureBuildUnit]:
        """Resolve one build unit per architecture without touching the graph.

        Raises:
            ConfigurationError: On an empty, duplicate or unsupported
                architecture list, arch_inputs keyed by a cpu the target
                does not build, or when versions cannot be resolved.
        """
        architectures = self._architectures(target)
        known = {a.cpu for a in architectures} | {a.name for a in architectures}
        unmatched = sorted(key for key in target.arch_inputs if key not in known)
        if unmatched:
            raise ConfigurationError(
                f"per-architecture inputs for {', '.join(unmatched)} match no "
                f"architecture of target {target.name!r}",
                field="arch_inputs",
                location=target.defined_at,
            )

        units: list[ArchitectureBuildUnit] = []
        for arch in architectures:
            variables = resolve_build_variables(self.options, arch, self.xcode_config)
            inputs = list(target.sources)
            inputs.extend(target.arch_inputs.get(arch.cpu, []))
            inputs.extend(target.arch_inputs.get(arch.name, []))
            units.append(ArchitectureBuildUnit(arch, variables, tuple(inputs)))
        return units

    def build_graph(
        self, target: UniversalBinaryTarget
    ) -> tuple[list[LinkAction], CombineAction]:
        """Emit the link actions and the combine action for a target.

        Args:
            target: The universal binary to build.

        Returns:
            The link actions in architecture order, and the combine action.

        Raises:
            ConfigurationError: If the target cannot be configured. No
                action is emitted in that case.
        """
        units = self.build_units(target)

        link_actions: list[LinkAction] = []
        for unit in units:
            output = Artifact(
                self.out_dir / unit.architecture.name / f"{target.name}_bin",
                defined_at=target.defined_at,
            )
            link_actions.append(
                LinkAction(
                    unit.architecture,
                    unit.inputs,
                    output,
                    unit.variables,
                    defined_at=target.defined_at,
                )
            )

        combine_action = CombineAction(
            [action.primary_output for action in link_actions],
            Artifact(
                self.out_dir / f"{target.name}_lipobin", defined_at=target.defined_at
            ),
            xcode_version=units[0].variables.value_for(XCODE_VERSION),
            defined_at=target.defined_at,
        )

        self.graph.add_actions([*link_actions, combine_action])
        target.build_units = units
        target.combine_action = combine_action

        logger.info(
            "Built %s for %s: %s",
            target.name,
            target.platform_type,
            ", ".join(unit.architecture.name for unit in units),
        )
        return link_actions, combine_action
