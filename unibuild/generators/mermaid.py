# SPDX-License-Identifier: MIT
"""Mermaid diagram generator for action graph visualization.

Generates Mermaid flowchart syntax showing artifacts and the actions
between them. Output can be rendered in GitHub markdown, documentation
tools, or the Mermaid live editor (https://mermaid.live).

Example output:
    ```mermaid
    flowchart LR
      bin_watchos_armv7k_bin_bin[bin_bin]
      bin_bin_lipobin[[bin_lipobin]]
      a0{{"Lipo"}}
      bin_watchos_armv7k_bin_bin --> a0
      a0 --> bin_bin_lipobin
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from unibuild.core.action import CombineAction, LinkAction
from unibuild.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from unibuild.core.action import Action
    from unibuild.core.graph import BuildGraph
    from unibuild.core.node import Artifact


class MermaidGenerator(BaseGenerator):
    """Generator that produces Mermaid flowchart diagrams."""

    output_filename = "graph.mmd"

    def __init__(self, *, direction: str = "LR", output_filename: str | None = None) -> None:
        """Initialize the Mermaid generator.

        Args:
            direction: Graph direction - "LR" (left-right), "TB" (top-bottom),
                      "RL" (right-left), or "BT" (bottom-top).
            output_filename: Name of the output file.
        """
        super().__init__("mermaid", output_filename=output_filename)
        self._direction = direction

    def render(self, graph: BuildGraph, title: str = "unibuild") -> str:
        lines = ["---", f"title: {title} Actions", "---", f"flowchart {self._direction}"]
        actions = graph.actions
        if not actions:
            lines.append("  empty[No actions]")
            return "\n".join(lines) + "\n"

        written: set[str] = set()
        edges: list[tuple[str, str]] = []
        for index, action in enumerate(actions):
            action_id = f"a{index}"
            lines.append(f'  {action_id}{{{{"{self._action_label(action)}"}}}}')
            for artifact in action.inputs:
                self._write_artifact(lines, written, artifact)
                edges.append((self._sanitize_id(str(artifact.path)), action_id))
            for artifact in action.outputs:
                self._write_artifact(
                    lines, written, artifact, final=isinstance(action, CombineAction)
                )
                edges.append((action_id, self._sanitize_id(str(artifact.path))))

        lines.append("")
        lines.extend(f"  {src} --> {dst}" for src, dst in edges)
        return "\n".join(lines) + "\n"

    def _write_artifact(
        self,
        lines: list[str],
        written: set[str],
        artifact: Artifact,
        *,
        final: bool = False,
    ) -> None:
        node_id = self._sanitize_id(str(artifact.path))
        if node_id in written:
            return
        written.add(node_id)
        if final:
            lines.append(f"  {node_id}[[{artifact.name}]]")
        elif artifact.is_source:
            lines.append(f"  {node_id}>{artifact.name}]")  # Flag shape for sources
        else:
            lines.append(f"  {node_id}[{artifact.name}]")

    def _action_label(self, action: Action) -> str:
        if isinstance(action, LinkAction):
            return f"{action.mnemonic} {action.architecture.name}"
        return action.mnemonic

    def _sanitize_id(self, name: str) -> str:
        """Sanitize a name for use as a Mermaid node ID."""
        result = name.replace("/", "_").replace("\\", "_")
        result = result.replace(".", "_").replace("-", "_")
        result = result.replace(" ", "_").replace(":", "_")
        # Ensure it starts with a letter
        if result and result[0].isdigit():
            result = "n" + result
        return result
