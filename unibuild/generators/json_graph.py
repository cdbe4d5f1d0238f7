# SPDX-License-Identifier: MIT
"""JSON description of an action graph.

Each action is listed with its mnemonic, inputs, outputs, expanded
command line (also as one shell-quoted string), environment and resolved
build variables, in the order the actions were emitted. This is what an
external executor consumes.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from unibuild.core.action import LinkAction
from unibuild.core.subst import to_shell_command
from unibuild.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from unibuild.core.action import Action
    from unibuild.core.graph import BuildGraph


def describe_action(action: Action) -> dict[str, Any]:
    command = action.command_line()
    result: dict[str, Any] = {
        "mnemonic": action.mnemonic,
        "inputs": [str(a.path) for a in action.inputs],
        "outputs": [str(a.path) for a in action.outputs],
        "command": command,
        "shell_command": to_shell_command(command),
        "env": action.environment(),
    }
    if isinstance(action, LinkAction):
        result["architecture"] = action.architecture.name
    if action.variables is not None:
        result["variables"] = action.variables.get_variables()
    return result


def describe_graph(graph: BuildGraph) -> dict[str, Any]:
    """Return a JSON-serializable description of every action."""
    return {"actions": [describe_action(action) for action in graph]}


class JsonGenerator(BaseGenerator):
    """Generator that writes the graph description as JSON."""

    output_filename = "graph.json"

    def __init__(self, *, indent: int = 2, output_filename: str | None = None) -> None:
        super().__init__("json", output_filename=output_filename)
        self._indent = indent

    def render(self, graph: BuildGraph, title: str = "unibuild") -> str:
        data = {"title": title, **describe_graph(graph)}
        return json.dumps(data, indent=self._indent) + "\n"
