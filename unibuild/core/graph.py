# SPDX-License-Identifier: MIT
"""Build-local action graph.

A BuildGraph collects the actions emitted while constructing one or more
targets, and answers "which action generates this artifact?" so callers
can trace from a final output back to the step that produced it.

The graph is owned by a single construction pass. It is never patched
after a failure: callers discard it and start again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from unibuild.core.action import Action, variable_value_for
from unibuild.core.errors import GraphError
from unibuild.core.node import Artifact

logger = logging.getLogger(__name__)


class BuildGraph:
    """Actions and the artifacts they generate."""

    def __init__(self) -> None:
        self._actions: list[Action] = []
        self._generators: dict[Path, Action] = {}

    @property
    def actions(self) -> list[Action]:
        return list(self._actions)

    def add_action(self, action: Action) -> Action:
        """Register a single action. See add_actions()."""
        self.add_actions([action])
        return action

    def add_actions(self, actions: Iterable[Action]) -> None:
        """Register actions atomically.

        Either every action is added or, if any output already has a
        generating action, none are.

        Raises:
            GraphError: If two actions would generate the same artifact.
        """
        actions = list(actions)
        claimed: dict[Path, Action] = {}
        for action in actions:
            for output in action.outputs:
                owner = self._generators.get(output.path) or claimed.get(output.path)
                if owner is not None:
                    raise GraphError(
                        f"artifact {output.path} is generated by both "
                        f"{owner!r} and {action!r}",
                        action.defined_at,
                    )
                claimed[output.path] = action

        for action in actions:
            for output in action.outputs:
                output.generating_action = action
                output.depends(list(action.inputs))
            self._actions.append(action)
        self._generators.update(claimed)
        logger.debug("Added %d action(s); graph has %d", len(actions), len(self._actions))

    def generating_action(self, artifact: Artifact | Path | str) -> Action | None:
        """The action that produces an artifact, or None for source files."""
        path = artifact.path if isinstance(artifact, Artifact) else Path(artifact)
        return self._generators.get(path)

    def variable_value_for(self, action: Action, name: str) -> str:
        """Resolved value of a build variable on an action.

        Raises:
            VariableNotFoundError: If the variable is not defined for the action.
        """
        return variable_value_for(action, name)

    def discard(self) -> None:
        """Drop every action and artifact mapping."""
        self._actions.clear()
        self._generators.clear()

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)
