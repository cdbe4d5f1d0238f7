# SPDX-License-Identifier: MIT

# Node base class for graph entries, and the file artifacts actions produce

from __future__ import annotations

import pathlib
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from unibuild.core.action import Action
    from unibuild.util.source_location import SourceLocation


class Node:
    explicit_deps: list["Node"]

    def __init__(self, **args):
        "Base class for a Node, an entry in the action graph."
        self.explicit_deps = list(args.get("dependencies", []))
        self.defined_at: SourceLocation | None = args.get("defined_at")

    def deps(self) -> list["Node"]:
        """All direct dependencies of this node"""
        return list(self.explicit_deps)

    def depends(self, n: Union["Node", list["Node"]]) -> None:
        """Add one or more dependencies for this node, i.e. node(s) which must be built
        before we can build this one."""
        if isinstance(n, Node):
            self.explicit_deps.append(n)
        else:
            self.explicit_deps.extend(n)


class Artifact(Node):
    """A file produced or consumed by an action.

    Artifacts may or may not exist in the file system; unibuild never
    touches the files themselves. An artifact produced by an action
    points back at it through generating_action."""

    path: pathlib.Path

    def __init__(self, path: pathlib.Path | str, **args):
        super().__init__(**args)
        self.path = pathlib.Path(path)
        self.generating_action: Action | None = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_source(self) -> bool:
        return self.generating_action is None

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"Artifact({str(self.path)!r})"
