# SPDX-License-Identifier: MIT
"""Generator protocol for action graph output.

Generators take a constructed BuildGraph and render it for humans or
for other tools (Mermaid diagrams, JSON descriptions).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from unibuild.core.graph import BuildGraph


@runtime_checkable
class Generator(Protocol):
    """Protocol for graph generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'mermaid', 'json')."""
        ...

    def render(self, graph: BuildGraph, title: str = "unibuild") -> str:
        """Render a graph to text."""
        ...

    def generate(self, graph: BuildGraph, output_dir: Path, title: str = "unibuild") -> Path:
        """Write the rendered graph into output_dir and return the file path."""
        ...


class BaseGenerator:
    """Base class for generators with common functionality."""

    output_filename = "graph.txt"

    def __init__(self, name: str, *, output_filename: str | None = None) -> None:
        """Initialize a generator.

        Args:
            name: Generator name.
            output_filename: Name of the output file (default: class default).
        """
        self._name = name
        if output_filename is not None:
            self.output_filename = output_filename

    @property
    def name(self) -> str:
        return self._name

    def render(self, graph: BuildGraph, title: str = "unibuild") -> str:
        """Render the graph. Subclasses must implement."""
        raise NotImplementedError

    def generate(self, graph: BuildGraph, output_dir: Path, title: str = "unibuild") -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / self.output_filename
        with open(output_file, "w") as f:
            f.write(self.render(graph, title))
        return output_file

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
