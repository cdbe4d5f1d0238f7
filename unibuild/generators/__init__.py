# SPDX-License-Identifier: MIT
"""Action graph generators for unibuild."""

from unibuild.generators.generator import BaseGenerator, Generator
from unibuild.generators.json_graph import JsonGenerator, describe_graph
from unibuild.generators.mermaid import MermaidGenerator

__all__ = [
    "BaseGenerator",
    "Generator",
    "JsonGenerator",
    "MermaidGenerator",
    "describe_graph",
]
