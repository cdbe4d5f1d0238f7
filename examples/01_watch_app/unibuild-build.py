#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Universal watchOS binary from two device architectures.

Writes the link/lipo actions as JSON to BUILD_DIR/graph.json.
"""

import sys
from pathlib import Path

# Add parent unibuild to path for development
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from unibuild import get_var
from unibuild.builders.multiarch import MultiArchGraphBuilder, UniversalBinaryTarget
from unibuild.configure.options import BuildOptions
from unibuild.core.subst import to_shell_command
from unibuild.generators.json_graph import JsonGenerator

build_dir = Path(get_var("BUILD_DIR", "build"))

options = BuildOptions.from_args(
    [
        "--xcode_version=5.8",
        "--watchos_minimum_os=11.111",
        "--watchos_cpus=armv7k,arm64_32",
    ]
)

builder = MultiArchGraphBuilder(options, out_dir=build_dir / "bin")
target = UniversalBinaryTarget("bin", platform_type="watchos", sources=["a.cc"])
links, combine = builder.build_graph(target)

for link in links:
    print(f"{link.architecture.name}: {to_shell_command(link.command_line())}")
print(f"combine: {to_shell_command(combine.command_line())}")

JsonGenerator().generate(builder.graph, build_dir, "bin")
