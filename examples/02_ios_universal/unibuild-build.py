#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""iOS device + simulator binary, configured from the command line.

    python unibuild-build.py --ios_multi_cpus=arm64,sim_arm64 --ios_minimum_os=15.0
"""

import sys
from pathlib import Path

# Add parent unibuild to path for development
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from unibuild import get_var
from unibuild.builders.multiarch import MultiArchGraphBuilder, UniversalBinaryTarget
from unibuild.configure.options import BuildOptions
from unibuild.generators.mermaid import MermaidGenerator

build_dir = Path(get_var("BUILD_DIR", "build"))
options = BuildOptions.from_args(sys.argv[1:])

builder = MultiArchGraphBuilder(options, out_dir=build_dir / "bin")
builder.build_graph(
    UniversalBinaryTarget("app", platform_type="ios", sources=["main.o", "util.o"])
)

output_file = MermaidGenerator().generate(builder.graph, build_dir, "app")
print(f"wrote {output_file}")
