# SPDX-License-Identifier: MIT
"""Builders that turn targets into actions."""

from unibuild.builders.multiarch import (
    ArchitectureBuildUnit,
    MultiArchGraphBuilder,
    UniversalBinaryTarget,
)

__all__ = ["ArchitectureBuildUnit", "MultiArchGraphBuilder", "UniversalBinaryTarget"]
