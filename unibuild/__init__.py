# SPDX-License-Identifier: MIT
"""
Unibuild: Apple toolchain variable resolution and universal binary graphs.

Unibuild resolves the Xcode version, SDK version, SDK platform and minimum
OS version for each architecture of a target, and builds the action graph
that links every architecture separately and merges the results with lipo.
"""

from __future__ import annotations

import json
import os

__version__ = "0.1.0"

# Re-export commonly used classes for convenient imports
from unibuild.builders.multiarch import (  # noqa: E402
    MultiArchGraphBuilder,
    UniversalBinaryTarget,
)
from unibuild.configure.options import BuildOptions  # noqa: E402
from unibuild.core.build_context import (  # noqa: E402
    BuildVariableSet,
    assemble,
    resolve_build_variables,
)
from unibuild.core.errors import (  # noqa: E402
    ConfigurationError,
    UnibuildError,
    VariableNotFoundError,
)
from unibuild.core.graph import BuildGraph  # noqa: E402
from unibuild.toolchains.platforms import (  # noqa: E402
    Architecture,
    PlatformType,
    resolve_platform_spec,
)
from unibuild.toolchains.xcode import (  # noqa: E402
    VersionOverrides,
    XcodeConfig,
    resolve_toolchain_version,
)

# Internal storage for build-script variables
_cli_vars: dict[str, str] | None = None


def get_var(name: str, default: str | None = None) -> str | None:
    """Get a build variable passed to a build script or set in the environment.

    Variables are handed to build scripts as a JSON object in UNIBUILD_VARS:
        UNIBUILD_VARS='{"BUILD_DIR": "out"}' python unibuild-build.py

    Precedence (highest to lowest):
        1. UNIBUILD_VARS entry
        2. Environment variable of the same name

    Args:
        name: Variable name.
        default: Default value if not set.

    Returns:
        The variable value, or default if not set.
    """
    global _cli_vars

    # Lazy-load from the environment on first access
    if _cli_vars is None:
        unibuild_vars = os.environ.get("UNIBUILD_VARS")
        if unibuild_vars:
            try:
                _cli_vars = json.loads(unibuild_vars)
            except json.JSONDecodeError:
                _cli_vars = {}
        else:
            _cli_vars = {}

    if name in _cli_vars:
        return _cli_vars[name]

    return os.environ.get(name, default)


# Public API exports
__all__ = [
    # Version
    "__version__",
    "get_var",
    # Resolution
    "Architecture",
    "PlatformType",
    "VersionOverrides",
    "XcodeConfig",
    "resolve_platform_spec",
    "resolve_toolchain_version",
    "BuildVariableSet",
    "assemble",
    "resolve_build_variables",
    # Graph construction
    "BuildGraph",
    "BuildOptions",
    "MultiArchGraphBuilder",
    "UniversalBinaryTarget",
    # Errors
    "ConfigurationError",
    "UnibuildError",
    "VariableNotFoundError",
]
