# SPDX-License-Identifier: MIT
"""Command-line interface for unibuild."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from unibuild.builders.multiarch import MultiArchGraphBuilder, UniversalBinaryTarget
from unibuild.configure.options import BuildOptions
from unibuild.core.build_context import resolve_build_variables
from unibuild.core.errors import UnibuildError
from unibuild.generators.generator import BaseGenerator
from unibuild.generators.json_graph import JsonGenerator
from unibuild.generators.mermaid import MermaidGenerator
from unibuild.toolchains.platforms import Architecture
from unibuild.toolchains.xcode import DEFAULT_XCODE_CONFIG, XcodeConfig

# Set up logging
logger = logging.getLogger("unibuild")

GENERATORS: dict[str, type[BaseGenerator]] = {
    "json": JsonGenerator,
    "mermaid": MermaidGenerator,
}


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def load_xcode_config(path: str | None) -> XcodeConfig:
    """Load the Xcode version table, or return the built-in one."""
    if path is None:
        return DEFAULT_XCODE_CONFIG
    return XcodeConfig.from_toml(path)


def cmd_variables(args: argparse.Namespace) -> int:
    """Print the build variables for one architecture."""
    options = BuildOptions.from_namespace(args)
    xcode_config = load_xcode_config(args.xcode_config)
    cpu = options.cpu or options.cpus_for(options.platform_type)[0]
    arch = Architecture.parse(options.platform_type, cpu)
    variables = resolve_build_variables(options, arch, xcode_config)

    if args.json:
        print(json.dumps(variables.get_variables(), indent=2))
    else:
        width = max(len(name) for name in variables)
        for name, value in variables.items():
            print(f"{name:<{width}}  {value}")
    return 0


def cmd_graph(args: argparse.Namespace) -> int:
    """Build the universal binary graph for a target and print or write it."""
    options = BuildOptions.from_namespace(args)
    xcode_config = load_xcode_config(args.xcode_config)
    target = UniversalBinaryTarget(
        args.name,
        platform_type=options.platform_type,
        sources=args.sources,
    )
    builder = MultiArchGraphBuilder(options, xcode_config=xcode_config, out_dir=args.out_dir)
    builder.build_graph(target)

    generator = GENERATORS[args.format]()
    if args.output_dir:
        output_file = generator.generate(builder.graph, Path(args.output_dir), args.name)
        logger.info("Wrote %s", output_file)
    else:
        sys.stdout.write(generator.render(builder.graph, args.name))
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "--xcode-config",
        metavar="PATH",
        help="TOML file listing available Xcode versions",
    )
    BuildOptions.add_arguments(parser)


def build_parser() -> argparse.ArgumentParser:
    from unibuild import __version__

    parser = argparse.ArgumentParser(
        prog="unibuild",
        description="Resolve Apple toolchain variables and universal binary actions.",
        epilog="Run 'unibuild <command> --help' for command-specific help.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # unibuild variables
    vars_parser = subparsers.add_parser(
        "variables", help="Show resolved build variables for one architecture"
    )
    add_common_args(vars_parser)
    vars_parser.add_argument("--json", action="store_true", help="Print as JSON")
    vars_parser.set_defaults(func=cmd_variables)

    # unibuild graph
    graph_parser = subparsers.add_parser(
        "graph", help="Show the link/lipo actions for a universal binary"
    )
    add_common_args(graph_parser)
    graph_parser.add_argument("name", help="Target name")
    graph_parser.add_argument("sources", nargs="*", help="Link inputs")
    graph_parser.add_argument(
        "--format",
        choices=sorted(GENERATORS),
        default="json",
        help="Output format (default: json)",
    )
    graph_parser.add_argument(
        "--out-dir", default="bin", help="Root of output artifact paths (default: bin)"
    )
    graph_parser.add_argument(
        "-o", "--output-dir", help="Write the output file here instead of stdout"
    )
    graph_parser.set_defaults(func=cmd_graph)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the unibuild CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.verbose, args.debug)
    try:
        result: int = args.func(args)
    except UnibuildError as e:
        logger.error("%s", e)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
