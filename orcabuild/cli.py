# SPDX-License-Identifier: MIT
"""Command-line interface for orcabuild."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from orcabuild.configure.detect import ToolchainInfo, detect
from orcabuild.configure.platform import get_os_raw
from orcabuild.core.errors import OrcaBuildError
from orcabuild.core.executor import execute
from orcabuild.core.request import BuildOptions, BuildRequest
from orcabuild.toolchains.composer import compose
from orcabuild.util.commands import remove_tree

# Set up logging
logger = logging.getLogger("orcabuild")

DEFAULT_COMPILER = "cc"
DEFAULT_BUILD_DIR = "build"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def resolve_compiler(override: str | None = None) -> str:
    """Pick the compiler executable: -c, then $CC, then 'cc'."""
    if override is not None:
        return override
    return os.environ.get("CC") or DEFAULT_COMPILER


def default_build_dir() -> str:
    return os.environ.get("ORCABUILD_BUILD_DIR") or DEFAULT_BUILD_DIR


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    """Collect the build switches from parsed arguments."""
    return BuildOptions(
        verbose=args.verbose,
        protections_enabled=args.protections,
        pie_enabled=args.pie,
        stats_enabled=args.stats,
        compiler_override=args.compiler,
    )


def format_info(info: ToolchainInfo) -> str:
    """Render detected toolchain facts as labeled lines."""
    lines = [
        f"os_family: {info.os_family.value}",
        f"compiler_path: {info.compiler_path}",
        f"compiler_id: {info.compiler_id.value}",
        f"compiler_version: {info.compiler_version or ''}",
        f"linker: {info.linker.value}",
    ]
    return "\n".join(lines)


def cmd_build(args: argparse.Namespace) -> int:
    """Compile one configuration of one target.

    This command:
    1. Validates the config and target names
    2. Detects the toolchain
    3. Composes the flags and runs the compiler
    """
    setup_logging(args.verbose)

    options = options_from_args(args)
    request = BuildRequest.from_names(args.config, args.target, options)

    toolchain = detect(resolve_compiler(options.compiler_override), get_os_raw())
    flags = compose(toolchain, request)
    result = execute(flags, Path(args.build_dir), request.config.value, options)

    logger.info("Built %s", result.output_path)
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    """Remove the build directory.

    Removing a build directory that does not exist is not an error.
    """
    setup_logging(args.verbose)

    if remove_tree(Path(args.build_dir)):
        logger.info("Clean complete")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show the detected toolchain."""
    setup_logging(args.verbose)

    info = detect(resolve_compiler(args.compiler), get_os_raw())
    print(format_info(info))
    return 0


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def add_common_args(parser: argparse.ArgumentParser, *, suppress: bool = False) -> None:
    """Add the global options to a parser.

    Subcommand parsers pass suppress=True so an option given before the
    command is not reset by the subcommand's defaults.
    """

    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Print compiler invocations",
    )
    parser.add_argument(
        "-c",
        "--compiler",
        metavar="NAME",
        default=default(None),
        help="Compiler executable (default: $CC, else cc)",
    )
    parser.add_argument(
        "-d",
        "--protections",
        action="store_true",
        default=default(False),
        help="Enable hardening flags (fortify, stack protector)",
    )
    parser.add_argument(
        "-p",
        "--pie",
        action="store_true",
        default=default(False),
        help="Build a position-independent executable",
    )
    parser.add_argument(
        "-s",
        "--stats",
        action="store_true",
        default=default(False),
        help="Print build time and output size",
    )
    parser.add_argument(
        "-B",
        "--build-dir",
        default=default(default_build_dir()),
        help="Build directory (default: build)",
    )


def build_parser() -> ArgumentParser:
    """Create the orcabuild argument parser."""
    parser = ArgumentParser(
        prog="orcabuild",
        description="Build the orca livecoding environment from source.",
        epilog="Run 'orcabuild <command> --help' for command-specific help.",
    )
    from orcabuild import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    add_common_args(parser)

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # orcabuild build
    build = subparsers.add_parser("build", help="Compile a target")
    add_common_args(build, suppress=True)
    build.add_argument("config", help="Build configuration: debug or release")
    build.add_argument("target", help="Target: orca (alias: cli) or tui")
    build.set_defaults(func=cmd_build)

    # orcabuild clean
    clean = subparsers.add_parser("clean", help="Remove the build directory")
    add_common_args(clean, suppress=True)
    clean.set_defaults(func=cmd_clean)

    # orcabuild info
    info = subparsers.add_parser("info", help="Show the detected toolchain")
    add_common_args(info, suppress=True)
    info.set_defaults(func=cmd_info)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the orcabuild CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: a command is required", file=sys.stderr)
        return 1

    try:
        result: int = args.func(args)
    except OrcaBuildError as e:
        logger.error("%s", e.message)
        return e.exit_code
    return result


if __name__ == "__main__":
    sys.exit(main())
