# SPDX-License-Identifier: MIT
"""Compiler invocation.

Runs the compiler for a composed FlagSet, writing the executable to
<output_dir_root>/<config_name>/<output_name>, and optionally reports
how long the build took and how large the result is.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from orcabuild.core.errors import CompileError
from orcabuild.util.commands import ensure_directory

if TYPE_CHECKING:
    from orcabuild.core.flags import FlagSet
    from orcabuild.core.request import BuildOptions

logger = logging.getLogger(__name__)

# Exit status reported when the compiler could not be started
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of a successful compiler run.

    Attributes:
        returncode: Compiler exit status (always 0 here).
        output_path: Path of the produced executable.
        elapsed: Wall-clock seconds, rounded to milliseconds, if timed.
        output_size: Size of the executable in bytes, if measured.
    """

    returncode: int
    output_path: Path
    elapsed: float | None = None
    output_size: int | None = None


def output_path_for(output_dir_root: Path | str, config_name: str, name: str) -> Path:
    """Return the artifact path for a config and output name."""
    return Path(output_dir_root) / config_name / name


def execute(
    flags: FlagSet,
    output_dir_root: Path | str,
    config_name: str,
    options: BuildOptions,
    *,
    cwd: Path | str | None = None,
) -> InvocationResult:
    """Run the compiler for a FlagSet.

    Args:
        flags: Composed flags, sources and output name.
        output_dir_root: Build root directory (e.g. 'build').
        config_name: Configuration subdirectory (e.g. 'debug').
        options: Build options; verbose and stats_enabled are honored here.
        cwd: Working directory for the compiler (default: current dir).

    Returns:
        InvocationResult for the successful build.

    Raises:
        PathConflictError: If an output directory path is not a directory.
        CompileError: If the compiler fails or cannot be started.
    """
    root = Path(output_dir_root)
    if cwd is not None:
        # The compiler runs inside cwd, so the output path must not be relative
        root = (Path(cwd) / root).resolve()
    ensure_directory(root)
    ensure_directory(root / config_name)

    output_path = output_path_for(root, config_name, flags.output_name)
    cmd = flags.command(str(output_path))

    if options.verbose:
        logger.info("Running: %s", shlex.join(cmd))

    start = time.perf_counter()
    try:
        result = subprocess.run(cmd, cwd=cwd)
    except OSError as e:
        raise CompileError(
            COMMAND_NOT_FOUND, f"failed to run {flags.compiler}: {e}"
        ) from e
    elapsed = round(time.perf_counter() - start, 3)

    if result.returncode != 0:
        raise CompileError(result.returncode)

    if not options.stats_enabled:
        return InvocationResult(returncode=0, output_path=output_path)

    try:
        size = output_path.stat().st_size
    except OSError as e:
        raise CompileError(
            1, f"compiler produced no output at {output_path}: {e}"
        ) from e
    print(f"time: {elapsed:.3f}s")
    print(f"size: {size} bytes")
    return InvocationResult(
        returncode=0, output_path=output_path, elapsed=elapsed, output_size=size
    )
