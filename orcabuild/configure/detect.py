# SPDX-License-Identifier: MIT
"""Toolchain detection for orcabuild.

Probes the configured compiler executable to find out which compiler it
is, which version it reports, and whether the alternate fast linker
(LLVM lld) can be used. Detection never fails the run: anything that
cannot be determined is left empty and reported as a warning.

Example:
    info = detect("cc", get_os_raw())
    print(info.compiler_id, info.compiler_version, info.linker)
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum

from orcabuild.configure.platform import OsFamily, detect_os_family

logger = logging.getLogger(__name__)

# Executable name of the alternate fast linker
LLD_EXECUTABLE = "ld.lld"

# Seconds to wait for a compiler probe
PROBE_TIMEOUT = 5

_CLANG_VERSION_RE = re.compile(r"version (\d+\.\d+\.\d+)")


class CompilerId(Enum):
    """Compiler families the flag policy distinguishes."""

    CLANG = "clang"
    GCC = "gcc"
    UNKNOWN = "unknown"


class Linker(Enum):
    """Linker used for the final link step."""

    DEFAULT = "default"
    LLD = "lld"


@dataclass(frozen=True)
class ToolchainInfo:
    """Detected facts about the build environment.

    Attributes:
        os_family: Normalized operating-system family.
        compiler_path: The compiler executable that was probed.
        compiler_id: Compiler family, UNKNOWN when undetected.
        compiler_version: Version string, None when undetected.
        linker: Linker the build will use.
    """

    os_family: OsFamily
    compiler_path: str
    compiler_id: CompilerId = CompilerId.UNKNOWN
    compiler_version: str | None = None
    linker: Linker = Linker.DEFAULT

    @property
    def is_mac(self) -> bool:
        return self.os_family is OsFamily.MAC

    @property
    def has_lld(self) -> bool:
        return self.linker is Linker.LLD


@dataclass(frozen=True)
class CompilerIdentity:
    """Result of parsing a compiler's self-reported version text."""

    compiler_id: CompilerId
    version: str | None = None


def parse_clang_banner(banner: str) -> CompilerIdentity | None:
    """Parse the output of ``clang --version``.

    Grammar: the first line containing the token ``clang`` identifies the
    compiler. The version is the ``major.minor.patch`` token that directly
    follows ``version `` on that same line.

    Args:
        banner: Full ``--version`` output.

    Returns:
        A clang CompilerIdentity (version None if it could not be read),
        or None if the banner is not a clang banner.

    Examples:
        >>> parse_clang_banner("clang version 17.0.6\\nTarget: x86_64")
        CompilerIdentity(compiler_id=<CompilerId.CLANG: 'clang'>, version='17.0.6')
        >>> parse_clang_banner("gcc (GCC) 13.2.1") is None
        True
    """
    for line in banner.splitlines():
        if "clang" not in line:
            continue
        match = _CLANG_VERSION_RE.search(line)
        return CompilerIdentity(CompilerId.CLANG, match.group(1) if match else None)
    return None


def parse_gcc_version(output: str | None) -> CompilerIdentity | None:
    """Parse the output of ``gcc -dumpfullversion``.

    Any non-empty output counts as a gcc-compatible compiler; the version
    is the output itself with surrounding whitespace removed.
    """
    if output is None:
        return None
    version = output.strip()
    if not version:
        return None
    return CompilerIdentity(CompilerId.GCC, version)


def _probe(compiler: str, flag: str) -> str | None:
    """Run ``compiler flag`` and return its stdout, or None on failure."""
    try:
        result = subprocess.run(
            [compiler, flag],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=PROBE_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.debug("probe %s %s failed: %s", compiler, flag, e)
        return None
    if result.returncode != 0:
        logger.debug("probe %s %s exited %d", compiler, flag, result.returncode)
        return None
    return result.stdout


def identify_compiler(compiler: str) -> CompilerIdentity:
    """Identify the compiler behind an executable name or path.

    Tries the clang banner first, then the gcc full-version query.
    """
    banner = _probe(compiler, "--version")
    if banner is not None:
        identity = parse_clang_banner(banner)
        if identity is not None:
            return identity

    identity = parse_gcc_version(_probe(compiler, "-dumpfullversion"))
    if identity is not None:
        return identity

    return CompilerIdentity(CompilerId.UNKNOWN)


def detect_linker(os_family: OsFamily) -> Linker:
    """Pick the linker, preferring lld where it is installed.

    lld is never used on macOS.
    """
    if os_family is OsFamily.MAC:
        return Linker.DEFAULT
    if shutil.which(LLD_EXECUTABLE) is not None:
        return Linker.LLD
    return Linker.DEFAULT


def detect(compiler_path: str, os_raw: str) -> ToolchainInfo:
    """Detect the toolchain for a compiler on a given platform.

    Args:
        compiler_path: Compiler executable name or path.
        os_raw: Raw kernel name, e.g. from get_os_raw().

    Returns:
        The detected ToolchainInfo. Never raises.
    """
    os_family = detect_os_family(os_raw)
    identity = identify_compiler(compiler_path)

    if identity.compiler_id is CompilerId.UNKNOWN:
        logger.warning("failed to detect compiler type for %s", compiler_path)
    if identity.version is None:
        logger.warning("failed to detect compiler version for %s", compiler_path)

    info = ToolchainInfo(
        os_family=os_family,
        compiler_path=compiler_path,
        compiler_id=identity.compiler_id,
        compiler_version=identity.version,
        linker=detect_linker(os_family),
    )
    logger.debug("detected %s", info)
    return info
