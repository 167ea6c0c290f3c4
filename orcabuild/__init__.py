# SPDX-License-Identifier: MIT
"""
Orcabuild: build orchestrator for the orca livecoding environment.

Orcabuild detects the local C toolchain, composes the compiler flags for a
(configuration, target) pair, and runs a single full compilation.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used names for convenient imports
from orcabuild.configure.detect import ToolchainInfo, detect  # noqa: E402
from orcabuild.core.executor import InvocationResult, execute  # noqa: E402
from orcabuild.core.flags import FlagSet  # noqa: E402
from orcabuild.core.request import (  # noqa: E402
    BuildConfig,
    BuildOptions,
    BuildRequest,
    BuildTarget,
)
from orcabuild.toolchains.composer import compose  # noqa: E402

__all__ = [
    "__version__",
    "BuildConfig",
    "BuildOptions",
    "BuildRequest",
    "BuildTarget",
    "FlagSet",
    "InvocationResult",
    "ToolchainInfo",
    "compose",
    "detect",
    "execute",
]
