# SPDX-License-Identifier: MIT
"""Flag composition.

compose() turns detected toolchain facts and a build request into the
FlagSet for one compiler invocation. It is a pure function: the same
inputs always give an equal FlagSet.
"""

from __future__ import annotations

import logging
from functools import reduce
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from orcabuild.core.errors import InvalidConfigError, InvalidTargetError
from orcabuild.core.flags import FlagDelta, FlagSet
from orcabuild.core.request import BuildConfig, BuildTarget
from orcabuild.toolchains.policy import POLICY, PolicyContext, matching_rules

if TYPE_CHECKING:
    from orcabuild.configure.detect import ToolchainInfo
    from orcabuild.core.request import BuildRequest
    from orcabuild.toolchains.policy import Rule

logger = logging.getLogger(__name__)

# Shared core, compiled first for every target
CORE_SOURCES: tuple[str, ...] = ("gbuffer.c", "field.c", "vmio.c", "sim.c")

# Target-specific sources; the entry point is always last
TARGET_SOURCES: dict[BuildTarget, tuple[str, ...]] = {
    BuildTarget.ORCA: ("cli_main.c",),
    BuildTarget.TUI: (
        "osc_out.c",
        "term_util.c",
        "sysmisc.c",
        "thirdparty/oso.c",
        "tui_main.c",
    ),
}

OUTPUT_NAMES: dict[BuildTarget, str] = {
    BuildTarget.ORCA: "orca",
    BuildTarget.TUI: "tui",
}


def sources_for(target: BuildTarget, source_dir: str | None = None) -> tuple[str, ...]:
    """Return the source files for a target, core sources first.

    Args:
        target: Target to build.
        source_dir: Optional directory prefix for every source path.
    """
    sources = CORE_SOURCES + TARGET_SOURCES[target]
    if source_dir:
        return tuple(str(PurePosixPath(source_dir, s)) for s in sources)
    return sources


def _check_request(request: BuildRequest) -> None:
    if not isinstance(request.config, BuildConfig):
        raise InvalidConfigError(request.config)
    if not isinstance(request.target, BuildTarget):
        raise InvalidTargetError(request.target)


def compose(
    toolchain: ToolchainInfo,
    request: BuildRequest,
    *,
    source_dir: str | None = None,
    policy: tuple[Rule, ...] = POLICY,
) -> FlagSet:
    """Compose the FlagSet for a build.

    Args:
        toolchain: Detected toolchain facts.
        request: The build request.
        source_dir: Optional directory prefix for source files.
        policy: Rule table to apply (defaults to POLICY).

    Returns:
        The composed FlagSet.

    Raises:
        InvalidConfigError: If request.config is not a BuildConfig.
        InvalidTargetError: If request.target is not a BuildTarget.
    """
    _check_request(request)

    ctx = PolicyContext.create(toolchain, request)
    rules = matching_rules(ctx, policy)
    logger.debug("applying rules: %s", ", ".join(rule.name for rule in rules))

    flags = reduce(lambda acc, rule: acc + rule.delta, rules, FlagDelta())
    return FlagSet(
        compiler=toolchain.compiler_path,
        flags=flags,
        sources=sources_for(request.target, source_dir),
        output_name=OUTPUT_NAMES[request.target],
    )
