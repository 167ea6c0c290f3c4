# SPDX-License-Identifier: MIT
"""Flag policy table.

Every platform-, configuration-, target- and option-specific flag decision
lives in POLICY: an ordered list of named rules, each a predicate over a
PolicyContext and the FlagDelta it contributes when it matches. The
composer folds the matching deltas in table order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from orcabuild.configure.detect import CompilerId, Linker
from orcabuild.configure.platform import OsFamily
from orcabuild.core.flags import FlagDelta
from orcabuild.core.request import BuildConfig, BuildOptions, BuildTarget

if TYPE_CHECKING:
    from collections.abc import Callable

    from orcabuild.configure.detect import ToolchainInfo
    from orcabuild.core.request import BuildRequest


@dataclass(frozen=True)
class PolicyContext:
    """The facts a policy rule may look at."""

    os_family: OsFamily
    compiler_id: CompilerId
    linker: Linker
    config: BuildConfig
    target: BuildTarget
    options: BuildOptions

    @classmethod
    def create(cls, toolchain: ToolchainInfo, request: BuildRequest) -> PolicyContext:
        return cls(
            os_family=toolchain.os_family,
            compiler_id=toolchain.compiler_id,
            linker=toolchain.linker,
            config=request.config,
            target=request.target,
            options=request.options,
        )

    @property
    def is_mac(self) -> bool:
        return self.os_family is OsFamily.MAC

    @property
    def has_lld(self) -> bool:
        return self.linker is Linker.LLD


@dataclass(frozen=True)
class Rule:
    """A named policy rule.

    Attributes:
        name: Identifier used in logs and tests.
        when: Predicate deciding whether the rule applies.
        delta: Flags contributed when it applies.
    """

    name: str
    when: Callable[[PolicyContext], bool]
    delta: FlagDelta

    def applies(self, ctx: PolicyContext) -> bool:
        return bool(self.when(ctx))


def _always(ctx: PolicyContext) -> bool:
    return True


def _debug(ctx: PolicyContext) -> bool:
    return ctx.config is BuildConfig.DEBUG


def _release(ctx: PolicyContext) -> bool:
    return ctx.config is BuildConfig.RELEASE


def _tui(ctx: PolicyContext) -> bool:
    return ctx.target is BuildTarget.TUI


BASELINE = FlagDelta(
    language=("-std=c99", "-pipe", "-finput-charset=UTF-8"),
    warnings=(
        "-Wall",
        "-Wpedantic",
        "-Wextra",
        "-Wwrite-strings",
        "-Werror=implicit-function-declaration",
        "-Werror=implicit-int",
        "-Werror=incompatible-pointer-types",
        "-Werror=int-conversion",
    ),
)

# The two PIE link flags must never be mixed: -Wl,-pie under lld produces
# a binary that crashes before reaching main.
PIE_LINK_LLD = "-Wl,-z,notext"
PIE_LINK_DEFAULT = "-Wl,-pie"

POLICY: tuple[Rule, ...] = (
    Rule("baseline", _always, BASELINE),
    Rule("lld-select", lambda c: c.has_lld, FlagDelta(linker_select=("-fuse-ld=lld",))),
    Rule(
        "protections",
        lambda c: c.options.protections_enabled,
        FlagDelta(
            codegen=("-fstack-protector-strong",),
            defines=("_FORTIFY_SOURCE=2",),
        ),
    ),
    Rule("pie", lambda c: c.options.pie_enabled, FlagDelta(codegen=("-fpie",))),
    Rule(
        "pie-link-lld",
        lambda c: c.options.pie_enabled and c.has_lld,
        FlagDelta(link_flags=(PIE_LINK_LLD,)),
    ),
    Rule(
        "pie-link-default",
        lambda c: c.options.pie_enabled and not c.has_lld,
        FlagDelta(link_flags=(PIE_LINK_DEFAULT,)),
    ),
    Rule(
        "debug",
        _debug,
        FlagDelta(
            defines=("DEBUG",),
            debug_info="-ggdb",
            sanitizers=("address", "undefined"),
        ),
    ),
    # macOS compilers have no -Og
    Rule("debug-opt-mac", lambda c: _debug(c) and c.is_mac, FlagDelta(optimization="-O1")),
    Rule("debug-opt", lambda c: _debug(c) and not c.is_mac, FlagDelta(optimization="-Og")),
    Rule(
        "release",
        _release,
        FlagDelta(defines=("NDEBUG",), debug_info="-g0", optimization="-O2"),
    ),
    Rule(
        "release-no-protections",
        lambda c: _release(c) and not c.options.protections_enabled,
        FlagDelta(codegen=("-fno-stack-protector",)),
    ),
    # No strip step on macOS yet
    Rule(
        "release-strip",
        lambda c: _release(c) and not c.is_mac,
        FlagDelta(codegen=("-flto",), link_flags=("-s",)),
    ),
    Rule("tui", _tui, FlagDelta(defines=("_XOPEN_SOURCE_EXTENDED=1",))),
    Rule(
        "tui-curses-mac",
        lambda c: _tui(c) and c.is_mac,
        FlagDelta(libraries=("ncurses",)),
    ),
    Rule(
        "tui-curses",
        lambda c: _tui(c) and not c.is_mac,
        FlagDelta(libraries=("ncursesw",)),
    ),
)


def matching_rules(
    ctx: PolicyContext, policy: tuple[Rule, ...] = POLICY
) -> list[Rule]:
    """Return the rules of policy that apply to ctx, in table order."""
    return [rule for rule in policy if rule.applies(ctx)]
