# SPDX-License-Identifier: MIT
"""Typed compiler flag sets.

Flags are kept in structured fields (defines, warnings, optimization,
sanitizers, libraries, ...) while they are being composed, and are only
turned into argument vectors when the compiler is invoked.

A FlagDelta is one policy rule's contribution; a FlagSet is the result
of folding all matching deltas together with the source list and the
output name.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def merge_unique(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate flag groups, dropping repeats (first occurrence wins).

    Examples:
        >>> merge_unique(["-O2", "-Wall"], ["-O2", "-g0"])
        ('-O2', '-Wall', '-g0')
    """
    result: list[str] = []
    seen: set[str] = set()
    for group in groups:
        for flag in group:
            if flag not in seen:
                seen.add(flag)
                result.append(flag)
    return tuple(result)


@dataclass(frozen=True)
class FlagDelta:
    """Flags contributed by a single policy rule.

    Attributes:
        language: Language mode flags (standard, pipe, input charset).
        warnings: Warning and warning-as-error flags.
        linker_select: Flags that choose the linker.
        codegen: Code generation flags (hardening, PIE, LTO).
        defines: Macro definitions, without the -D prefix.
        debug_info: Debug symbol flag; a later rule replaces an earlier one.
        optimization: Optimization flag; a later rule replaces an earlier one.
        sanitizers: Sanitizer names, without the -fsanitize= prefix.
        link_flags: Flags for the link step.
        libraries: Library names, without the -l prefix.
    """

    language: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    linker_select: tuple[str, ...] = ()
    codegen: tuple[str, ...] = ()
    defines: tuple[str, ...] = ()
    debug_info: str | None = None
    optimization: str | None = None
    sanitizers: tuple[str, ...] = ()
    link_flags: tuple[str, ...] = ()
    libraries: tuple[str, ...] = ()

    def __add__(self, other: FlagDelta) -> FlagDelta:
        if not isinstance(other, FlagDelta):
            return NotImplemented
        merged: dict[str, object] = {}
        for f in fields(self):
            mine = getattr(self, f.name)
            theirs = getattr(other, f.name)
            if isinstance(mine, tuple):
                merged[f.name] = merge_unique(mine, theirs)
            else:
                merged[f.name] = theirs if theirs is not None else mine
        return FlagDelta(**merged)  # type: ignore[arg-type]


@dataclass(frozen=True)
class FlagSet:
    """Everything needed to run one compiler invocation.

    Attributes:
        compiler: Compiler executable.
        flags: Composed compiler and linker flags.
        sources: Source files, in compile order.
        output_name: Name of the executable to produce.
    """

    compiler: str
    flags: FlagDelta
    sources: tuple[str, ...]
    output_name: str

    @property
    def defines(self) -> tuple[str, ...]:
        return self.flags.defines

    @property
    def sanitizers(self) -> tuple[str, ...]:
        return self.flags.sanitizers

    @property
    def optimization(self) -> str | None:
        return self.flags.optimization

    @property
    def libraries(self) -> tuple[str, ...]:
        return self.flags.libraries

    @property
    def compiler_flags(self) -> list[str]:
        """Serialize the flag fields into compiler arguments.

        The order is fixed: language, warnings, linker selection, codegen,
        defines, debug info, optimization, sanitizers, link flags. Codegen
        overrides such as -fno-stack-protector therefore always follow the
        universal warning set.
        """
        d = self.flags
        args: list[str] = [*d.language, *d.warnings, *d.linker_select, *d.codegen]
        args.extend(f"-D{name}" for name in d.defines)
        if d.debug_info:
            args.append(d.debug_info)
        if d.optimization:
            args.append(d.optimization)
        args.extend(f"-fsanitize={name}" for name in d.sanitizers)
        args.extend(d.link_flags)
        return args

    @property
    def library_flags(self) -> list[str]:
        """Serialize libraries into -l arguments."""
        return [f"-l{name}" for name in self.flags.libraries]

    def command(self, output_path: str) -> list[str]:
        """Build the full argument vector for this flag set.

        Libraries come last so the linker resolves them after the sources.
        """
        return [
            self.compiler,
            *self.compiler_flags,
            "-o",
            output_path,
            *self.sources,
            *self.library_flags,
        ]
