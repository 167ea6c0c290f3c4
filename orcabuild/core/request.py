# SPDX-License-Identifier: MIT
"""Build request model.

A BuildRequest captures the user's intent for one build: which
configuration, which front-end, and which optional switches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from orcabuild.core.errors import InvalidConfigError, InvalidTargetError


class BuildConfig(Enum):
    """Build configuration."""

    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: str) -> BuildConfig:
        """Parse a configuration name.

        Raises:
            InvalidConfigError: If value is not 'debug' or 'release'.
        """
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigError(value) from None


class BuildTarget(Enum):
    """Front-end to build."""

    ORCA = "orca"
    TUI = "tui"

    @classmethod
    def parse(cls, value: str) -> BuildTarget:
        """Parse a target name. 'cli' is an alias of 'orca'.

        Raises:
            InvalidTargetError: If value is not a known target.
        """
        value = TARGET_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            raise InvalidTargetError(value) from None


TARGET_ALIASES: dict[str, str] = {"cli": "orca"}


@dataclass(frozen=True)
class BuildOptions:
    """Optional switches for a build.

    Attributes:
        verbose: Echo the compiler command line before running it.
        protections_enabled: Add fortify and stack-protector hardening.
        pie_enabled: Build a position-independent executable.
        stats_enabled: Report build time and output size.
        compiler_override: Compiler executable chosen on the command line.
    """

    verbose: bool = False
    protections_enabled: bool = False
    pie_enabled: bool = False
    stats_enabled: bool = False
    compiler_override: str | None = None


@dataclass(frozen=True)
class BuildRequest:
    """The user's intent for a single build."""

    config: BuildConfig
    target: BuildTarget
    options: BuildOptions = field(default_factory=BuildOptions)

    @classmethod
    def from_names(
        cls, config: str, target: str, options: BuildOptions | None = None
    ) -> BuildRequest:
        """Create a request from command-line tokens.

        Raises:
            InvalidConfigError: If config is unknown.
            InvalidTargetError: If target is unknown.
        """
        return cls(
            config=BuildConfig.parse(config),
            target=BuildTarget.parse(target),
            options=options or BuildOptions(),
        )
