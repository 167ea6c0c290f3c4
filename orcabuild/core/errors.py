# SPDX-License-Identifier: MIT
"""Custom exceptions for orcabuild.

All orcabuild exceptions inherit from OrcaBuildError. Each carries the
process exit code the CLI should return when it escapes a command.
"""

from __future__ import annotations

from pathlib import Path


class OrcaBuildError(Exception):
    """Base class for all orcabuild exceptions.

    Attributes:
        message: The error message.
        exit_code: Exit status the CLI reports for this error.
    """

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(OrcaBuildError):
    """A build request contains a value outside its allowed set."""


class InvalidConfigError(ValidationError):
    """Unknown build configuration.

    Attributes:
        value: The rejected configuration name.
    """

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"invalid config: {value!r} (expected debug or release)")


class InvalidTargetError(ValidationError):
    """Unknown build target.

    Attributes:
        value: The rejected target name.
    """

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"invalid target: {value!r} (expected orca, cli or tui)")


class PathConflictError(OrcaBuildError):
    """An output path exists but is not a directory.

    Attributes:
        path: The conflicting path.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"path exists but is not a directory: {self.path}")


class CompileError(OrcaBuildError):
    """The compiler exited with a non-zero status.

    Attributes:
        returncode: The compiler's exit status.
    """

    def __init__(self, returncode: int, message: str | None = None) -> None:
        self.returncode = returncode
        # Signals show up as negative return codes
        self.exit_code = returncode if returncode > 0 else 1
        super().__init__(message or f"compilation failed with exit status {returncode}")
