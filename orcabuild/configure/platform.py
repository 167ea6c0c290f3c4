# SPDX-License-Identifier: MIT
"""Operating-system family detection.

The raw kernel name (as reported by ``uname -s``) is normalized into a
small set of families that the flag policy knows how to handle.
"""

from __future__ import annotations

import logging
import platform
from enum import Enum

logger = logging.getLogger(__name__)


class OsFamily(Enum):
    """Operating-system families recognized by the flag policy."""

    LINUX = "linux"
    MAC = "mac"
    CYGWIN = "cygwin"
    BSD = "bsd"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, os_raw: str) -> OsFamily:
        """Normalize a raw kernel name into an OsFamily.

        Matching is case-insensitive and substring based, checked in the
        order linux, darwin, cygwin, bsd. Anything else is UNKNOWN.

        Examples:
            >>> OsFamily.from_raw("Linux")
            <OsFamily.LINUX: 'linux'>
            >>> OsFamily.from_raw("Darwin")
            <OsFamily.MAC: 'mac'>
            >>> OsFamily.from_raw("CYGWIN_NT-10.0")
            <OsFamily.CYGWIN: 'cygwin'>
        """
        name = os_raw.lower()
        for needle, family in _OS_PATTERNS:
            if needle in name:
                return family
        return cls.UNKNOWN

    @property
    def is_verified(self) -> bool:
        """True for families the build has been tested on."""
        return self not in (OsFamily.BSD, OsFamily.UNKNOWN)


_OS_PATTERNS: tuple[tuple[str, OsFamily], ...] = (
    ("linux", OsFamily.LINUX),
    ("darwin", OsFamily.MAC),
    ("cygwin", OsFamily.CYGWIN),
    ("bsd", OsFamily.BSD),
)


def get_os_raw() -> str:
    """Return the raw kernel name of the running system (e.g. 'Linux')."""
    return platform.system()


def detect_os_family(os_raw: str) -> OsFamily:
    """Normalize os_raw, warning when the platform is not verified."""
    family = OsFamily.from_raw(os_raw)
    if not family.is_verified:
        logger.warning(
            "platform %r not verified; the build may need manual flags",
            os_raw,
        )
    return family
