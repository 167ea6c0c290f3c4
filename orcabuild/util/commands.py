# SPDX-License-Identifier: MIT
"""Filesystem helpers for build output directories."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from orcabuild.core.errors import PathConflictError

logger = logging.getLogger(__name__)


def ensure_directory(path: Path | str) -> Path:
    """Create a directory if it does not exist.

    Args:
        path: Directory to create. Parent directories are created too.

    Returns:
        The directory path.

    Raises:
        PathConflictError: If path exists but is not a directory.
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise PathConflictError(path)
    if not path.exists():
        logger.info("Creating directory: %s", path)
        path.mkdir(parents=True, exist_ok=True)
    return path


def remove_tree(path: Path | str) -> bool:
    """Recursively remove a directory tree.

    Args:
        path: Directory to remove.

    Returns:
        True if something was removed, False if path did not exist.

    Raises:
        PathConflictError: If path exists but is not a directory.
    """
    path = Path(path)
    if not path.exists() and not path.is_symlink():
        logger.info("Directory does not exist: %s", path)
        return False
    if path.is_symlink() or not path.is_dir():
        raise PathConflictError(path)
    logger.info("Removing directory: %s", path)
    shutil.rmtree(path)
    return True
