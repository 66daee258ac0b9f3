"""
Unique temporary paths and best-effort cleanup.
"""

import secrets
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .logger import logger


TOKEN_BYTES = 8


def random_suffix() -> str:
    """Return a random hex token; 8 bytes gives 16 hex characters."""

    return secrets.token_hex(TOKEN_BYTES)


def scratch_path(
    prefix: str,
    suffix: str = '',
    parent: Optional[Path] = None
) -> Path:
    """
    Build a path that no other invocation will pick.

    The path is not created.

    Args:
        prefix: Leading part of the name, e.g. ``vlurp-extract-``
        suffix: Trailing part of the name, e.g. ``.tar.gz``
        parent: Directory to place it in; the system temp dir by default
    """

    base = Path(parent) if parent is not None else Path(tempfile.gettempdir())
    return base / f"{prefix}{random_suffix()}{suffix}"


def remove_quietly(path: Optional[Path]) -> bool:
    """
    Remove a file or directory tree, logging instead of raising.

    Returns:
        True if nothing remains at ``path`` afterwards
    """

    if path is None:
        return True

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
        logger.debug(f"Removed temporary artifact {path}")
        return True

    except OSError as e:
        logger.warning(f"Could not remove temporary artifact {path}: {e}")
        return False


__all__ = [
    "random_suffix",
    "scratch_path",
    "remove_quietly",
]
