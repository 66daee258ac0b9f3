"""
Tarball extraction into a private scratch workspace.

Hosting providers wrap every entry in one synthetic root directory named
after the revision. That segment is always stripped so paths in the
workspace are relative to the repository root.
"""

import asyncio
import functools
import gzip
import tarfile
import zlib
from pathlib import Path
from typing import Callable, Optional

from ..infrastructure.error_handler import ExtractionFailed, FilesystemError
from ..infrastructure.logger import logger
from ..infrastructure.scratch import remove_quietly, scratch_path


WORKSPACE_PREFIX = 'vlurp-extract-'

PathFilter = Callable[[str], bool]


def normalize_entry_path(path: str) -> str:
    """
    Map a raw archive entry name to a repository-relative path.

    Drops a leading ``/`` and then the first path segment. Returns an
    empty string for the synthetic root itself.
    """

    normalized = path.lstrip('/')
    _, separator, rest = normalized.partition('/')
    if not separator:
        return ''
    return rest.rstrip('/')


class ArchiveExtractor:
    """Unpacks gzip tarballs with the leading directory stripped."""

    def __init__(self, temp_dir: Optional[Path] = None):
        self.temp_dir = temp_dir

    async def extract(self, tarball: Path, path_filter: Optional[PathFilter] = None) -> Path:
        """
        Unpack ``tarball`` into a fresh workspace.

        Args:
            tarball: Path of the downloaded archive
            path_filter: Optional predicate over repository-relative paths;
                non-directory entries it rejects are never written

        Returns:
            Path of the workspace; the caller owns and removes it

        Raises:
            ExtractionFailed: If the archive is corrupt or unsafe
            FilesystemError: If the workspace cannot be written
        """
        return await asyncio.to_thread(self.extract_sync, tarball, path_filter)

    def extract_sync(self, tarball: Path, path_filter: Optional[PathFilter] = None) -> Path:
        workspace = scratch_path(WORKSPACE_PREFIX, parent=self.temp_dir)

        try:
            workspace.mkdir(parents=True)
            with tarfile.open(tarball, 'r:*') as archive:
                archive.extractall(
                    workspace,
                    filter=functools.partial(self._strip_member, path_filter=path_filter)
                )

        except (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile) as e:
            remove_quietly(workspace)
            raise ExtractionFailed(f"Could not extract {tarball}", e) from e

        except OSError as e:
            remove_quietly(workspace)
            raise FilesystemError(f"Could not write workspace {workspace}", e) from e

        logger.debug(f"Extracted {tarball} into {workspace}")
        return workspace

    @staticmethod
    def _strip_member(
        member: tarfile.TarInfo,
        dest_path: str,
        path_filter: Optional[PathFilter] = None
    ) -> Optional[tarfile.TarInfo]:
        name = normalize_entry_path(member.name)
        if not name:
            return None

        changes = {'name': name}
        if member.islnk():
            link = normalize_entry_path(member.linkname)
            if not link:
                return None
            changes['linkname'] = link

        if path_filter is not None and not member.isdir():
            if not path_filter(name):
                return None
            if member.islnk() and not path_filter(changes['linkname']):
                return None

        stripped = member.replace(**changes, deep=False)
        try:
            return tarfile.data_filter(stripped, dest_path)
        except tarfile.FilterError:
            if member.issym() or member.islnk():
                logger.warning(f"Skipping link that points outside the repository: {name}")
                return None
            raise


__all__ = [
    "ArchiveExtractor",
    "normalize_entry_path",
]
