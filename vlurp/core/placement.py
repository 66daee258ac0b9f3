"""
Placement of a filtered file set into the target directory.

The target is modified only once the new content is fully staged next
to it; the previous content is then swapped out in one rename.
"""

import asyncio
import os
import shutil
import stat
from pathlib import Path
from typing import List, Optional, Sequence

from ..models import PlacementState, TargetState, TargetStatus
from ..infrastructure.error_handler import FilesystemError, TargetCollision
from ..infrastructure.logger import logger
from ..infrastructure.scratch import remove_quietly, scratch_path


STAGING_PREFIX = '.vlurp-stage-'


def count_entries(path: Path) -> int:
    """Recursively count files and directories below ``path``; 0 if absent."""

    path = Path(path)
    try:
        if not path.is_dir():
            return 0
        return sum(len(dirs) + len(files) for _, dirs, files in os.walk(path))
    except OSError:
        return 0


def check_target(path: Path) -> TargetStatus:
    """Stat the target once and classify it."""

    path = Path(path)
    try:
        info = path.lstat()
    except FileNotFoundError:
        return TargetStatus(TargetState.ABSENT, 0)
    except OSError as e:
        raise FilesystemError(f"Could not inspect {path}", e) from e

    if not stat.S_ISDIR(info.st_mode):
        # A file or link squatting on the target counts as one entry
        return TargetStatus(TargetState.OCCUPIED, 1)

    file_count = count_entries(path)
    if file_count == 0:
        return TargetStatus(TargetState.EMPTY, 0)
    return TargetStatus(TargetState.OCCUPIED, file_count)


####
##      PLACEMENT MANAGER
#####
class PlacementManager:
    """
    State machine for putting files on disk.

    checking_target -> clear | colliding -> placing -> done | failed
    """

    def __init__(self, target: Path, max_concurrent_copies: int = 8):
        self.target = Path(target).absolute()
        self.max_concurrent_copies = max_concurrent_copies
        self.state = PlacementState.CHECKING_TARGET
        self.status: Optional[TargetStatus] = None
        self.force_overwrite = False

    def _transition(self, state: PlacementState) -> None:
        logger.debug(f"Placement {self.target}: {self.state.value} -> {state.value}")
        self.state = state

    def begin(self, force_overwrite: bool = False) -> TargetStatus:
        """
        Run the checking-target step.

        Raises:
            TargetCollision: If the target is occupied and overwrite
                was not authorized
        """
        self.force_overwrite = force_overwrite
        self.status = check_target(self.target)

        if self.status.state is TargetState.OCCUPIED:
            self._transition(PlacementState.COLLIDING)
            if not force_overwrite:
                self._transition(PlacementState.FAILED)
                raise TargetCollision(self.target, self.status.file_count)
            logger.debug(
                f"Overwriting {self.target} ({self.status.file_count} existing entries)"
            )
        else:
            self._transition(PlacementState.CLEAR)

        return self.status

    async def place(self, workspace: Path, selected: Sequence[str]) -> List[str]:
        """
        Copy ``selected`` paths from ``workspace`` into the target.

        Args:
            workspace: Extraction workspace holding the files
            selected: Repository-relative POSIX paths to materialize

        Returns:
            The paths that were placed

        Raises:
            FilesystemError: If staging, removal or the final rename fails
        """
        if self.state not in (PlacementState.CLEAR, PlacementState.COLLIDING):
            raise RuntimeError(f"Cannot place files from state {self.state.value}")

        self._transition(PlacementState.PLACING)
        staging = scratch_path(STAGING_PREFIX, parent=self.target.parent)

        try:
            self.target.parent.mkdir(parents=True, exist_ok=True)
            staging.mkdir()
            await self._copy_concurrently(workspace, staging, selected)
            self._swap_in(staging)

        except OSError as e:
            self._transition(PlacementState.FAILED)
            raise FilesystemError(f"Could not place files into {self.target}", e) from e

        except BaseException:
            self._transition(PlacementState.FAILED)
            raise

        finally:
            if staging.exists():
                remove_quietly(staging)

        self._transition(PlacementState.DONE)
        return list(selected)

    def _swap_in(self, staging: Path) -> None:
        # Re-check: the target may have changed since begin()
        current = check_target(self.target)
        if current.state is TargetState.OCCUPIED and not self.force_overwrite:
            raise TargetCollision(self.target, current.file_count)

        if current.state is not TargetState.ABSENT:
            if self.target.is_dir() and not self.target.is_symlink():
                shutil.rmtree(self.target)
            else:
                self.target.unlink()

        os.replace(staging, self.target)

    async def _copy_concurrently(
        self,
        workspace: Path,
        staging: Path,
        selected: Sequence[str]
    ) -> None:
        semaphore = asyncio.Semaphore(self.max_concurrent_copies)

        async def copy_one(relative: str) -> None:
            async with semaphore:
                await asyncio.to_thread(copy_entry, workspace, staging, relative)

        # Every copy settles before the first failure is raised
        results = await asyncio.gather(
            *(copy_one(relative) for relative in selected),
            return_exceptions=True
        )
        for relative, result in zip(selected, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to copy {relative}: {result}")
                raise result


def copy_entry(source_root: Path, dest_root: Path, relative: str) -> None:
    """Copy one file or symlink, creating parent directories on demand."""

    source = source_root / relative
    dest = dest_root / relative

    # Concurrent copies may race to create the same parent
    dest.parent.mkdir(parents=True, exist_ok=True)

    if source.is_symlink():
        os.symlink(os.readlink(source), dest)
    elif source.is_dir():
        dest.mkdir(exist_ok=True)
    else:
        shutil.copy2(source, dest)


__all__ = [
    "PlacementManager",
    "check_target",
    "copy_entry",
    "count_entries",
]
