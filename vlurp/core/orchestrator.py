"""
Orchestrator driving a fetch from tarball location to placed files.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..models import FetchOutcome, FilterSpec
from ..services import ArchiveExtractor, TarballAcquirer
from ..infrastructure.logger import logger
from ..infrastructure.scratch import remove_quietly
from .filter import FilterEngine
from .placement import PlacementManager, count_entries


####
##      FETCH STATISTICS MODEL
#####
@dataclass
class FetchStatistics:
    """Counters and timings for one fetch."""

    extracted_files: int = 0
    selected_files: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        """Get total duration in seconds."""

        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0


def list_files(workspace: Path) -> List[str]:
    """List repository-relative POSIX paths of every non-directory entry."""

    paths = []
    for root, dirs, files in os.walk(workspace):
        base = Path(root).relative_to(workspace)
        for name in files:
            paths.append((base / name).as_posix())
        # Symlinked directories are entries to copy, not trees to walk
        for name in dirs:
            if (Path(root) / name).is_symlink():
                paths.append((base / name).as_posix())
    return sorted(paths)


####
##      FETCH ORCHESTRATOR
#####
class FetchOrchestrator:
    """
    Runs acquisition, extraction, filtering and placement in order.

    Each stage only consumes the previous stage's output. Temporary
    artifacts are removed exactly once, whatever happens.
    """

    def __init__(
        self,
        acquirer: TarballAcquirer,
        extractor: ArchiveExtractor,
        max_concurrent_copies: int = 8,
        filter_at_extraction: bool = False
    ):
        self.acquirer = acquirer
        self.extractor = extractor
        self.max_concurrent_copies = max_concurrent_copies
        self.filter_at_extraction = filter_at_extraction

    async def execute(
        self,
        tarball_location: str,
        target: Path,
        filter_spec: Optional[FilterSpec] = None,
        force_overwrite: bool = False
    ) -> FetchOutcome:
        """
        Fetch a tarball and materialize its filtered content at ``target``.

        Args:
            tarball_location: URL of the tarball
            target: Destination directory
            filter_spec: Include/exclude patterns; empty selects everything
            force_overwrite: Replace an occupied target

        Returns:
            FetchOutcome with placed file counts

        Raises:
            TargetCollision: Target occupied without force_overwrite
            DownloadFailed: Tarball request failed
            ExtractionFailed: Archive could not be unpacked
            FilesystemError: Placement failed
        """
        spec = filter_spec if filter_spec is not None else FilterSpec()
        engine = FilterEngine(spec)
        placement = PlacementManager(target, self.max_concurrent_copies)
        stats = FetchStatistics(start_time=datetime.now())

        # Fail on collisions before any network access
        placement.begin(force_overwrite)

        tarball: Optional[Path] = None
        workspace: Optional[Path] = None
        try:
            tarball = await self.acquirer.acquire(tarball_location)

            path_filter = engine.matches if self.filter_at_extraction else None
            workspace = await self.extractor.extract(tarball, path_filter)

            extracted = list_files(workspace)
            selected = engine.select(extracted)
            stats.extracted_files = len(extracted)
            stats.selected_files = len(selected)
            logger.debug(
                f"Filtered {stats.selected_files}/{stats.extracted_files} "
                f"files with {len(spec)} pattern(s)"
            )

            placed = await placement.place(workspace, selected)

        except Exception as e:
            logger.error(f"Fetch of {tarball_location} failed: {e}")
            raise

        finally:
            remove_quietly(workspace)
            remove_quietly(tarball)

        stats.end_time = datetime.now()
        outcome = FetchOutcome(
            target=placement.target,
            file_count=len(placed),
            entry_count=count_entries(placement.target),
            files=placed,
        )
        logger.info(
            f"Placed {outcome.file_count} files in {outcome.target} "
            f"({stats.duration_seconds:.2f}s)"
        )
        return outcome


__all__ = [
    "FetchOrchestrator",
    "FetchStatistics",
    "list_files",
]
