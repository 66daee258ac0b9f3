"""
Public Python API for vlurp.

`RepositoryFetcher` wires the pipeline together from a FetchConfig; the
module-level functions are thin conveniences over it.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Union

from ..core.orchestrator import FetchOrchestrator
from ..core.placement import check_target as _check_target
from ..core.placement import count_entries as _count_entries
from ..core.resolver import SourceResolver, has_scheme, split_host_url
from ..core.validator import UNSUPPORTED_HOST, UrlValidator
from ..models import (
    FetchConfig, FetchOutcome, FilterSpec, SourceDescriptor,
    TargetStatus, ValidationResult
)
from ..services import ArchiveExtractor, TarballAcquirer
from ..infrastructure.error_handler import InvalidSourceFormat, UnsupportedHost
from ..infrastructure.logger import logger
from .tree import render_tree


PathLike = Union[str, os.PathLike]
Patterns = Union[FilterSpec, Iterable[str], None]


def _as_spec(patterns: Patterns) -> FilterSpec:
    if patterns is None:
        return FilterSpec()
    if isinstance(patterns, FilterSpec):
        return patterns
    if isinstance(patterns, str):
        return FilterSpec((patterns,))
    return FilterSpec.of(patterns)


def resolve_target_path(owner: str, name: str, root: Optional[PathLike] = None) -> Path:
    """Return the absolute ``<root>/<owner>/<name>``; root defaults to the cwd."""

    base = Path(root) if root is not None else Path.cwd()
    return (base / owner / name).resolve()


class RepositoryFetcher:
    """
    High-level entry point for fetching filtered repository content.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        verbose: bool = False,
        transport=None
    ):
        """
        Args:
            config: Fetch configuration; defaults apply when omitted
            verbose: Log at DEBUG level
            transport: Optional httpx transport, mostly for tests
        """
        self.config = config or FetchConfig()
        self.verbose = verbose
        self.set_verbose(verbose)

        self.resolver = SourceResolver()
        self.validator = UrlValidator()
        self.acquirer = TarballAcquirer(
            user_agent=self.config.user_agent,
            chunk_size=self.config.chunk_size,
            timeout=self.config.timeout,
            transport=transport,
        )
        self.extractor = ArchiveExtractor()
        self.orchestrator = FetchOrchestrator(
            self.acquirer,
            self.extractor,
            max_concurrent_copies=self.config.max_concurrent_copies,
            filter_at_extraction=self.config.filter_at_extraction,
        )

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        if verbose:
            logger.debug("Verbose logging enabled")

    def resolve(self, source: str) -> SourceDescriptor:
        return self.resolver.resolve(source)

    def validate(self, url: str) -> ValidationResult:
        return self.validator.validate(url)

    def locate(self, source: str) -> SourceDescriptor:
        """
        Resolve a source and, for explicit URLs, confirm its host.

        Raises:
            UnsupportedHost: For a well-formed URL on a foreign host
            InvalidSourceFormat: For anything else that does not resolve
        """
        try:
            descriptor = self.resolver.resolve(source)
        except InvalidSourceFormat:
            if isinstance(source, str) and (has_scheme(source) or split_host_url(source)):
                result = self.validator.validate(source)
                if not result.valid and result.reason == UNSUPPORTED_HOST:
                    raise UnsupportedHost(result.reason)
            raise

        if descriptor.from_url:
            result = self.validator.validate(source)
            if not result.valid:
                raise UnsupportedHost(result.reason or UNSUPPORTED_HOST)

        logger.debug(f"Located {descriptor.display_name} at {descriptor.tarball_location}")
        return descriptor

    def target_for(self, descriptor: SourceDescriptor) -> Path:
        return resolve_target_path(descriptor.owner, descriptor.name, self.config.source_dir)

    def check_target(self, path: PathLike) -> TargetStatus:
        return _check_target(Path(path))

    def count_entries(self, path: PathLike) -> int:
        return _count_entries(Path(path))

    def render_tree(self, path: PathLike) -> Optional[str]:
        return render_tree(Path(path))

    async def fetch(
        self,
        tarball_location: str,
        target_path: PathLike,
        filter_spec: Patterns = None,
        force_overwrite: Optional[bool] = None
    ) -> FetchOutcome:
        """
        Download, filter and place a tarball.

        Args:
            tarball_location: Tarball URL
            target_path: Destination directory
            filter_spec: Patterns; None uses the configured spec
            force_overwrite: Replace an occupied target; None uses the config
        """
        spec = self.config.filter_spec if filter_spec is None else _as_spec(filter_spec)
        force = self.config.force_overwrite if force_overwrite is None else force_overwrite
        return await self.orchestrator.execute(
            tarball_location, Path(target_path), spec, force
        )

    async def fetch_source(
        self,
        source: str,
        force_overwrite: Optional[bool] = None
    ) -> FetchOutcome:
        """Locate ``source`` and fetch it into ``<source_dir>/<owner>/<name>``."""

        descriptor = self.locate(source)
        return await self.fetch(
            descriptor.tarball_location,
            self.target_for(descriptor),
            force_overwrite=force_overwrite,
        )


####
##      MODULE-LEVEL CONVENIENCES
#####
def resolve(source: str) -> SourceDescriptor:
    return SourceResolver().resolve(source)


def validate(url: str) -> ValidationResult:
    return UrlValidator().validate(url)


def locate(source: str) -> SourceDescriptor:
    return RepositoryFetcher().locate(source)


def check_target(path: PathLike) -> TargetStatus:
    return _check_target(Path(path))


def count_entries(path: PathLike) -> int:
    return _count_entries(Path(path))


async def fetch(
    tarball_location: str,
    target_path: PathLike,
    filter_spec: Patterns = None,
    force_overwrite: Optional[bool] = None,
    config: Optional[FetchConfig] = None
) -> FetchOutcome:
    """Fetch with ``config`` defaults for any argument left as None."""

    fetcher = RepositoryFetcher(config)
    return await fetcher.fetch(tarball_location, target_path, filter_spec, force_overwrite)


__all__ = [
    "RepositoryFetcher",
    "check_target",
    "count_entries",
    "fetch",
    "locate",
    "render_tree",
    "resolve",
    "resolve_target_path",
    "validate",
]
