"""
Configuration models for vlurp fetches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .fetch import FilterSpec


@dataclass
class FetchConfig:
    """
    Explicit configuration for a fetch.

    Replaces a loose options bag with the exact set of knobs the
    pipeline reads.
    """

    # Placement settings
    source_dir: Optional[Path] = None
    filter_spec: FilterSpec = field(default_factory=FilterSpec.default)
    force_overwrite: bool = False

    # Transfer settings
    chunk_size: int = 8192
    timeout: Optional[float] = 300
    user_agent: str = "vlurp-cli"

    # Performance settings
    max_concurrent_copies: int = 8
    filter_at_extraction: bool = False

    def __post_init__(self) -> None:
        if self.source_dir is not None:
            self.source_dir = Path(self.source_dir)
        if not isinstance(self.filter_spec, FilterSpec):
            self.filter_spec = FilterSpec.of(self.filter_spec)
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_concurrent_copies <= 0:
            raise ValueError("max_concurrent_copies must be positive")
        if not self.user_agent:
            raise ValueError("user_agent is required")


__all__ = [
    "FetchConfig",
]
