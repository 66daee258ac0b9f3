"""
Fetch domain models for vlurp.

This module contains data classes and enums representing filter patterns,
target directory state, placement progress and fetch results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Tuple


NEGATION = '!'


@dataclass(frozen=True)
class FilterSpec:
    """Ordered include/exclude glob patterns; a leading ``!`` marks an exclude."""

    patterns: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # A bare string is one pattern, not one per character
        patterns = (self.patterns,) if isinstance(self.patterns, str) else self.patterns
        object.__setattr__(self, 'patterns', tuple(patterns))
        for pattern in self.patterns:
            if not isinstance(pattern, str):
                raise TypeError(f"Filter pattern must be a string: {pattern!r}")

    @classmethod
    def of(cls, patterns: Iterable[str]) -> "FilterSpec":
        return cls(patterns if isinstance(patterns, str) else tuple(patterns))

    @classmethod
    def default(cls) -> "FilterSpec":
        return cls(('.claude/**', 'CLAUDE.md'))

    @classmethod
    def markdown_default(cls) -> "FilterSpec":
        return cls(('.claude/**', 'CLAUDE.md', '!**/README.md', '!**/LICENSE*'))

    @property
    def includes(self) -> List[str]:
        return [p for p in self.patterns if not p.startswith(NEGATION)]

    @property
    def excludes(self) -> List[str]:
        return [p[len(NEGATION):] for p in self.patterns if p.startswith(NEGATION)]

    def __len__(self) -> int:
        return len(self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)


class TargetState(Enum):
    """Existence of the destination directory before a fetch."""

    ABSENT = "absent"
    EMPTY = "empty"
    OCCUPIED = "occupied"


@dataclass(frozen=True)
class TargetStatus:
    """Result of inspecting the destination directory."""

    state: TargetState
    file_count: int = 0

    @property
    def exists(self) -> bool:
        return self.state is not TargetState.ABSENT


class PlacementState(Enum):
    """States of the placement state machine."""

    CHECKING_TARGET = "checking_target"
    CLEAR = "clear"
    COLLIDING = "colliding"
    PLACING = "placing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FetchOutcome:
    """Result of a completed fetch."""

    target: Path
    file_count: int
    entry_count: int = 0
    files: List[str] = field(default_factory=list)


__all__ = [
    "NEGATION",
    "FilterSpec",
    "TargetState",
    "TargetStatus",
    "PlacementState",
    "FetchOutcome",
]
