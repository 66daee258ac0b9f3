"""
Source domain models for vlurp.

This module contains immutable data classes describing where a tarball
comes from and the outcome of validating a user-supplied URL.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlparse


_IDENTIFIER = re.compile(r'^[A-Za-z0-9_.-]+$')


class SourceKind(Enum):
    """Enumeration of supported hosting kinds."""

    GITHUB = "github"
    GIST = "gist"


@dataclass(frozen=True)
class SourceDescriptor:
    """Immutable description of a resolved repository or gist."""

    kind: SourceKind
    owner: str
    name: str
    tarball_location: str
    ref: Optional[str] = None
    from_url: bool = False

    @property
    def display_name(self) -> str:
        return f'{self.owner}/{self.name}'

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("Source owner and name are required")

        for value in (self.owner, self.name):
            if not _IDENTIFIER.match(value) or value in ('.', '..'):
                raise ValueError(f"Not a URL-safe identifier: {value!r}")

        parsed = urlparse(self.tarball_location)
        if parsed.scheme != 'https' or not parsed.netloc:
            raise ValueError(f"Invalid tarball location: {self.tarball_location}")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a URL against the allowed host families."""

    valid: bool
    kind: Optional[SourceKind] = None
    owner: Optional[str] = None
    name: Optional[str] = None
    reason: Optional[str] = None


__all__ = [
    "SourceKind",
    "SourceDescriptor",
    "ValidationResult",
]
