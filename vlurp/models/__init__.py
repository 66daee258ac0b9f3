"""
Core data models API surface for vlurp.

This file re-exports model classes from domain-specific modules so imports
like `from vlurp.models import X` keep working.
"""

from .source import (
    SourceKind,
    SourceDescriptor,
    ValidationResult,
)
from .fetch import (
    FilterSpec,
    TargetState,
    TargetStatus,
    PlacementState,
    FetchOutcome,
)
from .config import FetchConfig

__all__ = [
    # Source models
    "SourceKind",
    "SourceDescriptor",
    "ValidationResult",
    # Fetch models
    "FilterSpec",
    "TargetState",
    "TargetStatus",
    "PlacementState",
    "FetchOutcome",
    # Config models
    "FetchConfig",
]
