"""
vlurp: fetch a GitHub repository or gist tarball, keep only the files that
match a set of glob patterns, and place them in a local directory.
"""

from .models import (
    FetchConfig,
    FetchOutcome,
    FilterSpec,
    SourceDescriptor,
    SourceKind,
    TargetState,
    TargetStatus,
    ValidationResult,
)
from .infrastructure.error_handler import (
    DownloadFailed,
    ExtractionFailed,
    FilesystemError,
    InvalidSourceFormat,
    TargetCollision,
    UnsupportedHost,
    VlurpError,
)
from .interfaces.api import (
    RepositoryFetcher,
    check_target,
    count_entries,
    fetch,
    locate,
    render_tree,
    resolve,
    resolve_target_path,
    validate,
)

__all__ = [
    # Models
    "FetchConfig",
    "FetchOutcome",
    "FilterSpec",
    "SourceDescriptor",
    "SourceKind",
    "TargetState",
    "TargetStatus",
    "ValidationResult",
    # Errors
    "DownloadFailed",
    "ExtractionFailed",
    "FilesystemError",
    "InvalidSourceFormat",
    "TargetCollision",
    "UnsupportedHost",
    "VlurpError",
    # API
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

__version__ = "0.1.0"
