from .archive import ArchiveExtractor, normalize_entry_path
from .download import TarballAcquirer

__all__ = [
    "ArchiveExtractor",
    "TarballAcquirer",
    "normalize_entry_path",
]
