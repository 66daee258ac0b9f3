"""
Error taxonomy and transport error translation for vlurp.

Every error raised here is terminal for the fetch that raised it.
"""

import functools
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx


T = TypeVar('T')


####
##      ERROR TAXONOMY
#####
class VlurpError(Exception):
    """Base exception for fetch pipeline failures."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


class InvalidSourceFormat(VlurpError):
    """Input is neither a recognized URL nor `owner/name` shorthand."""

    def __init__(self, message: str = 'Invalid input format. Use "user/repo" or a GitHub/Gist URL'):
        super().__init__(message)


class UnsupportedHost(VlurpError):
    """URL is well formed but its host is not on the allow-list."""


class DownloadFailed(VlurpError):
    """Tarball request did not answer with HTTP 200."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        self.status_code = status_code
        super().__init__(message, original_error)


class TargetCollision(VlurpError):
    """Target directory exists and overwrite was not authorized."""

    def __init__(self, path: Path, file_count: int):
        self.path = Path(path)
        self.file_count = file_count
        super().__init__(
            f"Directory already exists: {self.path} ({file_count} entries)"
        )


class ExtractionFailed(VlurpError):
    """Archive is malformed, corrupt or unsafe to unpack."""


class FilesystemError(VlurpError):
    """Permission or I/O failure while placing files."""


####
##      TRANSPORT ERROR TRANSLATION
#####
def handle_transport_error(
    func: Callable[..., Awaitable[T]]
) -> Callable[..., Awaitable[T]]:
    """
    Decorator translating httpx failures into DownloadFailed.

    Errors already in the vlurp taxonomy pass through untouched.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)

        except VlurpError:
            raise

        except httpx.HTTPStatusError as e:
            raise DownloadFailed(
                f"Failed to download tarball: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                original_error=e
            ) from e

        except httpx.HTTPError as e:
            raise DownloadFailed(
                f"Failed to download tarball: {type(e).__name__}",
                original_error=e
            ) from e

    return wrapper


__all__ = [
    "VlurpError",
    "InvalidSourceFormat",
    "UnsupportedHost",
    "DownloadFailed",
    "TargetCollision",
    "ExtractionFailed",
    "FilesystemError",
    "handle_transport_error",
]
