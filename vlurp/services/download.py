"""
Streaming tarball download into a private temporary file.
"""

import asyncio
from pathlib import Path
from typing import Optional

import httpx

from ..infrastructure.error_handler import (
    DownloadFailed, FilesystemError, handle_transport_error
)
from ..infrastructure.logger import logger
from ..infrastructure.scratch import remove_quietly, scratch_path


TARBALL_PREFIX = 'vlurp-'
TARBALL_SUFFIX = '.tar.gz'


class TarballAcquirer:
    """
    Downloads a tarball with a single GET request.

    No retry is attempted: any non-200 answer is final. File writes run in
    worker threads so the event loop keeps streaming.
    """

    def __init__(
        self,
        user_agent: str = 'vlurp-cli',
        chunk_size: int = 8192,
        timeout: Optional[float] = 300,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        temp_dir: Optional[Path] = None
    ):
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.transport = transport
        self.temp_dir = temp_dir

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={'User-Agent': self.user_agent},
            follow_redirects=True,
            timeout=self.timeout,
            transport=self.transport,
        )

    @handle_transport_error
    async def acquire(self, url: str) -> Path:
        """
        Stream ``url`` into a uniquely named temporary file.

        Args:
            url: Tarball location

        Returns:
            Path of the downloaded tarball; the caller owns and removes it

        Raises:
            DownloadFailed: On a non-200 status or a transport failure
        """
        temp_file = scratch_path(TARBALL_PREFIX, TARBALL_SUFFIX, self.temp_dir)
        logger.debug(f"Downloading {url} to {temp_file}")

        try:
            async with self._client() as client:
                async with client.stream('GET', url) as response:
                    if response.status_code != 200:
                        raise DownloadFailed(
                            f"Failed to download tarball: HTTP {response.status_code}",
                            status_code=response.status_code
                        )

                    written = 0
                    handle = await asyncio.to_thread(open, temp_file, 'xb')
                    try:
                        async for chunk in response.aiter_bytes(self.chunk_size):
                            await asyncio.to_thread(handle.write, chunk)
                            written += len(chunk)
                    finally:
                        await asyncio.to_thread(handle.close)

        except OSError as e:
            remove_quietly(temp_file)
            raise FilesystemError(f"Could not write tarball to {temp_file}", e) from e

        except BaseException:
            remove_quietly(temp_file)
            raise

        logger.debug(f"Downloaded {written} bytes from {url}")
        return temp_file


__all__ = [
    "TarballAcquirer",
]
