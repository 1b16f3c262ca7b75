from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import quote

import aiofiles
import aiohttp

from repo_snapshot_tool.domain.entities import CloneSpec
from repo_snapshot_tool.domain.errors import DownloadError
from repo_snapshot_tool.domain.ports import ArchiveDownloaderPort, HttpFetcherPort


DEFAULT_ARCHIVE_HOST = "github.com"
DEFAULT_CHUNK_SIZE = 64 * 1024


class TarballDownloader(ArchiveDownloaderPort):
    def __init__(
        self,
        fetcher: HttpFetcherPort,
        *,
        host: str = DEFAULT_ARCHIVE_HOST,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be greater than 0")
        self._fetcher = fetcher
        self._host = host.strip().strip("/")
        self._chunk_size = chunk_size
        self._logger = logging.getLogger(__name__)

    def archive_url(self, spec: CloneSpec) -> str:
        ref = quote(spec.ref_or_head, safe="/")
        return f"https://{self._host}/{spec.repository_id}/archive/{ref}.tar.gz"

    async def download_to(self, spec: CloneSpec, file: Path) -> int:
        url = self.archive_url(spec)
        self._logger.info(
            "downloading archive",
            extra={"event": "download.start", "url": url, "file": str(file)},
        )

        response = await self._fetcher.fetch(url)
        written = 0
        try:
            async with aiofiles.open(file, "wb") as output:
                async for chunk in response.content.iter_chunked(self._chunk_size):
                    await output.write(chunk)
                    written += len(chunk)
        except (OSError, aiohttp.ClientError, asyncio.TimeoutError) as error:
            raise DownloadError(f"Failed to stream {url} to {file}: {error}") from error
        finally:
            response.release()

        self._logger.info(
            "archive downloaded",
            extra={"event": "download.success", "url": url, "file": str(file), "bytes": written},
        )
        return written
