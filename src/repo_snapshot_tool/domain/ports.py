from __future__ import annotations
"""Hexagonal architecture port interfaces.

Core use cases depend only on these abstractions. Adapters provide concrete
implementations for HTTP, archive handling and the local filesystem.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterator, Protocol

from .entities import CloneSpec


class ResponseBody(Protocol):
    def iter_chunked(self, n: int) -> AsyncIterator[bytes]:
        ...


class FetchedResponse(Protocol):
    """Live response returned by a fetcher; the body has not been read."""

    status: int
    url: object
    content: ResponseBody

    def release(self) -> object:
        ...


class HttpFetcherPort(ABC):
    """GET with redirect handling (aiohttp adapter, test fakes)."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedResponse:
        """Return the first 2xx response reached from `url`."""
        raise NotImplementedError


class ArchiveDownloaderPort(ABC):
    """Resolve a spec to an archive URL and store the archive locally."""

    @abstractmethod
    def archive_url(self, spec: CloneSpec) -> str:
        raise NotImplementedError

    @abstractmethod
    async def download_to(self, spec: CloneSpec, file: Path) -> int:
        """Stream the archive for `spec` into `file`; return bytes written."""
        raise NotImplementedError


class ArchiveExtractorPort(ABC):
    """Extract the selected subtree of a downloaded archive."""

    @abstractmethod
    async def extract(self, archive: Path, destination: Path, sub_path: str = "/") -> int:
        """Extract into `destination` and return the number of entries written."""
        raise NotImplementedError


class FileSystemPort(ABC):
    """Filesystem operations abstracted for testability and portability."""

    @abstractmethod
    async def ensure_directory(self, path: Path) -> None:
        """Ensure target directory exists (create recursively if needed)."""
        raise NotImplementedError

    @abstractmethod
    async def path_exists(self, path: Path) -> bool:
        """Return whether a path exists."""
        raise NotImplementedError

    @abstractmethod
    async def read_bytes(self, path: Path) -> bytes:
        """Read a whole file. Raises `OSError` when it cannot be read."""
        raise NotImplementedError

    @abstractmethod
    async def remove_file(self, path: Path) -> None:
        """Delete a single file. Raises `OSError` on failure."""
        raise NotImplementedError
