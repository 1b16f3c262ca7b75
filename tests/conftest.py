from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest


class FakeContent:
    def __init__(self, chunks: list[bytes], error: BaseException | None = None) -> None:
        self._chunks = chunks
        self._error = error

    async def iter_chunked(self, n: int):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error


class FakeResponse:
    def __init__(
        self,
        status: int,
        *,
        reason: str = "",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        chunk_size: int = 7,
        error: BaseException | None = None,
    ) -> None:
        self.status = status
        self.reason = reason
        self.headers = headers or {}
        self.url = None
        chunks = [body[index : index + chunk_size] for index in range(0, len(body), chunk_size)]
        self.content = FakeContent(chunks, error)
        self.released = False

    def release(self) -> None:
        self.released = True


class FakeSession:
    """Stand-in for `aiohttp.ClientSession.get` keyed by URL."""

    def __init__(self, routes: dict[str, FakeResponse | BaseException]) -> None:
        self._routes = routes
        self.requests: list[tuple[str, bool]] = []

    async def get(self, url: str, allow_redirects: bool = True):
        self.requests.append((url, allow_redirects))
        route = self._routes[url]
        if isinstance(route, BaseException):
            raise route
        return route


class RecordingSink:
    def __init__(self) -> None:
        self.infos: list[object] = []
        self.warnings: list[object] = []

    def info(self, payload) -> None:
        self.infos.append(payload)

    def warn(self, payload) -> None:
        self.warnings.append(payload)


def write_tarball(path: Path, entries: dict[str, bytes | None]) -> Path:
    """Write a gzipped tarball; `None` values become directory entries."""
    with tarfile.open(path, "w:gz") as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
    return path


def tarball_bytes(tmp_path: Path, entries: dict[str, bytes | None]) -> bytes:
    return write_tarball(tmp_path / "source.tar.gz", entries).read_bytes()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
