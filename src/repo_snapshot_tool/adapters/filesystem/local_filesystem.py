from __future__ import annotations

from pathlib import Path

import aiofiles
import aiofiles.os

from repo_snapshot_tool.domain.errors import FilesystemError
from repo_snapshot_tool.domain.ports import FileSystemPort


class LocalFileSystemAdapter(FileSystemPort):
    async def ensure_directory(self, path: Path) -> None:
        try:
            await aiofiles.os.makedirs(path, exist_ok=True)
        except OSError as error:
            raise FilesystemError(f"Cannot create directory {path}: {error}") from error

    async def path_exists(self, path: Path) -> bool:
        return await aiofiles.os.path.exists(path)

    async def read_bytes(self, path: Path) -> bytes:
        async with aiofiles.open(path, "rb") as handle:
            return await handle.read()

    async def remove_file(self, path: Path) -> None:
        await aiofiles.os.remove(path)
