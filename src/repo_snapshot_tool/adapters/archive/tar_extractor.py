from __future__ import annotations
"""Tarball inspection and subtree extraction.

Archive endpoints wrap every entry in one synthetic directory named after the
repository and ref (`widgets-1a2b3c/...`). The wrapper is discovered from the
listing, then only `<wrapper><sub_path>` is extracted with that prefix removed:

    wrapper + "/"     -> strip 1 component
    wrapper + "/src/" -> strip 2 components
"""

import asyncio
import copy
import logging
import tarfile
import zlib
from pathlib import Path

from repo_snapshot_tool.domain.errors import ExtractError, FilesystemError, NoWrapperFound
from repo_snapshot_tool.domain.ports import ArchiveExtractorPort


LOGGER = logging.getLogger(__name__)

_ARCHIVE_READ_ERRORS = (tarfile.TarError, OSError, EOFError, zlib.error)


class TarArchiveExtractor(ArchiveExtractorPort):
    """Run blocking `tarfile` work in a worker thread."""

    async def extract(self, archive: Path, destination: Path, sub_path: str = "/") -> int:
        wrapper = await asyncio.to_thread(discover_wrapper, archive)
        subtree = f"{wrapper}{sub_path}"
        LOGGER.info(
            "archive wrapper discovered",
            extra={"event": "extract.wrapper", "archive": str(archive), "wrapper": wrapper, "subtree": subtree},
        )

        try:
            await asyncio.to_thread(destination.mkdir, parents=True, exist_ok=True)
        except OSError as error:
            raise FilesystemError(f"Cannot create destination directory {destination}: {error}") from error

        count = await asyncio.to_thread(extract_subtree, archive, destination, subtree)
        LOGGER.info(
            "archive extracted",
            extra={"event": "extract.success", "destination": str(destination), "entries": count},
        )
        return count


def discover_wrapper(archive: Path) -> str:
    """Return the name of the first top-level directory entry in `archive`."""
    try:
        with tarfile.open(archive, "r:*") as tar:
            for member in tar:
                name = member.name.rstrip("/")
                if member.isdir() and name and "/" not in name:
                    return name
    except _ARCHIVE_READ_ERRORS as error:
        raise ExtractError(f"Cannot read archive {archive}: {error}") from error

    raise NoWrapperFound(archive)


def extract_subtree(archive: Path, destination: Path, subtree: str) -> int:
    """Extract entries under `subtree` (which ends with "/") into `destination`."""
    strip = len(subtree.split("/")) - 1
    root = subtree.rstrip("/")
    skipped: list[str] = []

    def member_filter(member: tarfile.TarInfo, path: str) -> tarfile.TarInfo | None:
        try:
            return tarfile.data_filter(member, path)
        except tarfile.FilterError as error:
            skipped.append(member.name)
            LOGGER.warning(
                "unsafe archive member skipped",
                extra={"event": "extract.member.skipped", "member": member.name, "reason": str(error)},
            )
            return None

    try:
        with tarfile.open(archive, "r:*") as tar:
            selected: list[tarfile.TarInfo] = []
            for member in tar.getmembers():
                if member.name != root and not member.name.startswith(subtree):
                    continue

                name = strip_components(member.name, strip)
                if not name:
                    continue

                renamed = copy.copy(member)
                renamed.name = name
                if member.islnk():
                    if not member.linkname.startswith(subtree):
                        LOGGER.warning(
                            "hard link outside extracted subtree skipped",
                            extra={"event": "extract.link.skipped", "member": member.name, "target": member.linkname},
                        )
                        continue
                    renamed.linkname = strip_components(member.linkname, strip)
                selected.append(renamed)

            if not selected:
                raise ExtractError(f"Nothing to extract: '{subtree}' not found in archive {archive}")

            tar.extractall(destination, members=selected, filter=member_filter)
    except _ARCHIVE_READ_ERRORS as error:
        raise ExtractError(f"Failed to extract {archive} into {destination}: {error}") from error

    return len(selected) - len(skipped)


def strip_components(name: str, count: int) -> str:
    return "/".join(name.split("/")[count:])
