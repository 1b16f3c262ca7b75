from __future__ import annotations
"""Error taxonomy for the snapshot clone pipeline.

Every failure surfaced by the pipeline derives from `SnapshotError`, so front
ends can separate expected operational failures from programming errors.
"""

from pathlib import Path


class SnapshotError(RuntimeError):
    """Base class for all clone pipeline failures."""


class InvalidSpecifier(SnapshotError):
    def __init__(self, specifier: str) -> None:
        super().__init__(f'Could not parse repository specifier "{specifier}"')
        self.specifier = specifier


class HttpError(SnapshotError):
    """Terminal HTTP failure: status >= 400 or a redirect without a location."""

    def __init__(self, status: int, message: str, *, url: str | None = None) -> None:
        detail = f"{status} {message}".strip()
        super().__init__(f"{detail} ({url})" if url else detail)
        self.status = status
        self.message = message
        self.url = url


class TooManyRedirects(SnapshotError):
    def __init__(self, max_redirects: int, url: str) -> None:
        super().__init__(f"Exceeded {max_redirects} redirects while fetching {url}")
        self.max_redirects = max_redirects
        self.url = url


class DownloadError(SnapshotError):
    """Transport or write failure while streaming the archive to disk."""


class NoWrapperFound(SnapshotError):
    def __init__(self, archive: Path) -> None:
        super().__init__(f"No top-level wrapper directory found in archive: {archive}")
        self.archive = archive


class ExtractError(SnapshotError):
    """Archive could not be read or extracted."""


class FilesystemError(SnapshotError):
    """Local filesystem operation failed outside download and extraction."""
