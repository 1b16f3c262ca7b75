from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from repo_snapshot_tool.adapters.archive.tarball_downloader import DEFAULT_ARCHIVE_HOST, DEFAULT_CHUNK_SIZE
from repo_snapshot_tool.adapters.http.aiohttp_fetcher import DEFAULT_MAX_REDIRECTS


@dataclass(slots=True)
class AppConfig:
    specifier: str
    destination: Path | None
    archive_host: str
    max_redirects: int
    timeout_seconds: float | None
    chunk_size: int


def load_config(args, env: Mapping[str, str]) -> AppConfig:
    specifier = _normalize_empty(args.specifier)
    destination_raw = _normalize_empty(args.destination) or _normalize_empty(env.get("SNAPCLONE_DEST"))
    archive_host = _normalize_empty(args.host) or _normalize_empty(env.get("SNAPCLONE_HOST")) or DEFAULT_ARCHIVE_HOST
    raw_max_redirects = _normalize_empty(
        str(args.max_redirects) if args.max_redirects is not None else None
    ) or _normalize_empty(env.get("SNAPCLONE_MAX_REDIRECTS"))
    raw_timeout = _normalize_empty(str(args.timeout) if args.timeout is not None else None) or _normalize_empty(
        env.get("SNAPCLONE_TIMEOUT_SECONDS")
    )
    raw_chunk_size = _normalize_empty(env.get("SNAPCLONE_CHUNK_SIZE"))

    if not specifier:
        raise ValueError("Missing repository specifier. Expected owner/repo[/sub/path][#ref]")

    max_redirects = DEFAULT_MAX_REDIRECTS
    if raw_max_redirects is not None:
        try:
            max_redirects = int(raw_max_redirects)
        except ValueError as error:
            raise ValueError("SNAPCLONE_MAX_REDIRECTS/--max-redirects must be an integer") from error
        if max_redirects < 0:
            raise ValueError("SNAPCLONE_MAX_REDIRECTS/--max-redirects must be >= 0")

    timeout_seconds: float | None = None
    if raw_timeout is not None:
        try:
            timeout_seconds = float(raw_timeout)
        except ValueError as error:
            raise ValueError("SNAPCLONE_TIMEOUT_SECONDS/--timeout must be a number") from error
        if timeout_seconds <= 0:
            raise ValueError("SNAPCLONE_TIMEOUT_SECONDS/--timeout must be greater than 0")

    chunk_size = DEFAULT_CHUNK_SIZE
    if raw_chunk_size is not None:
        try:
            chunk_size = int(raw_chunk_size)
        except ValueError as error:
            raise ValueError("SNAPCLONE_CHUNK_SIZE must be an integer") from error
        if chunk_size <= 0:
            raise ValueError("SNAPCLONE_CHUNK_SIZE must be greater than 0")

    return AppConfig(
        specifier=specifier,
        destination=Path(destination_raw).expanduser() if destination_raw else None,
        archive_host=archive_host,
        max_redirects=max_redirects,
        timeout_seconds=timeout_seconds,
        chunk_size=chunk_size,
    )


def _normalize_empty(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
