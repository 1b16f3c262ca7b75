from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

import aiohttp

from repo_snapshot_tool.adapters.archive import TarArchiveExtractor, TarballDownloader
from repo_snapshot_tool.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from repo_snapshot_tool.adapters.http.aiohttp_fetcher import AiohttpFetcher
from repo_snapshot_tool.application.use_cases.manifest_actions import ManifestActionRunner
from repo_snapshot_tool.application.use_cases.snapshot_cloner import SnapshotCloner
from repo_snapshot_tool.cli.config import AppConfig, load_config
from repo_snapshot_tool.cli.console import ConsoleEventSink
from repo_snapshot_tool.domain.entities import CloneSpec, CloneSummary
from repo_snapshot_tool.domain.errors import SnapshotError
from repo_snapshot_tool.domain.events import EventSink
from repo_snapshot_tool.domain.specifier import parse_specifier
from repo_snapshot_tool.logging_utils import configure_logging


EPILOG = """\
examples:
  snapclone user/repo               copy into the current working directory
  snapclone user/repo path/to/dir   copy into a specific directory
  snapclone user/repo#dev           branch
  snapclone user/repo#v1.2.3        release tag
  snapclone user/repo#1234abcd      commit hash
  snapclone user/repo/sub           extract a sub directory
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapclone",
        description="Copy a repository snapshot into a directory without git history.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("specifier", help="Repository specifier: owner/repo[/sub/path][#ref].")
    parser.add_argument(
        "destination",
        nargs="?",
        help="Destination directory. Falls back to SNAPCLONE_DEST, then the current directory.",
    )
    parser.add_argument("--host", required=False, help="Archive host. Falls back to SNAPCLONE_HOST.")
    parser.add_argument(
        "--max-redirects",
        type=int,
        required=False,
        help="Maximum redirects to follow. Falls back to SNAPCLONE_MAX_REDIRECTS.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        required=False,
        help="Total request timeout in seconds. Falls back to SNAPCLONE_TIMEOUT_SECONDS.",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    try:
        configure_logging(os.environ.get("LOG_LEVEL", "WARNING"), os.environ.get("LOG_FORMAT", "text"))
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    logger = logging.getLogger(__name__)

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args=args, env=os.environ)
    except ValueError as error:
        parser.error(str(error))

    logger.info(
        "cli configuration resolved",
        extra={
            "event": "cli.config.resolved",
            "specifier": config.specifier,
            "destination": str(config.destination) if config.destination else None,
            "archive_host": config.archive_host,
            "max_redirects": config.max_redirects,
            "timeout_seconds": config.timeout_seconds,
        },
    )

    try:
        spec = parse_specifier(config.specifier)
        asyncio.run(_clone(spec, config, ConsoleEventSink()))
    except SnapshotError as error:
        logger.exception("clone failed", extra={"event": "cli.execution.failed"})
        print(f"error: {error}", file=sys.stderr)
        return 1

    return 0


async def _clone(spec: CloneSpec, config: AppConfig, events: EventSink) -> CloneSummary:
    timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        cloner = _build_cloner(spec, config, session, events)
        return await cloner.clone(config.destination)


def _build_cloner(
    spec: CloneSpec,
    config: AppConfig,
    session: aiohttp.ClientSession,
    events: EventSink,
) -> SnapshotCloner:
    filesystem = LocalFileSystemAdapter()
    fetcher = AiohttpFetcher(session, max_redirects=config.max_redirects)

    return SnapshotCloner(
        spec=spec,
        downloader=TarballDownloader(fetcher, host=config.archive_host, chunk_size=config.chunk_size),
        extractor=TarArchiveExtractor(),
        filesystem=filesystem,
        action_runner=ManifestActionRunner(filesystem=filesystem, events=events),
        events=events,
    )
