from __future__ import annotations
"""Application use case applying a repository's post-extraction manifest."""

import asyncio
from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path

from repo_snapshot_tool.domain.actions import (
    MANIFEST_FILE_NAME,
    ActionManifest,
    CloneAction,
    ManifestAction,
    RemoveAction,
)
from repo_snapshot_tool.domain.entities import ActionRunSummary
from repo_snapshot_tool.domain.errors import FilesystemError
from repo_snapshot_tool.domain.events import EventSink, NullEventSink, describe
from repo_snapshot_tool.domain.ports import FileSystemPort


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ManifestActionRunner:
    """Read, consume and execute `degit.json` at a destination root.

    Responsibilities:
    - treat a missing, unreadable, non-JSON or non-array manifest as absent
    - drop entries that fail validation
    - delete the manifest before running any action
    - run actions concurrently, downgrading per-file failures to warnings
    """

    filesystem: FileSystemPort
    events: EventSink = field(default_factory=NullEventSink)

    async def do_actions_at(self, destination: Path) -> ActionRunSummary:
        """Apply the manifest found in `destination`, if any.

        Raises:
            FilesystemError: The manifest was read but could not be deleted.
        """
        summary = ActionRunSummary()
        manifest_path = destination / MANIFEST_FILE_NAME

        manifest = await self._load(manifest_path)
        if manifest is None:
            return summary

        summary.manifest_found = True
        summary.actions = tuple(action.action for action in manifest.actions)

        try:
            await self.filesystem.remove_file(manifest_path)
        except OSError as error:
            raise FilesystemError(f"Cannot remove manifest {manifest_path}: {error}") from error

        LOGGER.info(
            "manifest consumed",
            extra={
                "event": "actions.manifest.consumed",
                "manifest": str(manifest_path),
                "actions": list(summary.actions),
                "dropped": manifest.dropped,
            },
        )

        await asyncio.gather(*(self._run(action, destination, summary) for action in manifest.actions))
        return summary

    async def _load(self, manifest_path: Path) -> ActionManifest | None:
        try:
            contents = await self.filesystem.read_bytes(manifest_path)
        except OSError:
            return None

        try:
            raw = json.loads(contents)
        except (json.JSONDecodeError, UnicodeDecodeError):
            LOGGER.debug(
                "manifest is not valid JSON; ignored",
                extra={"event": "actions.manifest.invalid", "manifest": str(manifest_path)},
            )
            return None

        manifest = ActionManifest.from_json_value(raw)
        if manifest is None:
            LOGGER.debug(
                "manifest is not a JSON array; ignored",
                extra={"event": "actions.manifest.not_array", "manifest": str(manifest_path)},
            )
        return manifest

    async def _run(self, action: ManifestAction, destination: Path, summary: ActionRunSummary) -> None:
        if isinstance(action, CloneAction):
            LOGGER.debug(
                "clone action is reserved; skipped",
                extra={"event": "actions.clone.skipped", "src": action.src},
            )
            return

        if isinstance(action, RemoveAction):
            await asyncio.gather(*(self._remove(destination, file, summary) for file in action.files))

    async def _remove(self, destination: Path, file: str, summary: ActionRunSummary) -> None:
        root = Path(os.path.abspath(destination))
        target = Path(os.path.normpath(root / file))
        if target == root or not target.is_relative_to(root):
            self._warn(summary, f"Refusing to remove {file}: outside destination {destination}")
            return

        try:
            await self.filesystem.remove_file(target)
        except OSError as error:
            self._warn(summary, error)
            return

        summary.removed_files.append(target)
        LOGGER.info("file removed", extra={"event": "actions.remove.file", "file": str(target)})

    def _warn(self, summary: ActionRunSummary, payload) -> None:
        summary.warnings.append(describe(payload))
        LOGGER.warning(describe(payload), extra={"event": "actions.remove.failed"})
        self.events.warn(payload)
