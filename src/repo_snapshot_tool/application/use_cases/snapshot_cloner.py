from __future__ import annotations
"""Application use case copying one repository snapshot into a directory."""

from dataclasses import dataclass, field
import logging
from pathlib import Path

from repo_snapshot_tool.application.use_cases.manifest_actions import ManifestActionRunner
from repo_snapshot_tool.domain.entities import CloneSpec, CloneSummary
from repo_snapshot_tool.domain.errors import SnapshotError
from repo_snapshot_tool.domain.events import EventSink, LoggingEventSink, describe
from repo_snapshot_tool.domain.ports import ArchiveDownloaderPort, ArchiveExtractorPort, FileSystemPort


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SnapshotCloner:
    """Core orchestration use case.

    Responsibilities:
    - ensure the destination exists
    - download the archive for `spec` into the destination
    - extract the selected subtree over the destination
    - always attempt to delete the temporary archive, warning on failure
    - apply the post-extraction manifest, warning on failure
    """

    spec: CloneSpec
    downloader: ArchiveDownloaderPort
    extractor: ArchiveExtractorPort
    filesystem: FileSystemPort
    action_runner: ManifestActionRunner
    events: EventSink = field(default_factory=LoggingEventSink)

    async def clone(self, destination: Path | None = None) -> CloneSummary:
        """Copy the repository snapshot into `destination`.

        Args:
            destination: Target directory; defaults to the current directory.

        Returns:
            `CloneSummary` describing the completed clone.

        Raises:
            SnapshotError: Download, extraction or destination creation failed.
        """
        destination = destination if destination is not None else Path.cwd()
        await self.filesystem.ensure_directory(destination)

        archive = destination / self.spec.archive_file_name
        archive_url = self.downloader.archive_url(self.spec)
        warnings: list[str] = []

        LOGGER.info(
            "clone started",
            extra={
                "event": "clone.start",
                "repository": self.spec.repository_id,
                "ref": self.spec.ref_or_head,
                "sub_path": self.spec.sub_path,
                "destination": str(destination),
            },
        )
        self.events.info(f"downloading {archive_url} to {archive}")

        try:
            archive_bytes = await self.downloader.download_to(self.spec, archive)
            self.events.info(f"extracting {self.spec.sub_path} from {archive.name} into {destination}")
            extracted_entries = await self.extractor.extract(archive, destination, self.spec.sub_path)
        finally:
            archive_removed = await self._remove_archive(archive, warnings)

        summary = CloneSummary(
            spec=self.spec,
            destination=destination,
            archive_url=archive_url,
            archive_bytes=archive_bytes,
            extracted_entries=extracted_entries,
            archive_removed=archive_removed,
            warnings=warnings,
        )

        try:
            summary.actions = await self.action_runner.do_actions_at(destination)
        except (SnapshotError, OSError) as error:
            self._warn(warnings, error)
        else:
            warnings.extend(summary.actions.warnings)

        LOGGER.info(
            "clone completed",
            extra={
                "event": "clone.completed",
                "repository": self.spec.repository_id,
                "destination": str(destination),
                "extracted_entries": extracted_entries,
                "warnings": len(warnings),
            },
        )
        return summary

    async def _remove_archive(self, archive: Path, warnings: list[str]) -> bool:
        if not await self.filesystem.path_exists(archive):
            return False

        try:
            await self.filesystem.remove_file(archive)
        except OSError as error:
            self._warn(warnings, error)
            return False

        LOGGER.info("temporary archive removed", extra={"event": "clone.archive.removed", "archive": str(archive)})
        return True

    def _warn(self, warnings: list[str], error: BaseException) -> None:
        warnings.append(describe(error))
        LOGGER.warning(
            "clone step downgraded to warning",
            extra={"event": "clone.warning", "error": describe(error)},
        )
        self.events.warn(error)
