from __future__ import annotations
"""Core domain entities shared by use cases and adapters.

These data models are intentionally framework-agnostic and can be reused across
different adapters (CLI, tests, future APIs).
"""

from dataclasses import dataclass, field
from pathlib import Path


RepositoryId = str

DEFAULT_REF = "HEAD"


@dataclass(frozen=True, slots=True)
class CloneSpec:
    """Parsed repository specifier.

    Attributes:
        repository_id: Repository identifier in `owner/name` form.
        sub_path: Normalized path inside the repository, always starting and
            ending with "/". The whole tree is "/".
        ref: Branch, tag or commit. `None` selects the default branch head.
    """

    repository_id: RepositoryId
    sub_path: str = "/"
    ref: str | None = None

    @property
    def ref_or_head(self) -> str:
        return self.ref or DEFAULT_REF

    @property
    def archive_file_name(self) -> str:
        """Local file name of the temporary archive, flat even for nested refs."""
        return f"{self.ref_or_head.replace('/', '-')}.tar.gz"


@dataclass(slots=True)
class ActionRunSummary:
    """Outcome of one post-extraction manifest run."""

    manifest_found: bool = False
    actions: tuple[str, ...] = ()
    removed_files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CloneSummary:
    """Result of one `SnapshotCloner.clone()` call."""

    spec: CloneSpec
    destination: Path
    archive_url: str
    archive_bytes: int
    extracted_entries: int
    archive_removed: bool
    actions: ActionRunSummary | None = None
    warnings: list[str] = field(default_factory=list)
