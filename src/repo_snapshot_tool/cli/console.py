from __future__ import annotations

import sys
from typing import TextIO

from repo_snapshot_tool.domain.events import EventPayload, describe


class ConsoleEventSink:
    """Print clone notifications as `info: ...` / `warn: ...` lines."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def info(self, payload: EventPayload) -> None:
        self._write("info", payload)

    def warn(self, payload: EventPayload) -> None:
        self._write("warn", payload)

    def _write(self, level: str, payload: EventPayload) -> None:
        stream = self._stream or sys.stderr
        print(f"{level}: {describe(payload)}", file=stream)
