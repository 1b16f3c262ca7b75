from __future__ import annotations
"""Advisory info/warn notifications emitted by the clone workflow.

Sinks are passed explicitly into use cases. They never alter control flow:
a sink that raises is a programming error, not a pipeline failure.
"""

import logging
from typing import Protocol, Union


EventPayload = Union[str, BaseException]


class EventSink(Protocol):
    """Observer for diagnostic notifications."""

    def info(self, payload: EventPayload) -> None:
        ...

    def warn(self, payload: EventPayload) -> None:
        ...


class NullEventSink:
    """Discard every notification."""

    def info(self, payload: EventPayload) -> None:
        return None

    def warn(self, payload: EventPayload) -> None:
        return None


class LoggingEventSink:
    """Forward notifications to a standard logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def info(self, payload: EventPayload) -> None:
        self._logger.info(str(payload), extra={"event": "clone.notice.info"})

    def warn(self, payload: EventPayload) -> None:
        self._logger.warning(str(payload), extra={"event": "clone.notice.warn"})


def describe(payload: EventPayload) -> str:
    """Render a payload for human output, naming the exception type if any."""
    if isinstance(payload, BaseException):
        return f"{type(payload).__name__}: {payload}"
    return payload
