from __future__ import annotations

import logging
from collections.abc import Iterator

from accessihome.models import ActionLogEntry, LogSource

logger = logging.getLogger(__name__)


class ActionLogger:
    """Append-only record of events, in submission order."""

    def __init__(self) -> None:
        self._entries: list[ActionLogEntry] = []

    def append(self, message: str, source: LogSource) -> ActionLogEntry:
        entry = ActionLogEntry(message=message, source=source)
        self._entries.append(entry)
        logger.info("[%s] %s", source.value, message)
        return entry

    @property
    def entries(self) -> tuple[ActionLogEntry, ...]:
        return tuple(self._entries)

    def by_source(self, source: LogSource) -> list[ActionLogEntry]:
        return [entry for entry in self._entries if entry.source is source]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ActionLogEntry]:
        return iter(tuple(self._entries))
