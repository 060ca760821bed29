"""Switch-access scanning: a timed cursor over the registry."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from accessihome.models import Device, LogSource

from .registry import DeviceRegistry
from .resolver import CommandResolver, Resolution

logger = logging.getLogger(__name__)

INACTIVE = -1


class ScanningSequencer:
    """Cycles a highlight over the devices while scanning mode is on.

    The cursor is INACTIVE while off. Activation highlights the first device
    and arms a repeating asyncio task; each tick advances the cursor modulo
    the current device count. Deactivation cancels the task and resets the
    cursor before returning, so no tick lands afterwards.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        resolver: CommandResolver,
        interval: float = 2.0,
        on_tick: Callable[[int, Device | None], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Scan interval must be positive")
        self.registry = registry
        self.resolver = resolver
        self.interval = interval
        self.on_tick = on_tick
        self._cursor = INACTIVE
        self._task: asyncio.Task[None] | None = None

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def active(self) -> bool:
        return self._task is not None

    @property
    def highlighted(self) -> Device | None:
        if self._cursor == INACTIVE:
            return None
        return self.registry.at(self._cursor)

    def activate(self) -> None:
        """Enter scanning mode. Needs a running event loop."""
        if self.active:
            return
        loop = asyncio.get_running_loop()
        self._cursor = 0 if len(self.registry) else INACTIVE
        self._task = loop.create_task(self._run(), name="scanning-sequencer")
        logger.info("Scanning started (interval=%.2fs)", self.interval)
        self._notify()

    def deactivate(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info("Scanning stopped")
        self._cursor = INACTIVE

    def toggle(self) -> bool:
        if self.active:
            self.deactivate()
        else:
            self.activate()
        return self.active

    def tick(self) -> int:
        """Advance the cursor one step; a no-op while inactive."""
        if not self.active:
            return self._cursor
        count = len(self.registry)
        if count == 0:
            self._cursor = INACTIVE
        else:
            self._cursor = (self._cursor + 1) % count
        self._notify()
        return self._cursor

    def select(self) -> Resolution | None:
        """Commit the highlighted device as a scanning toggle."""
        if not self.active or self._cursor == INACTIVE:
            return None
        device = self.registry.at(self._cursor)
        if device is None:
            logger.debug("Cursor %d is past the end of the registry", self._cursor)
            return None
        return self.resolver.apply_toggle(device.id, LogSource.SCANNING)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.tick()
            except Exception:
                logger.exception("Scanning tick failed at cursor %d", self._cursor)

    def _notify(self) -> None:
        if self.on_tick is not None:
            self.on_tick(self._cursor, self.highlighted)
