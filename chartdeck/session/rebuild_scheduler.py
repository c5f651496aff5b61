"""
Debounced chart rebuild scheduling.

Every request bumps a generation counter and cancels the pending timer, so a
burst of selection changes collapses into one rebuild that sees the latest
state. Without a running event loop, or with a zero delay, the rebuild runs
synchronously.
"""

import asyncio
from collections.abc import Callable

from loguru import logger

from chartdeck.config.settings import CHART_CONFIG


class RebuildScheduler:
    """Cancellable, generation-keyed debounce for a rebuild callback."""

    __slots__ = ("delay_seconds", "_callback", "_generation", "_handle")

    def __init__(
        self,
        callback: Callable[[], None],
        delay_seconds: float | None = None,
    ):
        """
        Initialize scheduler.

        Args:
            callback: Rebuild function, called with no arguments
            delay_seconds: Debounce window (defaults to configuration)

        """
        self.delay_seconds = (
            delay_seconds
            if delay_seconds is not None
            else CHART_CONFIG["rebuild_debounce_seconds"]
        )
        self._callback = callback
        self._generation = 0
        self._handle: asyncio.TimerHandle | None = None

    @property
    def generation(self) -> int:
        """Return the generation of the most recent request."""
        return self._generation

    @property
    def pending(self) -> bool:
        """Return True if a rebuild is waiting for its timer."""
        return self._handle is not None

    def request(self) -> int:
        """
        Request a rebuild.

        Returns:
            Generation number assigned to this request

        """
        self._generation += 1
        generation = self._generation
        self.cancel()

        loop = self._running_loop()
        if loop is None or self.delay_seconds <= 0:
            self._run(generation)
        else:
            self._handle = loop.call_later(self.delay_seconds, self._run, generation)
        return generation

    def flush(self) -> None:
        """Run a pending rebuild now."""
        if self._handle is None:
            return
        self.cancel()
        self._run(self._generation)

    def cancel(self) -> None:
        """Drop the pending rebuild, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self, generation: int) -> None:
        self._handle = None
        if generation != self._generation:
            logger.debug(f"Skipping stale rebuild (generation {generation})")
            return
        self._callback()

    @staticmethod
    def _running_loop() -> asyncio.AbstractEventLoop | None:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None
