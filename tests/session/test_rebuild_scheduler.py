"""Tests for the debounced rebuild scheduler."""

import asyncio
from unittest.mock import Mock

import pytest

from chartdeck.session.rebuild_scheduler import RebuildScheduler


def test_runs_immediately_without_event_loop():
    """Outside an event loop the callback runs synchronously."""
    callback = Mock()
    scheduler = RebuildScheduler(callback, delay_seconds=0.3)

    generation = scheduler.request()

    assert generation == 1
    callback.assert_called_once_with()
    assert not scheduler.pending


@pytest.mark.asyncio
async def test_zero_delay_runs_immediately():
    """A zero debounce window disables scheduling."""
    callback = Mock()
    scheduler = RebuildScheduler(callback, delay_seconds=0)

    scheduler.request()

    callback.assert_called_once()


@pytest.mark.asyncio
async def test_burst_collapses_into_one_rebuild():
    """Only the latest request survives a burst."""
    callback = Mock()
    scheduler = RebuildScheduler(callback, delay_seconds=0.05)

    for _ in range(5):
        scheduler.request()

    assert scheduler.pending
    callback.assert_not_called()

    await asyncio.sleep(0.15)

    callback.assert_called_once()
    assert scheduler.generation == 5
    assert not scheduler.pending


@pytest.mark.asyncio
async def test_cancel_drops_pending_rebuild():
    """Cancelled rebuilds never run."""
    callback = Mock()
    scheduler = RebuildScheduler(callback, delay_seconds=0.05)

    scheduler.request()
    scheduler.cancel()
    await asyncio.sleep(0.1)

    callback.assert_not_called()


@pytest.mark.asyncio
async def test_flush_runs_pending_now():
    """flush runs the pending rebuild without waiting for the timer."""
    callback = Mock()
    scheduler = RebuildScheduler(callback, delay_seconds=10)

    scheduler.request()
    scheduler.flush()

    callback.assert_called_once()
    assert not scheduler.pending

    scheduler.flush()
    callback.assert_called_once()
