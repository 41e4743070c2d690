"""Tests for LifecycleController visibility and connectivity handling."""

import asyncio

import pytest

from explorercache.config import CacheConfig, SchedulerRunState
from explorercache.core.cache import ContentCache
from explorercache.core.scheduler import TraversalScheduler
from explorercache.lifecycle import HIDDEN, VISIBLE, LifecycleController
from explorercache.testing import InMemoryRemoteDirectory


@pytest.fixture
def components():
    directory = InMemoryRemoteDirectory({'a': {'x.txt': 'x'}, 'b': {'y.txt': 'y'}})
    cache = ContentCache(directory)
    scheduler = TraversalScheduler(directory, cache, CacheConfig.immediate())
    return directory, cache, scheduler, LifecycleController(scheduler)


@pytest.mark.asyncio
async def test_hidden_pauses_and_visible_resumes(components):
    directory, cache, scheduler, lifecycle = components
    gate = directory.hold('/')

    scheduler.start('/')
    while not directory.list_calls:
        await asyncio.sleep(0.001)
    lifecycle.on_visibility_change(HIDDEN)
    assert scheduler.state == SchedulerRunState.PAUSED
    assert lifecycle.suspended

    gate.set()
    await scheduler.join()
    assert directory.list_calls == ['/']

    lifecycle.on_visibility_change(VISIBLE)
    assert scheduler.state == SchedulerRunState.ACTIVE
    await scheduler.join()

    assert directory.list_calls == ['/', '/a', '/b']
    assert cache.size == 2


@pytest.mark.asyncio
async def test_offline_pauses_and_online_resumes(components):
    directory, cache, scheduler, lifecycle = components

    lifecycle.on_offline()
    scheduler.start('/')  # start clears the pause flag
    lifecycle.on_offline()  # repeated signal is a no-op
    assert not scheduler.paused

    lifecycle.on_online()
    lifecycle.on_offline()
    assert scheduler.paused
    await scheduler.join()

    lifecycle.on_online()
    await scheduler.join()
    assert cache.size == 2


@pytest.mark.asyncio
async def test_resume_requires_both_conditions_clear(components):
    directory, cache, scheduler, lifecycle = components
    scheduler.start('/')

    lifecycle.set_visible(False)
    lifecycle.set_online(False)
    lifecycle.set_visible(True)
    assert scheduler.paused

    lifecycle.set_online(True)
    assert not scheduler.paused
    await scheduler.join()
    assert scheduler.state == SchedulerRunState.IDLE


@pytest.mark.asyncio
async def test_manual_pause_survives_visibility_cycle(components):
    directory, cache, scheduler, lifecycle = components
    scheduler.start('/')
    scheduler.pause()

    # No change in visibility: nothing happens
    lifecycle.on_visibility_change(VISIBLE)
    assert scheduler.paused

    lifecycle.on_visibility_change(HIDDEN)
    lifecycle.on_visibility_change(VISIBLE)
    assert scheduler.paused

    lifecycle.on_offline()
    lifecycle.on_online()
    assert scheduler.paused
    await scheduler.join()
    assert directory.list_calls == []

    scheduler.resume()
    await scheduler.join()
    assert cache.size == 2


@pytest.mark.asyncio
async def test_signal_pause_is_lifted_after_manual_resume(components):
    directory, cache, scheduler, lifecycle = components
    scheduler.start('/')

    lifecycle.on_visibility_change(HIDDEN)
    scheduler.resume()
    lifecycle.on_visibility_change(VISIBLE)
    assert not scheduler.paused

    lifecycle.on_visibility_change(HIDDEN)
    assert scheduler.paused
    lifecycle.on_visibility_change(VISIBLE)
    assert not scheduler.paused
    await scheduler.join()
    assert cache.size == 2


def test_unknown_visibility_state(components):
    lifecycle = components[3]
    with pytest.raises(ValueError):
        lifecycle.on_visibility_change('prerender')
