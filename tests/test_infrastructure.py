"""Tests for storage and observability helpers."""

import json
import logging

import pytest
import structlog

from workspace_sync.infrastructure.observability.logging import SyncStats, metrics, setup_logging
from workspace_sync.infrastructure.storage import (
    InMemoryStore, PersistentStore, user_key, workspace_key
)

from conftest import WORKSPACE_ID


@pytest.mark.asyncio
async def test_memory_store_copies_values():
    store = InMemoryStore()
    value = {"progress": {"t1": {"is_completed": False}}}

    await store.put(user_key("u1"), value)
    value["progress"]["t1"]["is_completed"] = True
    stored = await store.get(user_key("u1"))
    stored["progress"].clear()

    assert await store.get(user_key("u1")) == {"progress": {"t1": {"is_completed": False}}}


@pytest.mark.asyncio
async def test_memory_store_keys_delete_and_stats():
    store = InMemoryStore()
    await store.put(workspace_key("acme"), {"roots": []})
    await store.put(user_key("u1"), {})
    await store.put(user_key("u2"), {})

    assert await store.keys("user:") == ["user:u1", "user:u2"]
    assert await store.delete(user_key("u2")) is True
    assert await store.delete(user_key("u2")) is False
    assert await store.get(user_key("u2")) is None

    stats = await store.get_stats()
    assert stats == {"total_keys": 2, "workspace_keys": 1, "user_keys": 1, "writes": 3}


@pytest.mark.asyncio
async def test_cache_records_hits_and_misses(cache):
    metrics.reset()

    await cache.get_or_create(WORKSPACE_ID)
    await cache.get_or_create(WORKSPACE_ID)

    snapshot = metrics.snapshot()
    assert snapshot["counters"] == {"content_cache.hit": 1, "content_cache.miss": 1}
    assert snapshot["latencies"]["generation.roadmap"]["count"] == 1


def test_latency_snapshot():
    stats = SyncStats()

    stats.record_latency("generation.detail", 10.0)
    stats.record_latency("generation.detail", 30.0)
    stats.increment_counter("content_cache.miss", 2)

    snapshot = stats.snapshot()
    assert snapshot["latencies"]["generation.detail"] == {
        "count": 2, "total_ms": 40.0, "min_ms": 10.0, "max_ms": 30.0, "avg_ms": 20.0
    }
    assert snapshot["counters"] == {"content_cache.miss": 2}

    stats.reset()
    assert stats.snapshot() == {"counters": {}, "latencies": {}}


def test_store_must_implement_delete():
    class ReadWriteOnly(PersistentStore):
        async def get(self, key):
            return None

        async def put(self, key, value):
            pass

    with pytest.raises(TypeError):
        ReadWriteOnly()


def test_bound_context_reaches_rendered_events(caplog):
    caplog.set_level(logging.INFO)
    setup_logging("INFO", "json", service_name="workspace-sync-test")
    try:
        with structlog.contextvars.bound_contextvars(user_id="u1", workspace_id=WORKSPACE_ID):
            structlog.get_logger("workspace_sync.tests").info("progress_update", task_id="t1")
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()

    event = json.loads(caplog.records[-1].getMessage())
    assert event["event"] == "progress_update"
    assert event["user_id"] == "u1"
    assert event["workspace_id"] == WORKSPACE_ID
    assert event["service"] == "workspace-sync-test"
    assert "timestamp" in event
