"""Tests for the generate-once content cache."""

import asyncio
from datetime import timedelta

import pytest

from workspace_sync.domain.content import ContentCache, build_graph, due_date_for
from workspace_sync.domain.errors import GenerationFailed, NotFound
from workspace_sync.domain.models import Difficulty, GeneratedTask
from workspace_sync.infrastructure.storage import workspace_key

from conftest import FIXED_NOW, WORKSPACE_ID, StubGenerator, fixed_clock


@pytest.mark.asyncio
async def test_generates_once_and_serves_cached_graph(cache, generator, store):
    first = await cache.get_or_create(WORKSPACE_ID)
    second = await cache.get_or_create(WORKSPACE_ID)

    assert generator.calls["roadmap"] == 1
    assert first == second
    assert first.roots == ["t1", "t2", "t3"]
    assert await store.get(workspace_key(WORKSPACE_ID)) is not None


@pytest.mark.asyncio
async def test_due_dates_are_spaced_from_generation_time(cache):
    graph = await cache.get_or_create(WORKSPACE_ID)

    assert graph.generated_at == FIXED_NOW
    for position, task_id in enumerate(graph.roots, start=1):
        assert graph.nodes[task_id].due_date == FIXED_NOW + timedelta(days=2 * position)


@pytest.mark.asyncio
async def test_generated_nodes_start_without_detail(cache):
    graph = await cache.get_or_create(WORKSPACE_ID)

    node = graph.nodes["t1"]
    assert node.detail_loaded is False
    assert node.is_follow_up is False
    assert node.children == []
    assert [item.title for item in node.sub_items] == ["Profile nulls"]


@pytest.mark.asyncio
async def test_concurrent_cold_loads_generate_once(store, catalog):
    generator = StubGenerator(delay=0.05)
    cache = ContentCache(store, generator, catalog, clock=fixed_clock)

    graphs = await asyncio.gather(*[cache.get_or_create(WORKSPACE_ID) for _ in range(5)])

    assert generator.calls["roadmap"] == 1
    assert all(graph == graphs[0] for graph in graphs)


@pytest.mark.asyncio
async def test_generator_failure_caches_nothing(store, catalog):
    generator = StubGenerator(fail=True)
    cache = ContentCache(store, generator, catalog, clock=fixed_clock)

    with pytest.raises(GenerationFailed) as exc_info:
        await cache.get_or_create(WORKSPACE_ID)

    assert exc_info.value.workspace_id == WORKSPACE_ID
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert await cache.get(WORKSPACE_ID) is None

    generator.fail = False
    graph = await cache.get_or_create(WORKSPACE_ID)
    assert len(graph.roots) == 3
    assert generator.calls["roadmap"] == 2


@pytest.mark.asyncio
async def test_empty_generation_is_a_failure(store, catalog):
    cache = ContentCache(store, StubGenerator(tasks=[]), catalog, clock=fixed_clock)

    with pytest.raises(GenerationFailed):
        await cache.get_or_create(WORKSPACE_ID)

    assert await store.get(workspace_key(WORKSPACE_ID)) is None


@pytest.mark.asyncio
async def test_unknown_workspace(cache, generator):
    with pytest.raises(NotFound):
        await cache.get_or_create("nowhere")

    assert generator.calls["roadmap"] == 0


def test_build_graph_rekeys_duplicate_ids():
    drafts = [
        GeneratedTask(id="task", title="One", difficulty=Difficulty.EASY),
        GeneratedTask(id="task", title="Two", difficulty=Difficulty.HARD),
    ]

    graph = build_graph(WORKSPACE_ID, drafts, FIXED_NOW)

    assert len(graph.roots) == 2
    assert len(set(graph.roots)) == 2
    assert [graph.nodes[task_id].title for task_id in graph.roots] == ["One", "Two"]


def test_due_date_for_custom_spacing():
    assert due_date_for(FIXED_NOW, 3, spacing_days=1) == FIXED_NOW + timedelta(days=3)
