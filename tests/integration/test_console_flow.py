"""End-to-end flows through the state machine against an in-memory backend."""

from __future__ import annotations

import httpx
import pytest

from graphrag_console.clients.comparison import ComparisonClient
from graphrag_console.clients.graph_build import GraphBuildClient
from graphrag_console.clients.query import QueryClient
from graphrag_console.clients.stats import StatsReader
from graphrag_console.config import Settings
from graphrag_console.services.conversation_service import ConversationStateMachine
from graphrag_console.services.snapshot_service import SnapshotService


@pytest.fixture
def machine(transport):
    return ConversationStateMachine(
        QueryClient(transport),
        ComparisonClient(transport),
        GraphBuildClient(transport),
        SnapshotService(StatsReader(transport)),
    )


@pytest.mark.asyncio
async def test_initial_load_on_empty_backend(machine):
    await machine.load_initial()

    assert machine.snapshots.graph_stats.nodes == 0
    assert machine.snapshots.cost_snapshot.total_operations == 0


@pytest.mark.asyncio
async def test_build_then_stats_reflect_new_nodes(machine, backend):
    status = await machine.submit_build("Alice works at Acme.", clear_existing=False)

    assert status.type == "success"
    assert status.details.entities_created >= 1
    assert machine.snapshots.graph_stats.nodes >= 1
    assert machine.snapshots.cost_snapshot.total_operations == 1
    assert [path for _, path, _ in backend.calls] == [
        "/graph/build",
        "/graph/stats",
        "/costs/current",
    ]


@pytest.mark.asyncio
async def test_clear_existing_replaces_graph(machine):
    await machine.submit_build("Alice works at Acme.", clear_existing=False)
    await machine.submit_build("Bob joined Initech.", clear_existing=True)

    assert machine.snapshots.graph_stats.nodes == 2


@pytest.mark.asyncio
async def test_hybrid_query_on_empty_graph_is_not_an_error(machine):
    machine.set_approach("hybrid")

    reply = await machine.submit_question("Who is Alice?")

    assert reply.error is False
    assert reply.content.approach == "hybrid"
    assert "don't have any information" in reply.content.answer


@pytest.mark.asyncio
async def test_comparison_after_build(machine, backend):
    await machine.submit_build("Alice works at Acme.", clear_existing=False)

    reply = await machine.submit_question("Who is Alice?")

    assert reply.is_comparison
    assert set(reply.content.results) == {"graph", "rag", "hybrid"}
    for run in reply.content.results.values():
        assert run.context_length == len(run.context)
    assert machine.snapshots.cost_snapshot.costs_by_operation.keys() == {
        "entity_extraction",
        "comparison",
    }


@pytest.mark.asyncio
async def test_backend_error_becomes_transcript_entry(machine, backend):
    backend.fail("/comparison/query", 500, {"error": "Comparison service unavailable"})

    reply = await machine.submit_question("Who is Alice?")

    assert reply.error
    assert reply.content.message == "Error: Comparison service unavailable"
    assert machine.transcript[0].content.text == "Who is Alice?"


@pytest.mark.asyncio
async def test_unreachable_stats_degrade_to_unavailable(machine, backend):
    await machine.load_initial()
    backend.unreachable.add("/graph/stats")

    status = await machine.submit_build("Alice works at Acme.", clear_existing=False)

    assert status.type == "success"
    assert machine.snapshots.graph_stats is None
    assert "graph_stats" in machine.snapshots.last_errors
    assert machine.snapshots.cost_snapshot is not None


@pytest.mark.asyncio
async def test_from_settings_targets_configured_base_url():
    machine = ConversationStateMachine.from_settings(
        Settings(API_BASE_URL="http://127.0.0.1:9")
    )

    reply = await machine.submit_question("Who is Alice?")

    assert reply.error
    assert "http://127.0.0.1:9" in reply.content.message


@pytest.mark.asyncio
async def test_undecodable_reply_becomes_error_entry(transport_for):
    def handler(request):
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip")

    transport = transport_for(handler)
    machine = ConversationStateMachine(
        QueryClient(transport),
        ComparisonClient(transport),
        GraphBuildClient(transport),
        SnapshotService(StatsReader(transport)),
    )

    reply = await machine.submit_question("Who is Alice?")

    assert reply.error
    assert "undecodable body" in reply.content.message
    assert [entry.role for entry in machine.transcript] == ["user", "assistant"]
    assert not machine.is_querying


@pytest.mark.asyncio
async def test_undecodable_build_reply_reports_failure(transport_for):
    def handler(request):
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip")

    transport = transport_for(handler)
    machine = ConversationStateMachine(
        QueryClient(transport),
        ComparisonClient(transport),
        GraphBuildClient(transport),
        SnapshotService(StatsReader(transport)),
    )

    status = await machine.submit_build("Alice works at Acme.", clear_existing=False)

    assert status.type == "error"
    assert not machine.is_building
    assert machine.snapshots.graph_stats is None
