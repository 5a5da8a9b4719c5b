"""Read-only clients for graph statistics and cost metrics."""

from __future__ import annotations

from graphrag_console.clients.transport import Transport, parse_response, unwrap
from graphrag_console.models.schemas import CostSnapshot, GraphStats

STATS_ENDPOINT = "/graph/stats"
COSTS_ENDPOINT = "/costs/current"


class StatsReader:
    """Idempotent GETs against the stats and cost endpoints."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def fetch_graph_stats(self) -> GraphStats:
        payload = await self._transport.call(STATS_ENDPOINT)
        return parse_response(GraphStats, unwrap(payload, "data", STATS_ENDPOINT), STATS_ENDPOINT)

    async def fetch_cost_snapshot(self) -> CostSnapshot:
        payload = await self._transport.call(COSTS_ENDPOINT)
        return parse_response(CostSnapshot, unwrap(payload, "data", COSTS_ENDPOINT), COSTS_ENDPOINT)
