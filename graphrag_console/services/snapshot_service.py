"""Most-recent snapshots of graph statistics and cost metrics."""

from __future__ import annotations

from typing import Literal

from graphrag_console.clients.stats import StatsReader
from graphrag_console.models.schemas import CostSnapshot, GraphStats
from graphrag_console.utils.exceptions import GraphRAGConsoleError, RefreshError
from graphrag_console.utils.logging import get_logger

logger = get_logger(__name__)

Panel = Literal["graph_stats", "cost_snapshot"]


class SnapshotService:
    """Caches the last pulled GraphStats and CostSnapshot.

    Refreshes never raise. A failed pull clears the panel to ``None``
    ("unavailable") instead of leaving the previous snapshot on display,
    and the failure is kept in ``last_errors`` until the next successful
    pull of that panel. Whichever refresh completes last wins.
    """

    def __init__(self, reader: StatsReader) -> None:
        self._reader = reader
        self._graph_stats: GraphStats | None = None
        self._cost_snapshot: CostSnapshot | None = None
        self._errors: dict[Panel, RefreshError] = {}

    @property
    def graph_stats(self) -> GraphStats | None:
        return self._graph_stats

    @property
    def cost_snapshot(self) -> CostSnapshot | None:
        return self._cost_snapshot

    @property
    def last_errors(self) -> dict[Panel, RefreshError]:
        return dict(self._errors)

    async def refresh_graph_stats(self) -> GraphStats | None:
        try:
            stats = await self._reader.fetch_graph_stats()
        except GraphRAGConsoleError as exc:
            self._graph_stats = None
            self._record_failure("graph_stats", exc)
            return None
        self._graph_stats = stats
        self._errors.pop("graph_stats", None)
        return stats

    async def refresh_cost_snapshot(self) -> CostSnapshot | None:
        try:
            costs = await self._reader.fetch_cost_snapshot()
        except GraphRAGConsoleError as exc:
            self._cost_snapshot = None
            self._record_failure("cost_snapshot", exc)
            return None
        self._cost_snapshot = costs
        self._errors.pop("cost_snapshot", None)
        return costs

    async def refresh_all(self) -> None:
        await self.refresh_graph_stats()
        await self.refresh_cost_snapshot()

    def _record_failure(self, panel: Panel, exc: GraphRAGConsoleError) -> None:
        error = RefreshError(panel, exc)
        self._errors[panel] = error
        logger.warning("snapshot_refresh_failed", panel=panel, error=str(exc))
