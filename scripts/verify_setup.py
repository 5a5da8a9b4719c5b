"""Verify the GraphRAG backend is reachable and its read endpoints answer."""

from __future__ import annotations

import asyncio
import sys

from graphrag_console.clients.stats import StatsReader
from graphrag_console.clients.transport import Transport
from graphrag_console.config import get_settings
from graphrag_console.utils.exceptions import GraphRAGConsoleError
from graphrag_console.utils.formatting import format_cost, format_density


async def check_graph_stats(reader: StatsReader) -> bool:
    try:
        stats = await reader.fetch_graph_stats()
        print(
            f"[OK] Graph stats: {stats.nodes} nodes, {stats.relationships} relationships, "
            f"density {format_density(stats)}"
        )
        return True
    except GraphRAGConsoleError as exc:
        print(f"[FAIL] Graph stats: {exc}")
        return False


async def check_costs(reader: StatsReader) -> bool:
    try:
        costs = await reader.fetch_cost_snapshot()
        print(
            f"[OK] Cost tracking: {format_cost(costs.total_cost)} over "
            f"{costs.total_operations} operations"
        )
        return True
    except GraphRAGConsoleError as exc:
        print(f"[FAIL] Cost tracking: {exc}")
        return False


async def main() -> None:
    settings = get_settings()
    reader = StatsReader(Transport.from_settings(settings))

    print("=" * 50)
    print(f"GraphRAG Backend Verification ({settings.API_BASE_URL})")
    print("=" * 50)

    results = await asyncio.gather(check_graph_stats(reader), check_costs(reader))

    print("=" * 50)
    print(f"Results: {sum(results)}/{len(results)} checks passed")
    if not all(results):
        print("Some checks failed. Review output above.")
        sys.exit(1)
    print("Backend operational.")


if __name__ == "__main__":
    asyncio.run(main())
