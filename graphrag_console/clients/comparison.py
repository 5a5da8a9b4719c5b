"""Client for running one question under every retrieval approach."""

from __future__ import annotations

from graphrag_console.clients.transport import Transport, parse_response
from graphrag_console.models.schemas import ComparisonResult
from graphrag_console.utils.exceptions import ResponseParsingError
from graphrag_console.utils.logging import get_logger

logger = get_logger(__name__)

COMPARISON_ENDPOINT = "/comparison/query"


class ComparisonClient:
    """Single round trip; the backend runs all approaches and ranks them.

    ``performance_summary`` is taken from the backend as-is. Timings there
    may include server-side effects (cache warmth) the client cannot see.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def compare(self, question: str) -> ComparisonResult:
        logger.info("comparison_dispatched")
        payload = await self._transport.call(COMPARISON_ENDPOINT, "POST", {"question": question})
        if not isinstance(payload, dict):
            raise ResponseParsingError(
                f"Unexpected response from {COMPARISON_ENDPOINT}: not an object"
            )

        result = parse_response(
            ComparisonResult,
            {**payload, "question": payload.get("question") or question},
            COMPARISON_ENDPOINT,
        )
        logger.info(
            "comparison_completed",
            fastest=result.performance_summary.fastest,
            richest_context=result.performance_summary.richest_context,
        )
        return result
