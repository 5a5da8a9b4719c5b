"""Client for single-approach questions against the graph."""

from __future__ import annotations

from typing import Any

from graphrag_console.clients.transport import Transport, parse_response
from graphrag_console.models.schemas import (
    RETRIEVAL_APPROACHES,
    QueryResult,
    RetrievalApproach,
)
from graphrag_console.utils.exceptions import ResponseParsingError
from graphrag_console.utils.logging import get_logger

logger = get_logger(__name__)

QUERY_ENDPOINT = "/graph/query"


class QueryClient:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def query(self, question: str, approach: RetrievalApproach = "hybrid") -> QueryResult:
        """POST /graph/query under one retrieval approach.

        ``comparison`` is not a retrieval approach; route it to
        ``ComparisonClient`` instead.
        """
        assert approach in RETRIEVAL_APPROACHES, f"not a retrieval approach: {approach!r}"

        logger.info("query_dispatched", approach=approach)
        payload = await self._transport.call(
            QUERY_ENDPOINT,
            "POST",
            {"question": question, "approach": approach, "verbose": False},
        )
        if not isinstance(payload, dict):
            raise ResponseParsingError(f"Unexpected response from {QUERY_ENDPOINT}: not an object")

        answered_by = payload.get("approach") or approach
        if answered_by != approach:
            raise ResponseParsingError(
                f"Asked for the {approach} approach but the backend answered with {answered_by}"
            )

        data: dict[str, Any] = {
            **payload,
            "question": payload.get("question") or question,
            "approach": approach,
        }
        return parse_response(QueryResult, data, QUERY_ENDPOINT)
