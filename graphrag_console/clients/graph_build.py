"""Client for submitting text to the graph ingestion endpoint."""

from __future__ import annotations

from graphrag_console.clients.transport import Transport, parse_response, unwrap
from graphrag_console.models.schemas import BuildResult
from graphrag_console.utils.exceptions import ValidationError
from graphrag_console.utils.logging import get_logger

logger = get_logger(__name__)

BUILD_ENDPOINT = "/graph/build"


def validate_build_text(text: str) -> None:
    if not text or not text.strip():
        raise ValidationError("Please enter text to process")


class GraphBuildClient:
    """Sends raw text to the backend for entity and relationship extraction."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def build(self, text: str, clear_existing: bool = False) -> BuildResult:
        """POST /graph/build. Returns the structural delta of the ingestion.

        The delta is not the final graph size; callers refresh graph stats
        and costs afterwards.
        """
        validate_build_text(text)

        logger.info("graph_build_requested", chars=len(text), clear_existing=clear_existing)
        payload = await self._transport.call(
            BUILD_ENDPOINT,
            "POST",
            {"text": text, "clear_existing": clear_existing},
        )
        result = parse_response(BuildResult, unwrap(payload, "result", BUILD_ENDPOINT), BUILD_ENDPOINT)
        logger.info(
            "graph_build_completed",
            entities_created=result.entities_created,
            relationships_created=result.relationships_created,
            entities_failed=result.entities_failed,
        )
        return result
