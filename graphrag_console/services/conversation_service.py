"""Conversation state machine: transcript, approach selection, in-flight guards."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Literal

import structlog

from graphrag_console.clients.comparison import ComparisonClient
from graphrag_console.clients.graph_build import GraphBuildClient, validate_build_text
from graphrag_console.clients.query import QueryClient
from graphrag_console.clients.stats import StatsReader
from graphrag_console.clients.transport import Transport
from graphrag_console.config import Settings
from graphrag_console.models.schemas import (
    APPROACH_IDS,
    COMPARISON,
    ApproachId,
    BuildStatus,
    ComparisonResult,
    ErrorMessage,
    QueryResult,
    Question,
    TranscriptEntry,
)
from graphrag_console.services.snapshot_service import SnapshotService
from graphrag_console.utils.exceptions import GraphRAGConsoleError, ValidationError
from graphrag_console.utils.logging import get_logger

logger = get_logger(__name__)

QueryPhase = Literal["idle", "awaiting_query_response"]
BuildPhase = Literal["idle", "awaiting_build_response"]

SAMPLE_QUESTIONS: tuple[str, ...] = (
    "Who is Donald Trump?",
    "What companies did Donald Trump own?",
    "Where did Donald Trump go to school?",
    "List all entities in the graph",
)


class Transcript:
    """Append-only conversation log.

    A question goes in with ``append_pending`` and gets a handle; its reply
    goes in with ``resolve_pending``. ``clear`` drops entries and any
    outstanding handles.
    """

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []
        self._pending: set[int] = set()
        self._handles = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        return tuple(self._entries)

    def append_pending(self, entry: TranscriptEntry) -> int:
        self._entries.append(entry)
        handle = next(self._handles)
        self._pending.add(handle)
        return handle

    def resolve_pending(self, handle: int, entry: TranscriptEntry) -> None:
        if handle not in self._pending:
            raise ValueError(f"no pending transcript entry for handle {handle}")
        self._pending.discard(handle)
        self._entries.append(entry)

    def is_pending(self, handle: int) -> bool:
        return handle in self._pending

    def clear(self) -> None:
        self._entries.clear()
        self._pending.clear()


@dataclass
class ConversationState:
    """Mutable UI state owned by ``ConversationStateMachine``."""

    transcript: Transcript = field(default_factory=Transcript)
    selected_approach: ApproachId = COMPARISON
    input_text: str = ""
    query_phase: QueryPhase = "idle"
    build_text: str = ""
    clear_existing: bool = False
    build_phase: BuildPhase = "idle"
    build_status: BuildStatus | None = None


class ConversationStateMachine:
    """Orchestrates queries, comparisons and graph builds.

    At most one query is in flight at a time; ``submit_question`` while
    awaiting is a no-op. Builds are guarded the same way but are
    independent of queries. No retries, no cancellation.
    """

    def __init__(
        self,
        query_client: QueryClient,
        comparison_client: ComparisonClient,
        build_client: GraphBuildClient,
        snapshots: SnapshotService,
    ) -> None:
        self._query_client = query_client
        self._comparison_client = comparison_client
        self._build_client = build_client
        self._snapshots = snapshots
        self._state = ConversationState()

    @classmethod
    def from_settings(cls, settings: Settings) -> ConversationStateMachine:
        transport = Transport.from_settings(settings)
        return cls(
            QueryClient(transport),
            ComparisonClient(transport),
            GraphBuildClient(transport),
            SnapshotService(StatsReader(transport)),
        )

    # ── Read-only views ──

    @property
    def transcript(self) -> tuple[TranscriptEntry, ...]:
        return self._state.transcript.entries

    @property
    def selected_approach(self) -> ApproachId:
        return self._state.selected_approach

    @property
    def input_text(self) -> str:
        return self._state.input_text

    @property
    def build_text(self) -> str:
        return self._state.build_text

    @property
    def clear_existing(self) -> bool:
        return self._state.clear_existing

    @property
    def build_status(self) -> BuildStatus | None:
        return self._state.build_status

    @property
    def is_querying(self) -> bool:
        return self._state.query_phase == "awaiting_query_response"

    @property
    def is_building(self) -> bool:
        return self._state.build_phase == "awaiting_build_response"

    @property
    def snapshots(self) -> SnapshotService:
        return self._snapshots

    @property
    def pending_label(self) -> str:
        if self._state.selected_approach == COMPARISON:
            return "Comparing approaches..."
        return "Thinking..."

    # ── Plain field updates ──

    def set_approach(self, approach: ApproachId) -> None:
        """Select the approach for the next submission; in-flight calls keep theirs."""
        if approach not in APPROACH_IDS:
            raise ValueError(f"unknown approach: {approach!r}")
        self._state.selected_approach = approach

    def set_input(self, text: str) -> None:
        self._state.input_text = text

    def set_build_text(self, text: str) -> None:
        self._state.build_text = text

    def set_clear_existing(self, clear_existing: bool) -> None:
        self._state.clear_existing = clear_existing

    def reset_transcript(self) -> None:
        self._state.transcript.clear()
        logger.info("transcript_reset")

    # ── Transitions ──

    async def load_initial(self) -> None:
        await self._snapshots.refresh_all()

    async def submit_question(self, question: str | None = None) -> TranscriptEntry | None:
        """Ask ``question`` (or the current input) under the selected approach.

        Returns the assistant entry appended for it, or ``None`` when the
        submission was ignored (blank question or a query already in flight).
        """
        text = self._state.input_text if question is None else question
        if not text.strip():
            return None
        if self.is_querying:
            logger.debug("query_submission_ignored", reason="query_in_flight")
            return None

        approach = self._state.selected_approach
        transcript = self._state.transcript
        handle = transcript.append_pending(
            TranscriptEntry(role="user", content=Question(text=text))
        )
        self._state.input_text = ""
        self._state.query_phase = "awaiting_query_response"

        try:
            with structlog.contextvars.bound_contextvars(submission=handle, approach=approach):
                try:
                    content = await self._dispatch(text, approach)
                except GraphRAGConsoleError as exc:
                    logger.warning("query_failed", error=str(exc))
                    reply = TranscriptEntry(
                        role="assistant",
                        content=ErrorMessage(message=f"Error: {exc}"),
                        error=True,
                    )
                    self._resolve(handle, reply)
                else:
                    reply = TranscriptEntry(
                        role="assistant",
                        content=content,
                        approach=approach,
                        is_comparison=approach == COMPARISON,
                    )
                    self._resolve(handle, reply)
                    await self._snapshots.refresh_cost_snapshot()
        finally:
            self._state.query_phase = "idle"
        return reply

    async def submit_build(
        self,
        text: str | None = None,
        clear_existing: bool | None = None,
    ) -> BuildStatus | None:
        """Send text for ingestion, then refresh both snapshots whatever the outcome.

        Returns the resulting status, or ``None`` if a build is already running.
        """
        text = self._state.build_text if text is None else text
        clear = self._state.clear_existing if clear_existing is None else clear_existing
        if self.is_building:
            logger.debug("build_submission_ignored", reason="build_in_flight")
            return None

        try:
            validate_build_text(text)
        except ValidationError as exc:
            self._state.build_status = BuildStatus(type="error", message=str(exc))
            return self._state.build_status

        self._state.build_phase = "awaiting_build_response"
        # Advisory only: the backend does not report the clearing phase separately
        self._state.build_status = BuildStatus.clearing() if clear else None

        try:
            try:
                result = await self._build_client.build(text, clear)
            except GraphRAGConsoleError as exc:
                logger.warning("graph_build_failed", error=str(exc))
                status = BuildStatus.failed(str(exc))
            else:
                status = BuildStatus.succeeded(result)
            self._state.build_status = status
            await self._snapshots.refresh_all()
        finally:
            self._state.build_phase = "idle"
        return status

    async def _dispatch(self, question: str, approach: ApproachId) -> QueryResult | ComparisonResult:
        if approach == COMPARISON:
            return await self._comparison_client.compare(question)
        return await self._query_client.query(question, approach)

    def _resolve(self, handle: int, reply: TranscriptEntry) -> None:
        transcript = self._state.transcript
        if not transcript.is_pending(handle):
            # Transcript was reset while the call was in flight
            logger.info("late_reply_dropped", handle=handle)
            return
        transcript.resolve_pending(handle, reply)
