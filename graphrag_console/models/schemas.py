"""Pydantic models for backend payloads and the conversation transcript."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ApproachId = Literal["graph", "rag", "hybrid", "comparison"]
RetrievalApproach = Literal["graph", "rag", "hybrid"]

COMPARISON: ApproachId = "comparison"
RETRIEVAL_APPROACHES: tuple[RetrievalApproach, ...] = ("graph", "rag", "hybrid")
APPROACH_IDS: tuple[ApproachId, ...] = (COMPARISON, *RETRIEVAL_APPROACHES)


class _Payload(BaseModel):
    """Backend payload: tolerant of unknown fields, immutable after parsing."""

    model_config = ConfigDict(extra="ignore", frozen=True)


# ── Build ────────────────────────────────────────────────────────────


class BuildStats(_Payload):
    nodes: int = Field(default=0, ge=0)
    relationships: int = Field(default=0, ge=0)


class BuildResult(_Payload):
    stats: BuildStats = Field(default_factory=BuildStats)
    entities_created: int = Field(default=0, ge=0)
    relationships_created: int = Field(default=0, ge=0)
    entities_failed: int = Field(default=0, ge=0)


class BuildStatus(_Payload):
    """Operator-facing status of the most recent build attempt."""

    type: Literal["info", "success", "error"]
    message: str
    details: BuildResult | None = None

    @classmethod
    def clearing(cls) -> BuildStatus:
        return cls(type="info", message="Clearing existing graph data...")

    @classmethod
    def succeeded(cls, result: BuildResult) -> BuildStatus:
        return cls(
            type="success",
            message=(
                f"Graph built successfully! Created {result.stats.nodes} nodes "
                f"and {result.stats.relationships} relationships."
            ),
            details=result,
        )

    @classmethod
    def failed(cls, message: str) -> BuildStatus:
        return cls(type="error", message=f"Error building graph: {message}")


# ── Query / comparison ───────────────────────────────────────────────


class Question(_Payload):
    kind: Literal["question"] = "question"
    text: str


class ErrorMessage(_Payload):
    kind: Literal["error"] = "error"
    message: str


class QueryResult(_Payload):
    kind: Literal["query_result"] = "query_result"
    question: str
    answer: str
    context: str = ""
    approach: RetrievalApproach

    @model_validator(mode="before")
    @classmethod
    def _null_context_to_empty(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("context") is None:
            data = {**data, "context": ""}
        return data


class ApproachRun(_Payload):
    name: str
    answer: str
    context: str = ""
    context_length: int = Field(ge=0)
    total_time: float = Field(ge=0)
    retrieval_time: float = Field(default=0.0, ge=0)
    answer_time: float = Field(default=0.0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _default_context_length(cls, data: Any) -> Any:
        if isinstance(data, dict):
            context = data.get("context") or ""
            data = {**data, "context": context}
            if data.get("context_length") is None:
                data["context_length"] = len(context)
        return data

    @model_validator(mode="after")
    def _check_context_length(self) -> ApproachRun:
        if self.context_length != len(self.context):
            raise ValueError(
                f"context_length {self.context_length} does not match "
                f"context of {len(self.context)} chars"
            )
        return self


class PerformanceSummary(_Payload):
    fastest: RetrievalApproach
    richest_context: RetrievalApproach


class ComparisonResult(_Payload):
    kind: Literal["comparison_result"] = "comparison_result"
    question: str = ""
    results: dict[RetrievalApproach, ApproachRun]
    performance_summary: PerformanceSummary

    @model_validator(mode="after")
    def _check_results_cover_approaches(self) -> ComparisonResult:
        missing = set(RETRIEVAL_APPROACHES) - set(self.results)
        if missing:
            raise ValueError(f"comparison results missing approaches: {sorted(missing)}")
        # Summary keys are retrieval approaches, so they are always present once coverage holds
        return self

    def ordered_runs(self) -> list[tuple[RetrievalApproach, ApproachRun]]:
        return [(approach, self.results[approach]) for approach in RETRIEVAL_APPROACHES]


TranscriptContent = Annotated[
    Union[Question, QueryResult, ComparisonResult, ErrorMessage],
    Field(discriminator="kind"),
]


class TranscriptEntry(BaseModel):
    """One immutable line of the conversation log."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: TranscriptContent
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    approach: ApproachId | None = None
    is_comparison: bool = False
    error: bool = False


# ── Snapshots ────────────────────────────────────────────────────────


class EntityTypeCount(_Payload):
    labels: list[str] = Field(default_factory=list)
    count: int = Field(default=0, ge=0)


class GraphStats(_Payload):
    nodes: int = Field(default=0, ge=0)
    relationships: int = Field(default=0, ge=0)
    entity_types: list[EntityTypeCount] = Field(default_factory=list)

    @property
    def density(self) -> float:
        """Directed edge density; 0 for graphs with fewer than two nodes."""
        if self.nodes <= 1:
            return 0.0
        return self.relationships / (self.nodes * (self.nodes - 1))

    def sorted_entity_types(self) -> list[EntityTypeCount]:
        return sorted(self.entity_types, key=lambda et: et.count, reverse=True)

    def entity_type_shares(self) -> list[tuple[EntityTypeCount, float]]:
        """Entity types by descending count, each with its fraction of the largest count."""
        ordered = self.sorted_entity_types()
        largest = max((et.count for et in ordered), default=0)
        return [(et, et.count / largest if largest else 0.0) for et in ordered]


class CostSnapshot(_Payload):
    total_cost: float = Field(default=0.0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    total_operations: int = Field(default=0, ge=0)
    average_cost_per_operation: float = Field(default=0.0, ge=0)
    costs_by_operation: dict[str, float] = Field(default_factory=dict)

    def sorted_costs(self) -> list[tuple[str, float]]:
        return sorted(self.costs_by_operation.items(), key=lambda item: item[1], reverse=True)
