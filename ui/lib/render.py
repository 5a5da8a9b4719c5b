"""Streamlit rendering of transcript entries and snapshot panels."""

from __future__ import annotations

from typing import assert_never

import streamlit as st

from graphrag_console.models.schemas import (
    BuildStatus,
    ComparisonResult,
    CostSnapshot,
    ErrorMessage,
    GraphStats,
    QueryResult,
    Question,
    TranscriptEntry,
)
from graphrag_console.utils.formatting import (
    format_cost,
    format_density,
    format_ms,
    format_tokens,
    humanize_operation,
)

NO_DATA = "No data available"


def render_entry(entry: TranscriptEntry) -> None:
    content = entry.content
    with st.chat_message(entry.role):
        if isinstance(content, Question):
            st.markdown(content.text)
        elif isinstance(content, ErrorMessage):
            st.error(content.message)
        elif isinstance(content, QueryResult):
            _render_query_result(content)
        elif isinstance(content, ComparisonResult):
            _render_comparison(content)
        else:
            assert_never(content)


def _render_query_result(result: QueryResult) -> None:
    st.markdown(result.question)
    st.caption("Answer:")
    st.markdown(result.answer)
    if result.context:
        with st.expander("Context"):
            st.text(result.context)
    st.caption(f"{result.approach.capitalize()} approach")


def _render_comparison(result: ComparisonResult) -> None:
    st.markdown(result.question)
    summary = result.performance_summary
    st.subheader("Performance Summary")
    c1, c2 = st.columns(2)
    c1.metric("Fastest", summary.fastest.capitalize())
    c2.metric("Richest Context", summary.richest_context.capitalize())

    columns = st.columns(len(result.results))
    for column, (_, run) in zip(columns, result.ordered_runs()):
        with column:
            st.markdown(f"**{run.name}** · {format_ms(run.total_time)}")
            st.caption("Answer:")
            st.markdown(run.answer)
            with st.expander(f"Context ({run.context_length} chars)"):
                st.text(run.context)
            r1, r2 = st.columns(2)
            r1.metric("Retrieval", format_ms(run.retrieval_time))
            r2.metric("Generation", format_ms(run.answer_time))


def render_build_status(status: BuildStatus | None) -> None:
    if status is None:
        return
    if status.type == "success":
        st.success(status.message)
    elif status.type == "info":
        st.info(status.message)
    else:
        st.error(status.message)

    details = status.details
    if details is not None:
        c1, c2, c3 = st.columns(3)
        c1.metric("Entities created", details.entities_created)
        c2.metric("Relationships created", details.relationships_created)
        c3.metric("Entities failed", details.entities_failed)


def render_header(stats: GraphStats | None, costs: CostSnapshot | None) -> None:
    parts = []
    if costs is not None:
        parts.append(f"{format_cost(costs.total_cost)} · {format_tokens(costs.total_tokens)} tokens")
    if stats is not None:
        parts.append(f"{stats.nodes} Nodes · {stats.relationships} Relationships")
    if parts:
        st.caption("  |  ".join(parts))


def render_graph_panel(stats: GraphStats | None) -> None:
    st.subheader("Graph Statistics")
    if stats is None:
        st.info(NO_DATA)
        return
    c1, c2, c3 = st.columns(3)
    c1.metric("Nodes", stats.nodes)
    c2.metric("Relationships", stats.relationships)
    c3.metric("Density", format_density(stats))

    st.subheader("Node Types")
    shares = stats.entity_type_shares()
    if not shares:
        st.info(NO_DATA)
        return
    for entity_type, share in shares:
        label = ", ".join(entity_type.labels) or "(unlabelled)"
        st.progress(share, text=f"{label}: {entity_type.count}")


def render_cost_panel(costs: CostSnapshot | None) -> None:
    st.subheader("Cost Tracking")
    if costs is None:
        st.info(NO_DATA)
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total cost", format_cost(costs.total_cost))
    c2.metric("Total tokens", format_tokens(costs.total_tokens))
    c3.metric("Operations", costs.total_operations)
    c4.metric("Avg cost / op", format_cost(costs.average_cost_per_operation))

    st.subheader("Cost Breakdown")
    breakdown = costs.sorted_costs()
    if not breakdown:
        st.info("No cost breakdown available")
        return
    for operation, cost in breakdown:
        st.markdown(f"{humanize_operation(operation)}: **{format_cost(cost)}**")
