"""GraphRAG Streamlit console, separate from the client package it drives."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow importing ui.lib when running as: streamlit run ui/app.py
if str(Path(__file__).resolve().parent) not in sys.path:
    sys.path.insert(0, str(Path(__file__).resolve().parent))

import streamlit as st

from lib.render import (
    render_build_status,
    render_cost_panel,
    render_entry,
    render_graph_panel,
    render_header,
)
from lib.session import default_base_url, get_machine, run

from graphrag_console.models.schemas import BuildStatus
from graphrag_console.services.conversation_service import SAMPLE_QUESTIONS

APPROACH_LABELS = {
    "comparison": "Compare All",
    "hybrid": "Hybrid",
    "graph": "Graph Only",
    "rag": "RAG Only",
}


# Page config
st.set_page_config(
    page_title="GraphRAG System",
    page_icon="🕸️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Sidebar navigation
st.sidebar.title("GraphRAG System")
st.sidebar.caption("Build knowledge graphs and query with natural language")
nav = st.sidebar.radio(
    "Section",
    ["Build Graph", "Query", "Analytics"],
    label_visibility="collapsed",
)

api_url = st.sidebar.text_input(
    "API base URL",
    value=default_base_url(),
    help="Backend API root, e.g. http://localhost:5001",
)
machine = get_machine(api_url)

if st.sidebar.button("Refresh stats"):
    run(machine.load_initial())

render_header(machine.snapshots.graph_stats, machine.snapshots.cost_snapshot)

# ----- Build tab -----
if nav == "Build Graph":
    st.header("Build Knowledge Graph")

    with st.form("build_form"):
        build_text = st.text_area(
            "Text",
            value=machine.build_text,
            height=240,
            placeholder="Paste text to extract entities and relationships from...",
        )
        clear_existing = st.checkbox(
            "Clear existing graph data before building",
            value=machine.clear_existing,
        )
        submitted = st.form_submit_button("Build graph", disabled=machine.is_building)

    if submitted:
        machine.set_build_text(build_text)
        machine.set_clear_existing(clear_existing)
        clearing_notice = st.empty()
        if clear_existing:
            clearing_notice.info(BuildStatus.clearing().message)
        with st.spinner("Building graph..."):
            run(machine.submit_build())
        clearing_notice.empty()

    render_build_status(machine.build_status)

# ----- Query tab -----
elif nav == "Query":
    st.header("Query")

    col1, col2 = st.columns([4, 1])
    with col1:
        approach = st.radio(
            "Query Approach",
            list(APPROACH_LABELS),
            index=list(APPROACH_LABELS).index(machine.selected_approach),
            format_func=APPROACH_LABELS.get,
            horizontal=True,
        )
        machine.set_approach(approach)
    with col2:
        if st.button("Clear chat", disabled=not machine.transcript):
            machine.reset_transcript()

    if not machine.transcript:
        st.caption("Ask a question about your knowledge graph, or try one of these:")
        for sample in SAMPLE_QUESTIONS:
            if st.button(sample, disabled=machine.is_querying):
                machine.set_input(sample)
                with st.spinner(machine.pending_label):
                    run(machine.submit_question())
                st.rerun()

    for entry in machine.transcript:
        render_entry(entry)

    question = st.chat_input("Ask a question...", disabled=machine.is_querying)
    if question:
        machine.set_input(question)
        with st.spinner(machine.pending_label):
            run(machine.submit_question())
        st.rerun()

# ----- Analytics tab -----
elif nav == "Analytics":
    st.header("Analytics")
    col1, col2 = st.columns(2)
    with col1:
        render_graph_panel(machine.snapshots.graph_stats)
    with col2:
        render_cost_panel(machine.snapshots.cost_snapshot)

    errors = machine.snapshots.last_errors
    for error in errors.values():
        st.caption(str(error))
