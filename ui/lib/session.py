"""Per-browser-session wiring of the conversation state machine."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import streamlit as st

from graphrag_console.config import get_settings
from graphrag_console.services.conversation_service import ConversationStateMachine
from graphrag_console.utils.logging import setup_logging_from_settings

T = TypeVar("T")

_MACHINE_KEY = "conversation"
_BASE_URL_KEY = "api_base_url"


def default_base_url() -> str:
    return get_settings().API_BASE_URL


def get_machine(base_url: str | None = None) -> ConversationStateMachine:
    """Return this session's state machine, creating it on first use.

    Changing ``base_url`` starts a fresh session against the new backend.
    """
    settings = get_settings()
    if base_url:
        settings = settings.model_copy(update={"API_BASE_URL": base_url.rstrip("/")})

    machine = st.session_state.get(_MACHINE_KEY)
    if machine is None or st.session_state.get(_BASE_URL_KEY) != settings.API_BASE_URL:
        setup_logging_from_settings(settings)
        machine = ConversationStateMachine.from_settings(settings)
        run(machine.load_initial())
        st.session_state[_MACHINE_KEY] = machine
        st.session_state[_BASE_URL_KEY] = settings.API_BASE_URL
    return machine


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Drive one transition to completion; Streamlit reruns are synchronous."""
    return asyncio.run(coro)
