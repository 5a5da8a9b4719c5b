"""Display helpers shared by the console views."""

from __future__ import annotations

from graphrag_console.models.schemas import GraphStats


def format_cost(amount: float) -> str:
    return f"${amount:.4f}"


def format_ms(seconds: float) -> str:
    return f"{seconds * 1000:.0f}ms"


def format_tokens(count: int) -> str:
    return f"{count:,}"


def format_density(stats: GraphStats) -> str:
    return f"{stats.density * 100:.1f}%"


def humanize_operation(operation: str) -> str:
    """``entity_extraction`` -> ``Entity Extraction``."""
    return " ".join(word.capitalize() for word in operation.split("_") if word)
