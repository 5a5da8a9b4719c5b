"""Unit tests for display formatting helpers."""

from __future__ import annotations

from graphrag_console.models.schemas import GraphStats
from graphrag_console.utils.formatting import (
    format_cost,
    format_density,
    format_ms,
    format_tokens,
    humanize_operation,
)


def test_format_cost():
    assert format_cost(0.0) == "$0.0000"
    assert format_cost(0.12346) == "$0.1235"


def test_format_ms():
    assert format_ms(0.5234) == "523ms"
    assert format_ms(0) == "0ms"


def test_format_tokens():
    assert format_tokens(1234567) == "1,234,567"


def test_format_density():
    assert format_density(GraphStats(nodes=1)) == "0.0%"
    assert format_density(GraphStats(nodes=4, relationships=3)) == "25.0%"


def test_humanize_operation():
    assert humanize_operation("entity_extraction") == "Entity Extraction"
    assert humanize_operation("query") == "Query"
