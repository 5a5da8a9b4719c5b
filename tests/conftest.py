"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from graphrag_console.clients.transport import Transport

BASE_URL = "http://graphrag.test"

NO_INFO_ANSWER = "I don't have any information about that in the knowledge graph."


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Keep settings independent of the developer's environment."""
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_FORMAT", "console")


class FakeBackend:
    """In-memory GraphRAG backend speaking the real wire format.

    Capitalized words become entities; consecutive entities are linked.
    Every build and query is charged to the cost ledger.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.entities: dict[str, str] = {}
        self.relationships = 0
        self.costs: dict[str, float] = {}
        self.tokens = 0
        self.operations = 0
        self.failures: dict[str, tuple[int, Any]] = {}
        self.unreachable: set[str] = set()

    def fail(self, path: str, status: int, payload: Any = None) -> None:
        self.failures[path] = (status, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, body))

        if path in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if path in self.failures:
            status, payload = self.failures[path]
            return httpx.Response(status, json=payload)

        if (request.method, path) == ("POST", "/graph/build"):
            return httpx.Response(200, json={"result": self._build(body)})
        if (request.method, path) == ("POST", "/graph/query"):
            return httpx.Response(200, json=self._query(body))
        if (request.method, path) == ("POST", "/comparison/query"):
            return httpx.Response(200, json=self._compare(body))
        if (request.method, path) == ("GET", "/graph/stats"):
            return httpx.Response(200, json={"data": self._stats()})
        if (request.method, path) == ("GET", "/costs/current"):
            return httpx.Response(200, json={"data": self._cost_data()})
        return httpx.Response(404, json={"error": f"No route for {path}"})

    def _charge(self, operation: str, cost: float, tokens: int) -> None:
        self.costs[operation] = self.costs.get(operation, 0.0) + cost
        self.tokens += tokens
        self.operations += 1

    def _build(self, body: dict) -> dict:
        if body["clear_existing"]:
            self.entities.clear()
            self.relationships = 0
        names = [w.strip(".,;:!?") for w in body["text"].split() if w[:1].isupper()]
        created = 0
        for name in names:
            if name not in self.entities:
                self.entities[name] = "Organization" if name.endswith("Corp") or name == "Acme" else "Person"
                created += 1
        new_rels = max(len(names) - 1, 0)
        self.relationships += new_rels
        self._charge("entity_extraction", 0.0021, 350)
        return {
            "stats": {"nodes": len(self.entities), "relationships": self.relationships},
            "entities_created": created,
            "relationships_created": new_rels,
            "entities_failed": 0,
        }

    def _query(self, body: dict) -> dict:
        self._charge("query", 0.0007, 120)
        question = body["question"]
        if not self.entities:
            answer, context = NO_INFO_ANSWER, ""
        else:
            answer = f"{', '.join(sorted(self.entities))} appear in the graph."
            context = "; ".join(f"{n}:{t}" for n, t in sorted(self.entities.items()))
        return {
            "answer": answer,
            "context": context,
            "question": question,
            "approach": body["approach"],
        }

    def _compare(self, body: dict) -> dict:
        self._charge("comparison", 0.0019, 400)
        question = body["question"]
        contexts = {
            "graph": f"graph facts for {question}",
            "rag": f"chunks for {question}",
            "hybrid": f"graph facts and chunks for {question}",
        }
        timings = {"graph": (0.12, 0.40), "rag": (0.05, 0.38), "hybrid": (0.16, 0.45)}
        results = {}
        for approach, context in contexts.items():
            retrieval, answer_time = timings[approach]
            results[approach] = {
                "name": f"{approach.upper()} approach",
                "answer": f"{approach} answer",
                "context": context,
                "context_length": len(context),
                "total_time": retrieval + answer_time,
                "retrieval_time": retrieval,
                "answer_time": answer_time,
            }
        return {
            "question": question,
            "results": results,
            "performance_summary": {"fastest": "rag", "richest_context": "hybrid"},
        }

    def _stats(self) -> dict:
        histogram: dict[str, int] = {}
        for label in self.entities.values():
            histogram[label] = histogram.get(label, 0) + 1
        return {
            "nodes": len(self.entities),
            "relationships": self.relationships,
            "entity_types": [{"labels": [k], "count": v} for k, v in histogram.items()],
        }

    def _cost_data(self) -> dict:
        total = sum(self.costs.values())
        return {
            "total_cost": total,
            "total_tokens": self.tokens,
            "total_operations": self.operations,
            "average_cost_per_operation": total / self.operations if self.operations else 0.0,
            "costs_by_operation": dict(self.costs),
        }


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def transport(backend) -> Transport:
    return Transport(BASE_URL, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def transport_for():
    """Build a Transport around an ad-hoc request handler."""

    def _make(handler) -> Transport:
        return Transport(BASE_URL, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def sample_comparison_payload() -> dict:
    return FakeBackend()._compare({"question": "Who is Alice?"})
