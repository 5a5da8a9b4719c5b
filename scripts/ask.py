"""Ask the GraphRAG backend a question from the command line.

Usage:
  # Compare all approaches (default)
  python scripts/ask.py "Who is Alice?"

  # One approach
  python scripts/ask.py "Who is Alice?" --approach graph

  # Ingest a text file first, replacing the existing graph
  python scripts/ask.py "Who is Alice?" --build notes.txt --clear-existing

Reads API_BASE_URL from the environment (default http://localhost:5001).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from graphrag_console.config import get_settings
from graphrag_console.models.schemas import (
    APPROACH_IDS,
    ComparisonResult,
    ErrorMessage,
    QueryResult,
    TranscriptEntry,
)
from graphrag_console.services.conversation_service import ConversationStateMachine
from graphrag_console.utils.formatting import format_cost, format_ms, format_tokens
from graphrag_console.utils.logging import setup_logging


def print_reply(reply: TranscriptEntry) -> None:
    content = reply.content
    if isinstance(content, ErrorMessage):
        print(content.message, file=sys.stderr)
    elif isinstance(content, QueryResult):
        print(f"=== {content.approach.capitalize()} approach ===")
        print(content.answer)
        if content.context:
            print()
            print("--- Context ---")
            print(content.context)
    elif isinstance(content, ComparisonResult):
        summary = content.performance_summary
        print("=== Performance Summary ===")
        print(f"  Fastest: {summary.fastest}")
        print(f"  Richest context: {summary.richest_context}")
        for approach, run in content.ordered_runs():
            print()
            print(f"=== {run.name} ({format_ms(run.total_time)}) ===")
            print(run.answer)
            print(
                f"  context: {run.context_length} chars · retrieval "
                f"{format_ms(run.retrieval_time)} · generation {format_ms(run.answer_time)}"
            )


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    setup_logging(args.log_level or settings.LOG_LEVEL, "console")
    machine = ConversationStateMachine.from_settings(settings)

    if args.build:
        path = Path(args.build)
        if not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            return 1
        status = await machine.submit_build(path.read_text(), clear_existing=args.clear_existing)
        print(status.message)
        if status.type == "error":
            return 1

    machine.set_approach(args.approach)
    reply = await machine.submit_question(args.question)
    if reply is None:
        print("Error: question is empty", file=sys.stderr)
        return 1
    print_reply(reply)

    costs = machine.snapshots.cost_snapshot
    if costs is not None:
        print()
        print(
            f"Session cost: {format_cost(costs.total_cost)} · "
            f"{format_tokens(costs.total_tokens)} tokens"
        )
    return 1 if reply.error else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Query a GraphRAG backend")
    parser.add_argument("question", help="Natural-language question")
    parser.add_argument(
        "--approach",
        choices=APPROACH_IDS,
        default="comparison",
        help="Retrieval approach, or 'comparison' to run all (default)",
    )
    parser.add_argument("--build", help="Text file to ingest before asking")
    parser.add_argument(
        "--clear-existing",
        action="store_true",
        help="Clear existing graph data before ingesting --build",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
