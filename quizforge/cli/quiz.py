"""Command-line access to the content selector.

Usage::

    python -m quizforge.cli select python --difficulty easy --count 5
    python -m quizforge.cli select "web development" --json
    python -m quizforge.cli topics
    python -m quizforge.cli stats --json

Builds the same component set as a long-running process, runs a single
operation and shuts down.  With ``--json`` all logging goes to stderr so
stdout carries only the JSON document.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from typing import Any

from quizforge.models.content import ContentRecord
from quizforge.utils.errors import QuizForgeError
from quizforge.utils.logging import configure_logging, get_logger


def _suppress_logs() -> None:
    """Send logging to stderr at WARNING+ so stdout stays machine-readable."""
    configure_logging(log_level="WARNING", stream=sys.stderr)


def _format_records(records: list[ContentRecord]) -> str:
    lines: list[str] = []
    for number, record in enumerate(records, start=1):
        lines.append(f"{number}. {record.prompt}  [{record.difficulty_label}]")
        for index, choice in enumerate(record.choices):
            marker = "*" if index == record.correct_choice_index else " "
            lines.append(f"   {marker} {chr(ord('A') + index)}) {choice}")
        lines.append(f"   Concept: {record.concept}")
        lines.append(f"   Hint: {record.hint}")
        lines.append(f"   Explanation: {record.explanation}")
        lines.append("")
    return "\n".join(lines).rstrip()


async def _run(args: argparse.Namespace) -> int:
    # Imported late so logging is configured before module loggers are cached.
    from quizforge.main import build_components, shutdown, startup

    components = build_components()
    await startup(components, background=False)
    selector = components["selector"]
    curated = components["curated_store"]
    try:
        if args.command == "select":
            records = await selector.select_content(args.topic, args.difficulty, args.count)
            if args.json_output:
                print(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
            else:
                print(_format_records(records))

        elif args.command == "topics":
            topics = sorted(selector.get_available_topics())
            counts = {topic: selector.get_question_count_for_topic(topic) for topic in topics}
            if args.json_output:
                print(json.dumps(counts, indent=2))
            else:
                for topic, count in counts.items():
                    print(f"{topic:<20} {count:>4}")

        elif args.command == "stats":
            report: dict[str, Any] = {
                "tier2_enabled": components["cache"].tier2_enabled,
                "curated_loaded": curated.is_loaded,
                "curated_topics": len(curated.topics()),
                "generator": components["primary_llm_name"],
                "generator_available": components["generator"].is_available(),
                "llm_providers": components["config"]["llm"]["available_providers"],
            }
            if args.json_output:
                print(json.dumps(report, indent=2))
            else:
                for key, value in report.items():
                    print(f"{key}: {value}")
    except QuizForgeError as exc:
        get_logger(__name__).error("cli_command_failed", command=args.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await shutdown(components)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m quizforge.cli",
        description="Select quiz questions from the generator or the curated bank.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON (logs go to stderr).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    select = subparsers.add_parser("select", help="Select questions for a topic.")
    select.add_argument("topic", help="Quiz topic, e.g. 'python'.")
    select.add_argument("--difficulty", "-d", default="medium", help="easy, medium or hard.")
    select.add_argument("--count", "-n", type=int, default=5, help="Number of questions.")
    select.add_argument("--json", action="store_true", dest="json_output", default=argparse.SUPPRESS)

    topics = subparsers.add_parser("topics", help="List curated topics and question counts.")
    topics.add_argument("--json", action="store_true", dest="json_output", default=argparse.SUPPRESS)

    stats = subparsers.add_parser("stats", help="Show cache tier and content source status.")
    stats.add_argument("--json", action="store_true", dest="json_output", default=argparse.SUPPRESS)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    args = _build_parser().parse_args(argv)
    if args.json_output:
        _suppress_logs()
    else:
        configure_logging(log_level=os.environ.get("LOG_LEVEL", "INFO"))
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
