#!/usr/bin/env python3
"""answerscope command line: print the AI answer for a search question."""

import argparse
import asyncio
import sys
from typing import List, Optional

from .api import get_answer
from .config import SearchOptions
from .logging_setup import configure_logging
from .models import ExtractionResult

USAGE = """Usage: answerscope "your question"
       python -m answerscope_core "your question"
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="answerscope",
        description="Extract the AI-generated answer panel for a search question",
        add_help=False,
    )
    parser.add_argument("question", nargs="*", help="Question text (all words are joined)")
    return parser


def format_result(result: ExtractionResult) -> str:
    lines = [result.text or ""]
    if result.sources:
        lines.append("")
        lines.append("Sources:")
        for index, source in enumerate(result.sources, 1):
            lines.append(f"{index}. {source.title}")
            lines.append(f"   {source.url} ({source.domain})")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)
    query = " ".join(args.question).strip()
    if not query:
        print(USAGE)
        return 1

    configure_logging()
    options = SearchOptions.from_config()
    result = asyncio.run(get_answer(query, options))

    if result.success:
        print(format_result(result))
        return 0
    print(f"Error: {result.error}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
