#!/usr/bin/env python3
"""AI Tool Advisor CLI."""

import argparse
import logging
import sys

from config.settings import Settings
from orchestrator import ToolAdvisorOrchestrator
from retrieval.catalog_loader import CatalogUnavailableError
from schemas.catalog import CatalogEntry
from schemas.conversation import ConversationMessage


def format_tool_card(entry: CatalogEntry) -> str:
    """One-line summary of a catalog entry."""
    price = "Free" if entry.pricing.free else (entry.pricing.starting_price or "Paid")
    return f"- {entry.name} ({entry.company}) [{entry.category}] {price} {entry.url}"


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="AI Tool Advisor - find the right AI tool for the job"
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--question",
        "-q",
        type=str,
        help="Ask the advisor a question (requires an LLM API key)"
    )
    mode.add_argument(
        "--search",
        "-s",
        type=str,
        help="Run a keyword search against the catalog without the LLM"
    )
    mode.add_argument(
        "--categories",
        action="store_true",
        help="List catalog categories"
    )
    parser.add_argument("--category", type=str, help="Category filter for --search")
    parser.add_argument("--free-only", action="store_true", help="Only tools with a free tier")
    parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="Number of search results (default: 5, max: 10)"
    )
    parser.add_argument("--catalog-path", type=str, help="Path to the tools JSON catalog")
    parser.add_argument(
        "--provider",
        type=str,
        choices=["openai", "anthropic"],
        help="LLM provider (default: LLM_PROVIDER env var or openai)"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    settings = Settings(
        catalog_path=args.catalog_path,
        llm_provider=args.provider,
        verbose=args.verbose,
    )

    try:
        orchestrator = ToolAdvisorOrchestrator(settings=settings)
    except CatalogUnavailableError as e:
        print(f"Catalog unavailable: {e}", file=sys.stderr)
        sys.exit(2)

    engine = orchestrator.engine

    if args.categories:
        for category in engine.get_categories():
            print(f"{category.count:4d}  {category.name}")
        print(f"\n{engine.get_total_tool_count()} tools total")
        return

    if args.search is not None:
        results = engine.search(
            query=args.search,
            category=args.category,
            free_only=args.free_only,
            limit=args.limit
        )
        if not results:
            print("No matching tools.")
        for entry in results:
            print(format_tool_card(entry))
        return

    try:
        result = orchestrator.chat(
            [ConversationMessage(role="user", content=args.question)],
            on_status=lambda status: print(f"... {status}", file=sys.stderr)
        )
    except Exception as e:
        print(f"Error processing question: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    print("\n" + "=" * 60)
    print("ANSWER")
    print("=" * 60 + "\n")
    print(result.text)
    if result.tool_cards:
        print("\nTools mentioned:")
        for entry in result.tool_cards:
            print(format_tool_card(entry))


if __name__ == "__main__":
    main()
