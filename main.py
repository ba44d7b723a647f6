# main.py

"""Entry point for the price_compare command-line interface."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.models.search_filters import SearchFilters

logger = logging.getLogger("price_compare.main")

SORT_CHOICES = [
    "relevance",
    "price-low",
    "price-high",
    "rating",
    "popularity",
    "reviews",
    "discount",
    "newest",
]


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    platforms = ["all", *Settings.marketplace_ids()]

    parser = argparse.ArgumentParser(
        prog="price_compare",
        description="Indian e-commerce price comparison and deal alerts.",
        epilog=f"Platforms: {', '.join(platforms)}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query.",
    )
    parser.add_argument(
        "-p",
        "--platform",
        choices=platforms,
        default="all",
        help="Limit the search to one marketplace (default: all).",
    )
    parser.add_argument("-c", "--category", default="all")
    parser.add_argument("--min-price", type=int, default=None)
    parser.add_argument("--max-price", type=int, default=None)
    parser.add_argument("--min-rating", type=float, default=None)
    parser.add_argument("--brand", default=None)
    parser.add_argument(
        "--in-stock",
        action="store_true",
        default=False,
        dest="in_stock_only",
        help="Only show products currently in stock.",
    )
    parser.add_argument(
        "--sort",
        choices=SORT_CHOICES,
        default=None,
        dest="sort_by",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--deals",
        action="store_true",
        default=False,
        help="List current deals (filtered by --category / --deal-type).",
    )
    parser.add_argument(
        "--deal-type",
        choices=["all", "flash", "festival", "clearance", "bulk"],
        default="all",
    )
    parser.add_argument(
        "--watch",
        action="append",
        default=None,
        metavar="PRODUCT_ID:TARGET",
        help="Watch a product for a target price (repeatable).",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=3,
        help="Evaluation cycles for --watch, 0 = until interrupted.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between evaluation cycles for --watch.",
    )
    parser.add_argument("--user", default="cli-user")
    parser.add_argument(
        "--stats",
        action="store_true",
        default=False,
        help="Show dashboard statistics for --user.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all marketplaces.",
    )
    return parser


def _filters_from_args(args: argparse.Namespace) -> SearchFilters:
    return SearchFilters(
        query=args.query or "",
        platform=args.platform,
        category=args.category,
        min_price=args.min_price,
        max_price=args.max_price,
        min_rating=args.min_rating,
        brand=args.brand,
        in_stock_only=args.in_stock_only,
        sort_by=args.sort_by,
    )


def main() -> None:
    """Dispatch to the requested command."""
    log_file = setup_logging()
    logger.info("price_compare starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    from src.cli import runner

    try:
        if args.health:
            exit_code = asyncio.run(runner.run_health_check())
        elif args.deals:
            exit_code = runner.run_deals(
                args.category,
                args.deal_type,
                args.output_format,
            )
        elif args.watch:
            exit_code = asyncio.run(
                runner.run_watch(
                    args.watch, args.user, args.cycles, args.interval
                )
            )
        elif args.stats:
            exit_code = runner.run_stats(args.user)
        elif args.query is None:
            parser.print_help(sys.stderr)
            exit_code = 2
        else:
            exit_code = asyncio.run(
                runner.cli_search(
                    _filters_from_args(args), args.output_format
                )
            )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 130
    except Exception:
        logger.critical("Fatal error", exc_info=True)
        raise
    finally:
        logger.info("price_compare shutting down")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
