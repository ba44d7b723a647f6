# src/cli/runner.py

"""Headless CLI commands built on the price_compare services."""

import asyncio
import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.errors import PriceCompareError
from src.models.deal import Deal
from src.models.price_alert import PriceAlert
from src.models.product import Product
from src.models.search_filters import SearchFilters
from src.services.alert_evaluator import PriceAlertEvaluator
from src.services.alert_service import AlertService
from src.services.deal_service import DealService
from src.services.notifier import ConsoleNotifier, format_inr
from src.services.search_orchestrator import SearchOrchestrator
from src.services.stats_service import StatsService
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("price_compare.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _platform_label(platform: str) -> str:
    entry = Settings.get_marketplace(platform)
    return entry["label"] if entry else platform


def _products_to_dicts(products: list[Product]) -> list[dict[str, Any]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            "id": p.id,
            "sku": p.sku,
            "name": p.name,
            "brand": p.brand,
            "category": p.category,
            "platform": p.platform,
            "price": p.price,
            "original_price": p.original_price,
            "discount_percent": p.discount_percent,
            "currency": p.currency,
            "rating": p.rating,
            "reviews": p.reviews,
            "in_stock": p.in_stock,
            "url": p.affiliate_url,
            "last_updated": p.last_updated.isoformat(),
        }
        for p in products
    ]


def _deals_to_dicts(deals: list[Deal]) -> list[dict[str, Any]]:
    return [
        {
            "id": d.id,
            "product_id": d.product_id,
            "title": d.title,
            "platform": d.platform,
            "category": d.category,
            "original_price": d.original_price,
            "sale_price": d.sale_price,
            "discount": d.discount,
            "deal_type": d.deal_type.value,
            "is_hot": d.is_hot,
            "is_trending": d.is_trending,
            "expires_at": d.expires_at.isoformat(),
            "time_left": d.time_left(),
        }
        for d in deals
    ]


def _dump_json(rows: list[dict[str, Any]] | dict[str, Any]) -> None:
    json.dump(rows, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_products(products: list[Product]) -> None:
    """Render a Rich table of products to stdout, in result order."""
    table = Table(
        title="Search Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Off", justify="right")
    table.add_column("Rating", justify="center")
    table.add_column("Stock", justify="center")
    table.add_column("Platform", style="magenta")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.name[:50],
            format_inr(p.price),
            f"{p.discount_percent}%" if p.discount_percent else "—",
            f"{p.rating:.1f} ({p.reviews:,})",
            "✓" if p.in_stock else "✗",
            _platform_label(p.platform),
        )

    Console().print(table)


def _print_deals(deals: list[Deal]) -> None:
    table = Table(title="Deals", show_lines=True, title_style="bold cyan")
    table.add_column("Deal", max_width=45)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Was", justify="right", style="dim")
    table.add_column("Off", justify="right")
    table.add_column("Type")
    table.add_column("Ends in", justify="right")
    table.add_column("Platform", style="magenta")

    for d in deals:
        badges = ("🔥" if d.is_hot else "") + ("📈" if d.is_trending else "")
        table.add_row(
            f"{d.title[:42]} {badges}".strip(),
            format_inr(d.sale_price),
            format_inr(d.original_price),
            f"{d.discount}%",
            d.deal_type.value,
            d.time_left(),
            _platform_label(d.platform),
        )

    Console().print(table)


def _print_alerts(alerts: list[PriceAlert]) -> None:
    table = Table(
        title="Price Alerts", show_lines=True, title_style="bold cyan"
    )
    table.add_column("Product", max_width=45)
    table.add_column("Target", justify="right")
    table.add_column("Current", justify="right", style="green")
    table.add_column("Status", justify="center")

    for a in alerts:
        if a.notification_sent:
            status = "[green]🔔 sent[/green]"
        elif a.is_active:
            status = "[yellow]watching[/yellow]"
        else:
            status = "[dim]inactive[/dim]"
        table.add_row(
            a.product_name[:45],
            format_inr(a.target_price),
            format_inr(a.current_price),
            status,
        )

    Console().print(table)


async def cli_search(
    filters: SearchFilters,
    output_format: str = "json",
    store: CatalogStore | None = None,
) -> int:
    """Run one search and print results; returns a process exit code."""
    catalog = store or CatalogStore.from_seed()
    orchestrator = SearchOrchestrator(catalog)

    _err.print(
        f"[bold]Searching:[/bold] {filters.query}  "
        f"[dim]platform={filters.platform or 'all'}[/dim]"
    )
    result = await orchestrator.search(filters.query, filters)

    if not result.searched:
        _err.print("[yellow]Empty query, nothing searched.[/yellow]")
        return 1

    for error_msg in result.errors:
        _err.print(f"[dim]Source unavailable: {error_msg}[/dim]")

    if not result.products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    parts: list[str] = [
        f"{result.live_count} live",
        f"{result.fallback_count} catalog",
    ]
    if result.excluded_count:
        parts.append(f"{result.excluded_count} filtered")
    if result.deduplicated_count:
        parts.append(f"{result.deduplicated_count} deduped")
    if result.invalid_count:
        parts.append(f"{result.invalid_count} invalid")
    _err.print(
        f"[green]✓ {len(result.products)} products"
        f" ({', '.join(parts)})[/green]"
    )

    if output_format == "table":
        _print_products(result.products)
    else:
        _dump_json(_products_to_dicts(result.products))
    return 0


def run_deals(
    category: str | None,
    deal_type: str | None,
    output_format: str = "table",
    store: CatalogStore | None = None,
) -> int:
    """Print current deals, optionally filtered."""
    deals = DealService(store or CatalogStore.from_seed()).get_deals(
        category, deal_type
    )
    if not deals:
        _err.print("[yellow]No deals match.[/yellow]")
        return 1
    if output_format == "table":
        _print_deals(deals)
    else:
        _dump_json(_deals_to_dicts(deals))
    return 0


def parse_watch_target(arg: str) -> tuple[str, int]:
    """Parse a ``PRODUCT_ID:TARGET`` watch argument.

    Raises ``ValueError`` on malformed arguments.
    """
    product_id, sep, target = arg.partition(":")
    if not sep or not product_id.strip() or not target.strip():
        msg = f"expected PRODUCT_ID:TARGET, got '{arg}'"
        raise ValueError(msg)
    return product_id.strip(), int(target.strip())


async def run_watch(
    watch_targets: list[str],
    user_id: str,
    cycles: int,
    interval: float | None = None,
    store: CatalogStore | None = None,
) -> int:
    """Create alerts and run the evaluator for ``cycles`` cycles.

    ``cycles=0`` runs until interrupted.
    """
    catalog = store or CatalogStore.from_seed()
    alerts = AlertService(catalog)
    for arg in watch_targets:
        try:
            product_id, target = parse_watch_target(arg)
            alert = alerts.create_price_alert(product_id, target, user_id)
        except (ValueError, PriceCompareError) as exc:
            _err.print(f"[red]Skipping alert '{arg}': {exc}[/red]")
            continue
        _err.print(
            f"[dim]Watching {alert.product_name} "
            f"for {format_inr(target)}[/dim]"
        )

    if not alerts.get_price_alerts(user_id):
        _err.print("[red]No valid alerts to watch.[/red]")
        return 1

    settings = Settings()
    if interval is not None:
        settings.PRICE_REFRESH_INTERVAL = interval

    evaluator = PriceAlertEvaluator(
        catalog, notifier=ConsoleNotifier(_err), settings=settings
    )
    try:
        async with evaluator:
            while cycles == 0 or evaluator.cycles_run < cycles:
                await asyncio.sleep(min(1.0, settings.PRICE_REFRESH_INTERVAL))
    except asyncio.CancelledError:
        logger.info("Watch interrupted after %d cycles", evaluator.cycles_run)

    _print_alerts(alerts.get_price_alerts(user_id))
    return 0


def run_stats(user_id: str, store: CatalogStore | None = None) -> int:
    """Print dashboard counters for a user."""
    stats = StatsService(store or CatalogStore.from_seed()).get_user_stats(
        user_id
    )
    table = Table(title=f"Stats for {user_id}", title_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total savings", format_inr(stats.total_savings))
    table.add_row(
        "Avg savings / month", format_inr(stats.avg_savings_per_month)
    )
    table.add_row("Products tracked", str(stats.products_tracked))
    table.add_row("Active alerts", str(stats.active_alerts))
    table.add_row("Platforms", str(stats.platforms_connected))
    table.add_row("Top category", stats.top_category or "—")
    table.add_row("Favourite platform", stats.favorite_platform or "—")
    Console().print(table)
    return 0


async def run_health_check() -> int:
    """Run connectivity health check on all marketplaces."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running marketplace health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Marketplace Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Marketplace", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(
            _platform_label(r.source_id), status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0

