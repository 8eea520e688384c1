"""Command-line interface for the Screener market dashboard.

Commands:

1. `screener-dash industries`: Fetch the market page and show the industry table
   - Filter by industry group and sub-group
   - Sort by any column
   - Read a saved copy of the page with --html

2. `screener-dash taxonomy`: Show the industry group taxonomy

3. `screener-dash recommendations`: Show contributor recommendations by industry

4. `screener-dash migrate-dataset`: Convert a legacy recommendation file

5. `screener-dash serve`: Run the HTTP relay for the market page
"""

import argparse
import asyncio
import json
import os
from pathlib import Path
import sys

from dotenv import load_dotenv
from rich.console import Console

from .config import REQUEST_TIMEOUT_SECONDS, RELAY_HOST, RELAY_PATH, RELAY_PORT
from .exceptions import DatasetError, ScreenerDashboardError
from .fetcher import DocumentRetriever, FetcherConfig, default_strategies
from .models.rows import METRIC_COLUMNS
from .recommendations import (
    build_recommendation_table,
    load_recommendations,
    migrate_legacy_dataset,
    write_recommendations,
)
from .render import (
    error_banner,
    group_selector,
    industry_table,
    recommendation_summary,
    recommendation_table,
    taxonomy_tree,
)
from .session import DashboardSession, LoadStatus, retriever_loader, static_loader
from .taxonomy.resolver import CategoryResolver
from .view import (
    CATEGORY_COLUMN,
    SortDirection,
    ViewState,
    group_counts,
    total_stocks,
    visible_recommendations,
)

console = Console()

INDUSTRY_SORT_COLUMNS = ("name", "company_count", *METRIC_COLUMNS, CATEGORY_COLUMN)
RECOMMENDATION_SORT_COLUMNS = ("display_name", "contributors", CATEGORY_COLUMN)


def _direction(args: argparse.Namespace) -> SortDirection:
    return SortDirection.DESCEND if args.desc else SortDirection.ASCEND


def _check_group(resolver: CategoryResolver, group: str | None, sub_group: str | None) -> None:
    """Exit with a message if the group or sub-group is not in the taxonomy."""
    if group is None:
        if sub_group is not None:
            console.print("[red]Error: --sub requires --group[/]")
            raise SystemExit(2)
        return
    if group not in resolver.taxonomy:
        console.print(f"[red]Error: unknown group {group!r}[/]")
        console.print(f"Groups: [cyan]{', '.join(resolver.groups())}[/]")
        raise SystemExit(2)
    if sub_group is not None and sub_group not in resolver.sub_groups_of(group):
        console.print(f"[red]Error: unknown sub-group {sub_group!r} in {group}[/]")
        console.print(f"Sub-groups: [cyan]{', '.join(resolver.sub_groups_of(group))}[/]")
        raise SystemExit(2)


# =============================================================================
# PARSERS
# =============================================================================


def _create_industries_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the industries subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    parser = subparsers.add_parser(
        "industries",
        help="Show the market industry table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Fetch the Screener.in market page and show every industry with its metrics.

Retrieval tries, in order: the relay (if SCREENER_RELAY_URL is set), the
origin directly, then the public CORS relays.

Examples:
  screener-dash industries
  screener-dash industries --group ENERGY --sub Power
  screener-dash industries --sort one_year_return --desc --limit 20
  screener-dash industries --html market.html
        """,
    )
    parser.add_argument("--group", help="Industry group, e.g. ENERGY")
    parser.add_argument("--sub", dest="sub_group", help="Sub-group within --group")
    parser.add_argument("--sort", choices=INDUSTRY_SORT_COLUMNS, help="Column to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--limit", type=int, default=None, help="Show at most N rows")
    parser.add_argument("--html", type=Path, help="Read a saved market page instead of fetching")
    parser.add_argument(
        "--relay-url",
        default=os.getenv("SCREENER_RELAY_URL"),
        help="Relay endpoint tried before the origin (default: $SCREENER_RELAY_URL)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("SCREENER_TIMEOUT_SECONDS", REQUEST_TIMEOUT_SECONDS)),
        help=f"Seconds per retrieval attempt (default: {REQUEST_TIMEOUT_SECONDS})",
    )


def _create_taxonomy_parser(subparsers: argparse._SubParsersAction) -> None:
    subparsers.add_parser("taxonomy", help="Show the industry group taxonomy")


def _create_recommendations_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the recommendations subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    parser = subparsers.add_parser(
        "recommendations",
        help="Show contributor recommendations grouped by industry",
    )
    parser.add_argument("--group", help="Only this industry group")
    parser.add_argument("--sub", dest="sub_group", help="Sub-group within --group")
    parser.add_argument(
        "--contributor",
        action="append",
        default=[],
        help="Only rows from this contributor (repeatable)",
    )
    parser.add_argument("--sort", choices=RECOMMENDATION_SORT_COLUMNS, help="Column to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--dataset", type=Path, help="Dataset file (default: bundled dataset)")


def _create_migrate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "migrate-dataset",
        help="Convert a legacy recommendation file to the canonical schema",
    )
    parser.add_argument("source", type=Path, help="Legacy dataset JSON")
    parser.add_argument("destination", type=Path, help="Where to write the canonical dataset")


def _create_serve_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("serve", help=f"Run the HTTP relay ({RELAY_PATH})")
    parser.add_argument("--host", default=os.getenv("SCREENER_RELAY_HOST", RELAY_HOST))
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("SCREENER_RELAY_PORT", RELAY_PORT))
    )


# =============================================================================
# COMMANDS
# =============================================================================


async def _load_market(args: argparse.Namespace, resolver: CategoryResolver) -> DashboardSession:
    """Run one load of the market table."""
    if args.html:
        session = DashboardSession(
            static_loader(args.html.read_text(encoding="utf-8"), str(args.html)), resolver
        )
        await session.refresh()
        await session.close()
        return session

    config = FetcherConfig(timeout=args.timeout)
    async with DocumentRetriever(default_strategies(args.relay_url), config) as retriever:
        session = DashboardSession(retriever_loader(retriever), resolver)
        with console.status("Loading data from Screener.in..."):
            await session.refresh()
        await session.close()
    return session


def _run_industries_command(args: argparse.Namespace) -> None:
    """Run the industries subcommand.

    Args:
        args: Parsed command-line arguments.
    """
    resolver = CategoryResolver()
    _check_group(resolver, args.group, args.sub_group)

    session = asyncio.run(_load_market(args, resolver))

    if session.status is LoadStatus.FAILED:
        console.print(error_banner(session.error or "", session.error_detail))
        raise SystemExit(1)
    if session.status is LoadStatus.EMPTY:
        console.print("[yellow]No data found: the market page contained no industry rows.[/]")
        return

    session.select_group(args.group)
    session.select_sub_group(args.sub_group)
    if args.sort:
        session.sort_by(args.sort, _direction(args))

    counts = {group: session.count(group) for group in resolver.groups()}
    console.print(group_selector(resolver, counts, args.group, session.count()))
    if args.group:
        tabs = "  ".join(
            f"[bold]{sub}[/] ({session.count(args.group, sub)})"
            if sub == args.sub_group
            else f"{sub} ({session.count(args.group, sub)})"
            for sub in session.sub_groups()
        )
        label = f"All {args.group} ({session.count(args.group)})"
        console.print(f"\n{label if args.sub_group else f'[bold]{label}[/]'}  {tabs}\n")

    rows = session.visible_rows()
    shown = rows[: args.limit] if args.limit else rows
    title = " › ".join(part for part in (args.group, args.sub_group) if part) or "All Industries"
    console.print(industry_table(shown, title=title))
    console.print(f"[dim]{len(shown)} of {len(rows)} rows, source: {session.source}[/]")


def _run_taxonomy_command(_args: argparse.Namespace) -> None:
    console.print(taxonomy_tree(CategoryResolver()))


def _run_recommendations_command(args: argparse.Namespace) -> None:
    """Run the recommendations subcommand.

    Args:
        args: Parsed command-line arguments.
    """
    resolver = CategoryResolver()
    _check_group(resolver, args.group, args.sub_group)

    dataset = load_recommendations(args.dataset)
    unknown = set(args.contributor) - set(dataset.contributors)
    if unknown:
        console.print(f"[yellow]Unknown contributors: {', '.join(sorted(unknown))}[/]")

    rows = build_recommendation_table(dataset, resolver)
    state = (
        ViewState()
        .select_group(args.group)
        .select_sub_group(args.sub_group)
        .with_column_filter("contributors", args.contributor)
    )
    if args.sort:
        state = state.sorted_by(args.sort, _direction(args))

    console.print(recommendation_summary(group_counts(rows), total_stocks(rows), resolver.groups()))
    console.print(recommendation_table(visible_recommendations(rows, state, resolver)))


def _run_migrate_command(args: argparse.Namespace) -> None:
    try:
        raw = json.loads(args.source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DatasetError(str(args.source), str(e)) from e
    dataset = migrate_legacy_dataset(raw)
    write_recommendations(dataset, args.destination)
    entries = sum(1 for _ in dataset.iter_entries())
    console.print(
        f"[green]Wrote {entries} entries from {len(dataset.contributors)} contributors "
        f"to: {args.destination}[/]"
    )


def _run_serve_command(args: argparse.Namespace) -> None:
    import uvicorn

    from .server import create_app

    console.print(f"[bold cyan]Relay listening on http://{args.host}:{args.port}{RELAY_PATH}[/]")
    uvicorn.run(create_app(), host=args.host, port=args.port)


COMMANDS = {
    "industries": _run_industries_command,
    "taxonomy": _run_taxonomy_command,
    "recommendations": _run_recommendations_command,
    "migrate-dataset": _run_migrate_command,
    "serve": _run_serve_command,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="screener-dash",
        description="Screener.in market dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  screener-dash                               # Industry table (same as 'industries')
  screener-dash industries --group FINANCIAL  # One group
  screener-dash --group ENERGY --sub Power    # Industry flags without a command
  screener-dash recommendations --contributor Priya
  screener-dash serve --port 8000             # Run the relay

Optional environment variables:
  SCREENER_RELAY_URL        - Relay endpoint tried before the origin
  SCREENER_TIMEOUT_SECONDS  - Seconds per retrieval attempt
  SCREENER_RELAY_HOST       - Relay bind host
  SCREENER_RELAY_PORT       - Relay bind port
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    _create_industries_parser(subparsers)
    _create_taxonomy_parser(subparsers)
    _create_recommendations_parser(subparsers)
    _create_migrate_parser(subparsers)
    _create_serve_parser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the dashboard CLI."""
    load_dotenv()

    if argv is None:
        argv = sys.argv[1:]
    # Industry flags without a command go to the default command
    if not argv or (argv[0] not in COMMANDS and argv[0] not in ("-h", "--help")):
        argv = ["industries", *argv]

    args = build_parser().parse_args(argv)

    try:
        COMMANDS[args.command](args)
    except ScreenerDashboardError as e:
        console.print(f"\n[red]Error: {e}[/]")
        raise SystemExit(1) from None
    except OSError as e:
        console.print(f"\n[red]Error: {e}[/]")
        raise SystemExit(1) from None
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/]")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
