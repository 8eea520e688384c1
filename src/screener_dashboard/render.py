"""Rich renderables for the terminal dashboard."""

from collections.abc import Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .config import MISSING_VALUE
from .models.recommendations import AggregatedRow
from .models.rows import CategorizedRow
from .taxonomy.resolver import CategoryResolver
from .taxonomy.sectors import SIDEBAR_SECTIONS
from .view import GroupCount

# (title, field, colour by sign)
INDUSTRY_COLUMNS: tuple[tuple[str, str, bool], ...] = (
    ("P/E", "pe_ratio", False),
    ("1Y Return", "one_year_return", True),
    ("Companies", "company_count", False),
    ("Market Cap", "market_cap", False),
    ("Median Cap", "median_cap", False),
    ("Sales Growth", "sales_growth", True),
    ("OPM", "operating_margin", True),
    ("ROCE", "return_on_capital", True),
)


def value_cell(value: str) -> Text:
    """Colour a signed metric: red when negative, green otherwise, dim when empty."""
    if not value or value in (MISSING_VALUE, "%"):
        return Text(MISSING_VALUE, style="dim")
    return Text(value, style="red" if "-" in value else "green")


def industry_table(rows: Sequence[CategorizedRow], title: str = "Industry Data") -> Table:
    """Render market rows, numbered in display order."""
    table = Table(title=title, show_lines=False, header_style="bold")
    table.add_column("S.No", justify="center", width=5)
    table.add_column("Industry", style="bold blue", no_wrap=True)
    table.add_column("Group", style="cyan")
    for heading, _, _ in INDUSTRY_COLUMNS:
        table.add_column(heading, justify="right")

    for index, row in enumerate(rows, 1):
        cells: list[str | Text] = []
        for _, field, signed in INDUSTRY_COLUMNS:
            value = getattr(row, field)
            cells.append(value_cell(value) if signed else str(value))
        group = f"{row.group} › {row.sub_group}" if row.group else Text(MISSING_VALUE, style="dim")
        name = Text(row.name, style=f"link {row.source_url}")
        table.add_row(str(index), name, group, *cells)
    return table


def recommendation_table(rows: Sequence[AggregatedRow]) -> Table:
    """Render aggregated recommendations with related stocks nested below each row."""
    table = Table(title="Recommendations", show_lines=True, header_style="bold")
    table.add_column("S.No", justify="center", width=5)
    table.add_column("Industry Group", style="blue")
    table.add_column("Sub Group", style="yellow")
    table.add_column("Target", style="bold")
    table.add_column("Analyst")
    table.add_column("Thesis", ratio=1)

    for index, row in enumerate(rows, 1):
        table.add_row(
            str(index),
            row.group or MISSING_VALUE,
            row.sub_group or MISSING_VALUE,
            _linked(row.display_name, row.source_url),
            ", ".join(row.contributors),
            _theses(row),
        )
        for child in row.related:
            table.add_row(
                "",
                "",
                "",
                Text("└─ ", style="dim") + _linked(child.display_name, child.source_url),
                ", ".join(child.contributors),
                _theses(child),
            )
    return table


def _linked(name: str, url: str | None) -> Text:
    return Text(name, style=f"link {url}") if url else Text(name)


def _theses(row: AggregatedRow) -> Text:
    text = Text()
    for position, contributor in enumerate(row.contributors):
        if position:
            text.append("\n")
        text.append(f"{contributor}: ", style="dim")
        text.append(row.notes.get(contributor, ""))
    return text


def group_selector(
    resolver: CategoryResolver,
    counts: dict[str, int],
    selected: str | None,
    total: int,
) -> Tree:
    """Render the group selector with sections, marking the selected group."""
    tree = Tree(_entry("All Industries", total, selected is None))
    for section in SIDEBAR_SECTIONS:
        branch = tree.add(Text("──────", style="dim"))
        for group in section:
            if group in resolver.taxonomy:
                branch.add(_entry(group, counts.get(group, 0), group == selected))
    return tree


def _entry(label: str, count: int, active: bool) -> Text:
    text = Text(label, style="bold orange1" if active else "")
    text.append(f" ({count})", style="orange1" if active else "dim")
    return text


def taxonomy_tree(resolver: CategoryResolver) -> Tree:
    """Render the full taxonomy: groups, sub-groups and industries."""
    tree = Tree("[bold]Industry Groups[/]")
    for group in resolver.groups():
        group_branch = tree.add(f"[bold cyan]{group}[/]")
        for sub_group in resolver.sub_groups_of(group):
            sub_branch = group_branch.add(f"[yellow]{sub_group}[/]")
            for industry in resolver.taxonomy[group][sub_group]:
                sub_branch.add(industry)
    return tree


def recommendation_summary(counts: dict[str, GroupCount], total: int, groups: Sequence[str]) -> Text:
    """One-line summary of stocks per group."""
    text = Text(f"All ({total})", style="bold")
    for group in groups:
        count = counts.get(group)
        if count is None:
            continue
        text.append(f"  {group} ({count.stocks})")
    return text


def error_banner(message: str, detail: str | None = None) -> Panel:
    """Render the load failure banner."""
    body = Text(message, style="bold red")
    if detail:
        body.append(f"\n{detail}", style="dim")
    return Panel(body, title="Error", border_style="red")
