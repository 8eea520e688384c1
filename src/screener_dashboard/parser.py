"""HTML parsing utilities for the Screener.in market page.

Extracts the industry table into flat rows. Metric cells are kept as the
display strings the page shows; `parse_number` interprets them for sorting.
"""

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup
import structlog

from .config import BASE_URL, MIN_ROW_CELLS, MISSING_VALUE
from .models.rows import ExtractedRow

logger = structlog.get_logger(__name__)

# Leading decimal number, the way a lenient float parse reads "12.5x"
_LEADING_NUMBER = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

# Display strings that mean "no value"
_EMPTY_VALUES = frozenset({"", MISSING_VALUE, "%"})

# Cell positions of the metric columns, in ExtractedRow field order
_METRIC_CELLS: tuple[tuple[str, int], ...] = (
    ("market_cap", 3),
    ("median_cap", 4),
    ("pe_ratio", 5),
    ("sales_growth", 6),
    ("operating_margin", 7),
    ("return_on_capital", 8),
    ("one_year_return", 9),
)


def parse_number(value: str | None) -> float | None:
    """Interpret a display string as a number for sorting.

    Thousands separators and percent signs are ignored. Empty strings,
    the "-" placeholder and a bare "%" mean "no value", never zero.

    Args:
        value: Cell text as displayed.

    Returns:
        The leading decimal number, or None.

    Example:
        >>> parse_number("1,234.5%")
        1234.5
        >>> parse_number("-") is None
        True
    """
    if value is None or value.strip() in _EMPTY_VALUES:
        return None
    clean = value.replace(",", "").replace("%", "").strip()
    match = _LEADING_NUMBER.match(clean)
    return float(match.group()) if match else None


def _cell_text(cells: list[Tag], index: int) -> str:
    text = cells[index].get_text().strip()
    return text or MISSING_VALUE


class MarketTableParser:
    """Parser for the market page industry table."""

    def __init__(self, base_url: str = BASE_URL) -> None:
        """Initialize the parser with the base URL for resolving row links."""
        self.base_url = base_url

    def extract_rows(self, document: str | bytes | BeautifulSoup) -> list[ExtractedRow]:
        """Extract industry rows in document order.

        Header rows, rows with fewer than ten cells and rows without a
        linked name in the second cell are skipped.

        Args:
            document: Raw HTML or an already parsed document.

        Returns:
            Extracted rows; empty when the markup cannot be parsed.
        """
        soup = self._parse(document)
        if soup is None:
            return []

        rows = []
        for tr in soup.select("table tr"):
            row = self._extract_row(tr)
            if row is not None:
                rows.append(row)
        return rows

    def _parse(self, document: str | bytes | BeautifulSoup) -> BeautifulSoup | None:
        if isinstance(document, BeautifulSoup):
            return document
        if not isinstance(document, (str, bytes)):
            logger.warning("Unparseable document", document_type=type(document).__name__)
            return None
        try:
            return BeautifulSoup(document, "lxml")
        except ParserRejectedMarkup as e:
            logger.warning("Markup rejected by parser", error=str(e))
            return None

    def _extract_row(self, tr: Tag) -> ExtractedRow | None:
        if tr.find("th") is not None:
            return None

        cells = tr.find_all("td")
        if len(cells) < MIN_ROW_CELLS:
            return None

        link = cells[1].find("a")
        if link is None:
            return None
        href = link.get("href")
        name = link.get_text().strip()
        if not href or not name:
            return None

        metrics = {field: _cell_text(cells, index) for field, index in _METRIC_CELLS}
        count = parse_number(cells[2].get_text())

        return ExtractedRow(
            name=name,
            source_url=urljoin(self.base_url, href),
            company_count=max(int(count), 0) if count is not None else 0,
            **metrics,
        )


def extract_rows(
    document: str | bytes | BeautifulSoup, base_url: str = BASE_URL
) -> list[ExtractedRow]:
    """Extract industry rows with a default parser.

    Args:
        document: Raw HTML or an already parsed document.
        base_url: Base URL for resolving row links.

    Returns:
        Extracted rows in document order.
    """
    return MarketTableParser(base_url).extract_rows(document)
