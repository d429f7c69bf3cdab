"""
Table grid resolution.

Spec tables on vendor pages lean heavily on rowspan/colspan to avoid
repeating a weight or price for every color row. ``resolve_grid`` expands
those merges into a rectangular grid where every logical row carries a value
for every logical column.
"""
from __future__ import annotations

import re
from typing import Iterator, List, Optional, Union

from bs4 import BeautifulSoup, Tag

from ..config import Config
from ..logger import get_logger
from ..models import Cell, Grid
from ..utils.text_cleaning import normalize

logger = get_logger(__name__)

TableMarkup = Union[str, Tag, None]


def _span(value: Optional[str]) -> int:
    """Parse a rowspan/colspan attribute; anything unusable counts as 1."""
    if value is None:
        return 1
    match = re.match(r'\s*(\d+)', str(value))
    if not match:
        return 1
    return max(1, int(match.group(1)))


def _as_table(markup: TableMarkup) -> Optional[Tag]:
    if markup is None:
        return None
    if isinstance(markup, Tag):
        if markup.name == 'table':
            return markup
        return markup.find('table')
    if not markup.strip():
        return None

    soup = BeautifulSoup(markup, "html.parser")
    table = soup.find('table')
    # Bare <tr> fragments are accepted as a table body
    return table if table is not None else soup


def iter_tables(markup: Union[str, Tag]) -> Iterator[Tag]:
    """Yield every <table> element in a document, outermost first."""
    if isinstance(markup, Tag):
        soup = markup
    else:
        soup = BeautifulSoup(markup or "", "html.parser")

    yield from soup.find_all('table')


def _own_rows(table: Tag) -> List[Tag]:
    """Rows that belong to this table, not to a nested one."""
    rows = []
    for tr in table.find_all('tr'):
        parent = tr.find_parent('table')
        if parent is None or parent is table:
            rows.append(tr)
    return rows


def parse_rows(markup: TableMarkup) -> List[List[Cell]]:
    """
    Parse table markup into rows of declared cells.

    Args:
        markup: Table HTML or a parsed <table> tag

    Returns:
        Rows of Cell objects, spans as declared
    """
    table = _as_table(markup)
    if table is None:
        return []

    rows: List[List[Cell]] = []
    for tr in _own_rows(table):
        cells = []
        for td in tr.find_all(['td', 'th'], recursive=False):
            cells.append(Cell(
                text=normalize(td.decode_contents()),
                rowspan=_span(td.get('rowspan')),
                colspan=_span(td.get('colspan')),
            ))
        rows.append(cells)

    return rows


def resolve_cells(rows: List[List[Cell]], max_columns: Optional[int] = None) -> Grid:
    """
    Expand declared cells into a rectangular grid.

    Walks each row left to right. A column with a pending rowspan emits the
    pending text without consuming an input cell; otherwise the next real
    cell is consumed and replicated across its colspan. Rows are padded with
    empty strings to the widest row, never beyond ``max_columns``.
    """
    if max_columns is None:
        max_columns = Config.MAX_GRID_COLUMNS or 20

    # pending[col] = [text, remaining rows]
    pending: dict[int, list] = {}
    grid: Grid = []

    for cells in rows:
        row: List[str] = []
        cell_idx = 0
        # Spans declared in this row start replicating on the next one
        opened: dict[int, list] = {}

        for col in range(max_columns):
            span = pending.get(col)
            if span is not None:
                row.append(span[0])
                span[1] -= 1
                if span[1] <= 0:
                    del pending[col]
                continue

            if len(row) > col:
                # Already filled by a colspan from this row
                continue

            if cell_idx >= len(cells):
                if any(c > col for c in pending):
                    row.append("")
                    continue
                break

            cell = cells[cell_idx]
            cell_idx += 1

            for offset in range(cell.colspan):
                target = col + offset
                if target >= max_columns:
                    break
                if offset > 0 and target in pending:
                    # A pending rowspan owns this slot; the colspan yields to it
                    break
                if len(row) <= target:
                    row.append(cell.text)
                if cell.rowspan > 1:
                    opened[target] = [cell.text, cell.rowspan - 1]

        if cell_idx < len(cells):
            logger.debug("GRID Dropped %d cells beyond %d columns", len(cells) - cell_idx, max_columns)

        pending.update(opened)
        grid.append(row)

    # Spans that outlive the declared rows are not materialised
    width = max((len(row) for row in grid), default=0)
    for row in grid:
        row.extend([""] * (width - len(row)))

    return grid


def resolve_grid(table_markup: TableMarkup, max_columns: Optional[int] = None) -> Grid:
    """
    Resolve table markup into a fully populated grid.

    Args:
        table_markup: Table HTML or a parsed <table> tag
        max_columns: Column ceiling (defaults to Config.MAX_GRID_COLUMNS)

    Returns:
        Rectangular grid; empty list when the table has no rows
    """
    return resolve_cells(parse_rows(table_markup), max_columns=max_columns)


def transpose(grid: Grid) -> Grid:
    """Swap rows and columns of a rectangular grid."""
    if not grid:
        return []
    return [list(column) for column in zip(*grid)]
