"""
Markup extraction modules.

- resolve_grid: rowspan/colspan tables expanded into rectangular grids
"""
from .table_grid import iter_tables, parse_rows, resolve_cells, resolve_grid, transpose

__all__ = [
    "iter_tables",
    "parse_rows",
    "resolve_cells",
    "resolve_grid",
    "transpose",
]
