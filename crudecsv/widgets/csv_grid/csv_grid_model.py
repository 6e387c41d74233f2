#!/usr/bin/env python3
"""
CSV Grid Model - In-memory grid of text cells backing one open CSV document

Converts raw CSV text into rows of cells and back, and provides the structural
row/column operations used by the grid view. Cells are always plain strings;
nothing is coerced to numbers.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_GRID: List[List[str]] = [
    ["A", "B", "C"],
    ["0", "0", "0"],
    ["1", "1", "1"],
    ["2", "2", "2"],
]

LAST_ROW_NOTICE = "Cannot remove the last row"
LAST_COLUMN_NOTICE = "Cannot remove the last column"


def default_grid() -> List[List[str]]:
    """Fresh copy of the grid shown for empty documents"""
    return [list(row) for row in DEFAULT_GRID]


def parse_line(line: str) -> List[str]:
    """Split one line of CSV text into cells.

    Double quotes toggle quoting, and a doubled quote inside a quoted field is
    a literal quote. Fields are trimmed at their boundaries only. An
    unterminated quote simply runs to the end of the line.
    """
    cells = []
    current = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == ',' and not in_quotes:
            cells.append(''.join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1

    cells.append(''.join(current).strip())
    return cells


def parse_document(text: Optional[str]) -> List[List[str]]:
    """Parse a whole CSV document into rows.

    Blank lines are skipped. Empty or blank documents yield the default grid.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        return default_grid()

    rows = []
    for line in trimmed.split("\n"):
        if not line.strip():
            continue
        row = parse_line(line)
        if len(row) > 0:
            rows.append(row)

    return rows if rows else default_grid()


def needs_quoting(cell: str) -> bool:
    """True if the cell would not survive an unescaped save"""
    return any(ch in cell for ch in (',', '"', '\n', '\r'))


def quote_cell(cell: str) -> str:
    """Quote a cell so that parse_line reads it back unchanged"""
    if not needs_quoting(cell):
        return cell
    return '"' + cell.replace('"', '""') + '"'


def serialize(rows: List[List[str]], escape: bool = False) -> str:
    """Join rows back into CSV text.

    By default cells are written as-is, so cells holding commas, quotes or
    newlines do not read back the same. Pass escape=True to quote them.
    """
    if escape:
        return "\n".join(",".join(quote_cell(cell) for cell in row) for row in rows)

    unsafe = next(
        ((r, c, cell) for r, row in enumerate(rows)
         for c, cell in enumerate(row) if needs_quoting(cell)),
        None
    )
    if unsafe:
        logger.warning(
            f"Cell ({unsafe[0]}, {unsafe[1]}) contains a comma, quote or newline "
            f"and will not round-trip: {unsafe[2]!r}"
        )

    return "\n".join(",".join(row) for row in rows)


class CsvGridModel:
    """Rows of text cells for a single open document.

    Structural operations return True when the grid changed, so the owner
    knows to re-render and save. Refusals go through the notify callable.
    """

    def __init__(self, notify: Optional[Callable[[str], None]] = None):
        self.rows: List[List[str]] = []
        self.has_changes: bool = False
        self._notify = notify

    def notify(self, message: str) -> None:
        """Send a short message to the user"""
        if self._notify is not None:
            self._notify(message)
        else:
            logger.info(message)

    # --- Loading and saving ---

    def load_text(self, text: Optional[str]) -> None:
        """Replace the grid with the parsed text"""
        self.rows = parse_document(text)
        self.has_changes = False

    def to_text(self) -> str:
        return serialize(self.rows)

    def clear(self) -> None:
        self.rows = []
        self.has_changes = False

    # --- Structure ---

    def row_count(self) -> int:
        return len(self.rows)

    def column_count(self) -> int:
        """Width of the first row, which defines the grid's width"""
        if not self.rows:
            return 0
        return len(self.rows[0])

    def is_rectangular(self) -> bool:
        """Check that every row has as many cells as the first"""
        width = self.column_count()
        return all(len(row) == width for row in self.rows)

    def get_structure_info(self) -> Dict[str, Any]:
        """Get summary of grid structure"""
        return {
            'rows': self.row_count(),
            'columns': self.column_count(),
            'has_changes': self.has_changes,
        }

    def add_row(self) -> bool:
        """Append an empty row as wide as the first row"""
        if not self.rows:
            self.rows = [["A", "B", "C"]]
        else:
            self.rows.append([""] * self.column_count())
        self.has_changes = True
        return True

    def remove_row(self) -> bool:
        """Drop the last row, keeping at least one"""
        if len(self.rows) > 1:
            self.rows.pop()
            self.has_changes = True
            return True

        self.notify(LAST_ROW_NOTICE)
        return False

    def add_column(self) -> bool:
        """Append an empty cell to every row"""
        if not self.rows:
            self.rows = [["A"]]
        else:
            for row in self.rows:
                row.append("")
        self.has_changes = True
        return True

    def remove_column(self) -> bool:
        """Drop the last cell of every row, keeping at least one column"""
        if not self.rows or self.column_count() <= 1:
            self.notify(LAST_COLUMN_NOTICE)
            return False

        for row in self.rows:
            if row:
                row.pop()
        self.has_changes = True
        return True

    # --- Cells ---

    def get_cell(self, row: int, column: int) -> str:
        if 0 <= row < len(self.rows) and 0 <= column < len(self.rows[row]):
            return self.rows[row][column]
        return ""

    def set_cell(self, row: int, column: int, value: str) -> bool:
        """Replace one cell's text; out-of-range edits are ignored"""
        if 0 <= row < len(self.rows) and 0 <= column < len(self.rows[row]):
            self.rows[row][column] = value if value is not None else ""
            self.has_changes = True
            return True

        logger.debug(f"Ignoring edit outside the grid at ({row}, {column})")
        return False
