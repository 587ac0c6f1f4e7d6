# reelpay/domain/machine/entities/grid.py
import logging
from typing import List, Optional, Sequence, Iterator

from .symbol import SymbolEntry


class SymbolGrid:
    """
    Jagged grid of landed symbols.

    Cells are stored flat as ``row * column_count + column``; columns are reels and
    row 0 is nearest the player. Each column may have its own row count, including
    zero. Shape mismatches are repaired on construction rather than raised.
    """
    def __init__(self, cells: Sequence[Optional[SymbolEntry]], column_count: int,
                 rows_per_column: Sequence[int]):
        """
        Initialize the grid.

        Args:
            cells: Flat list of symbols (or None for empty cells)
            column_count: Number of columns (reels)
            rows_per_column: Row count for each column
        """
        self.logger = logging.getLogger("domain.machine.grid")

        self.column_count = max(int(column_count), 0)
        self.rows_per_column = self._normalize_rows(rows_per_column)
        self.max_rows = max(self.rows_per_column) if self.rows_per_column else 0
        self.cells = self._normalize_cells(cells)

    def _normalize_rows(self, rows_per_column: Sequence[int]) -> List[int]:
        rows = [max(int(r), 0) for r in (rows_per_column or [])]

        if len(rows) < self.column_count:
            self.logger.warning(
                f"rows_per_column has {len(rows)} entries for {self.column_count} columns, padding with 0"
            )
            rows.extend([0] * (self.column_count - len(rows)))
        elif len(rows) > self.column_count:
            self.logger.warning(
                f"rows_per_column has {len(rows)} entries for {self.column_count} columns, truncating"
            )
            rows = rows[:self.column_count]

        return rows

    def _normalize_cells(self, cells: Sequence[Optional[SymbolEntry]]) -> List[Optional[SymbolEntry]]:
        result = list(cells or [])
        expected = self.max_rows * self.column_count

        if len(result) != expected:
            self.logger.warning(f"Grid has {len(result)} cells, expected {expected}; resizing")
            if len(result) < expected:
                result.extend([None] * (expected - len(result)))
            else:
                result = result[:expected]

        return result

    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[Optional[SymbolEntry]]]) -> "SymbolGrid":
        """
        Build a grid from per-reel symbol lists (row 0 first).

        Args:
            columns: One list of symbols per column

        Returns:
            SymbolGrid with the flat row-major layout
        """
        column_count = len(columns)
        rows_per_column = [len(col) if col is not None else 0 for col in columns]
        max_rows = max(rows_per_column) if rows_per_column else 0

        cells: List[Optional[SymbolEntry]] = [None] * (max_rows * column_count)
        for c, col in enumerate(columns):
            for r, symbol in enumerate(col or []):
                cells[r * column_count + c] = symbol

        return cls(cells, column_count, rows_per_column)

    def column_of(self, index: int) -> int:
        return index % self.column_count

    def row_of(self, index: int) -> int:
        return index // self.column_count

    def index_of(self, column: int, row: int) -> int:
        return row * self.column_count + column

    def is_valid_index(self, index: int) -> bool:
        """True when the index addresses a physically present cell position."""
        if self.column_count == 0 or index < 0 or index >= len(self.cells):
            return False
        return self.row_of(index) < self.rows_per_column[self.column_of(index)]

    def symbol_at(self, index: int) -> Optional[SymbolEntry]:
        """
        Get the symbol at a flat index.

        Returns:
            The symbol, or None if the index is out of range, lies in a
            truncated part of its column, or the cell is empty
        """
        if not self.is_valid_index(index):
            return None
        return self.cells[index]

    def crosses_empty_column(self, indices: Sequence[int]) -> bool:
        """True when any in-range index falls in a column with no rows at all."""
        if self.column_count == 0:
            return True
        return any(
            index >= 0 and self.rows_per_column[self.column_of(index)] == 0
            for index in indices
        )

    def valid_indices(self) -> Iterator[int]:
        for index in range(len(self.cells)):
            if self.is_valid_index(index):
                yield index

    def get_column(self, column: int) -> List[Optional[SymbolEntry]]:
        return [self.cells[self.index_of(column, r)] for r in range(self.rows_per_column[column])]

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"SymbolGrid(columns={self.column_count}, rows={self.rows_per_column})"
