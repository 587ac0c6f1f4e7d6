# reelpay/domain/machine/services/win_evaluation.py
import logging
from typing import List, Optional, Sequence, Union, Tuple

from ..entities.grid import SymbolGrid
from ..entities.payline import PaylinePattern
from ..entities.symbol import SymbolEntry, WinMode, PayScaling
from ..entities.win_record import WinRecord, WinSource, saturate


PatternLike = Union[PaylinePattern, Sequence[int]]


class WinEvaluator:
    """
    Service for evaluating the wins on a landed grid.

    Runs a line pass over every payline pattern followed by a grid-wide
    symbol-group pass. Holds no state between calls.
    """

    def __init__(self):
        self.logger = logging.getLogger("domain.machine.win_evaluator")

    def evaluate_grid(self, cells: Sequence[Optional[SymbolEntry]], column_count: int,
                      rows_per_column: Sequence[int], patterns: Optional[Sequence[PatternLike]],
                      credit_cost: int = 1) -> List[WinRecord]:
        """
        Evaluate a raw flat grid.

        Args:
            cells: Flat symbols addressed as row * column_count + column
            column_count: Number of columns
            rows_per_column: Row count per column
            patterns: Payline patterns (PaylinePattern or plain index lists)
            credit_cost: Credit cost of the active bet

        Returns:
            Ordered list of win records
        """
        grid = SymbolGrid(cells, column_count, rows_per_column)
        return self.evaluate_wins(grid, patterns, credit_cost)

    def evaluate_wins(self, grid: SymbolGrid, patterns: Optional[Sequence[PatternLike]],
                      credit_cost: int = 1) -> List[WinRecord]:
        """
        Evaluate every line and symbol-group win on a grid.

        Args:
            grid: Landed symbol grid
            patterns: Payline patterns (PaylinePattern or plain index lists)
            credit_cost: Credit cost of the active bet

        Returns:
            Line wins in pattern order followed by symbol-group wins in grid order

        Raises:
            ValueError: If credit_cost is negative
        """
        if credit_cost < 0:
            error_msg = f"Invalid credit cost: {credit_cost}"
            self.logger.error(error_msg)
            raise ValueError(error_msg)

        results: List[WinRecord] = []

        for line_idx, raw_pattern in enumerate(patterns or []):
            try:
                pattern = self._as_pattern(raw_pattern)
                if pattern is None:
                    continue
                record = self._evaluate_line(grid, pattern, line_idx, credit_cost)
            except Exception:
                self.logger.exception(f"Failed to evaluate payline {line_idx}: {raw_pattern}")
                continue

            if record is not None:
                results.append(record)

        results.extend(self._evaluate_symbol_groups(grid, credit_cost))

        self.logger.debug(f"Evaluated {grid}: {len(results)} wins, total {sum(r.value for r in results)}")
        return results

    @staticmethod
    def _as_pattern(raw_pattern: Optional[PatternLike]) -> Optional[PaylinePattern]:
        if raw_pattern is None:
            return None
        if isinstance(raw_pattern, PaylinePattern):
            return raw_pattern
        return PaylinePattern(tuple(raw_pattern))

    def _resolve_trigger(self, grid: SymbolGrid, pattern: PaylinePattern) -> Optional[SymbolEntry]:
        """
        Pick the symbol whose attributes govern a line.

        A leftmost wild that cannot trigger on its own hands off to the first
        later paying, non-wild line symbol.
        """
        first = grid.symbol_at(pattern.indices[0])
        if first is None:
            return None

        if first.can_trigger_line:
            return first

        if not first.is_wild:
            return None

        for index in pattern.indices[1:]:
            candidate = grid.symbol_at(index)
            if candidate is None:
                continue
            if not candidate.is_wild and candidate.is_paying_line_trigger:
                return candidate

        return None

    def _evaluate_line(self, grid: SymbolGrid, pattern: PaylinePattern, line_idx: int,
                       credit_cost: int) -> Optional[WinRecord]:
        if not pattern.indices:
            return None

        # A zero-row column anywhere on the line voids the whole line
        if grid.crosses_empty_column(pattern.indices):
            return None

        trigger = self._resolve_trigger(grid, pattern)
        if trigger is None or trigger.base_value <= 0:
            return None

        # Contiguous walk from the start; truncation, empty cells and mismatches all stop it
        matched = []
        for index in pattern.indices:
            cell = grid.symbol_at(index)
            if cell is None or not cell.matches(trigger):
                break
            matched.append(index)

        match_count = len(matched)
        if match_count < trigger.min_win_depth:
            return None

        if trigger.pay_scaling == PayScaling.PER_SYMBOL:
            total_matches = sum(
                1 for index in pattern.indices
                if grid.symbol_at(index) is not None and grid.symbol_at(index).matches(trigger)
            )
            scaled = trigger.base_value * (total_matches if total_matches > 0 else match_count)
        else:
            scaled = self._scale(trigger, match_count - trigger.min_win_depth, match_count)

        value = saturate(scaled * pattern.win_multiplier * credit_cost)

        self.logger.debug(
            f"Line {line_idx} won {value}: {trigger.name} x{match_count} at {matched}"
        )
        return WinRecord(
            source=WinSource.LINE,
            value=value,
            cells=tuple(matched),
            line_index=line_idx,
            symbol_name=trigger.name,
        )

    @staticmethod
    def _scale(symbol: SymbolEntry, extra_depth: int, count: int) -> int:
        """
        Apply a symbol's pay scaling.

        Args:
            symbol: Symbol that governs the payout
            extra_depth: Matches beyond the minimum required
            count: Number of matching symbols

        Returns:
            Scaled payout before multipliers
        """
        if symbol.pay_scaling == PayScaling.DEPTH_SQUARED:
            return symbol.base_value << max(extra_depth, 0)
        if symbol.pay_scaling == PayScaling.PER_SYMBOL:
            return symbol.base_value * count
        return symbol.base_value

    def _evaluate_symbol_groups(self, grid: SymbolGrid, credit_cost: int) -> List[WinRecord]:
        results = []
        processed_groups = set()

        for index in grid.valid_indices():
            cell = grid.cells[index]
            if cell is None or cell.is_wild:
                continue

            if cell.win_mode == WinMode.SINGLE_ON_REEL:
                if cell.base_value <= 0:
                    continue
                value = saturate(self._scale(cell, 0, 1) * credit_cost)
                results.append(WinRecord(
                    source=WinSource.SYMBOL_GROUP,
                    value=value,
                    cells=(index,),
                    symbol_name=cell.name,
                ))

            elif cell.win_mode == WinMode.TOTAL_COUNT:
                group_id = cell.match_group_id
                if group_id <= 0 or group_id in processed_groups:
                    continue
                processed_groups.add(group_id)

                record = self._evaluate_total_count(grid, cell, credit_cost)
                if record is not None:
                    results.append(record)

        return results

    def _evaluate_total_count(self, grid: SymbolGrid, symbol: SymbolEntry,
                              credit_cost: int) -> Optional[WinRecord]:
        if symbol.total_count_trigger <= 0 or symbol.base_value <= 0:
            return None

        matching, named = self._gather_group(grid, symbol.match_group_id)
        if named == 0:
            return None

        count = len(matching)
        if count < symbol.total_count_trigger:
            return None

        scaled = self._scale(symbol, count - symbol.total_count_trigger, count)
        value = saturate(scaled * credit_cost)

        self.logger.debug(f"Group {symbol.match_group_id} won {value}: {count} symbols at {matching}")
        return WinRecord(
            source=WinSource.SYMBOL_GROUP,
            value=value,
            cells=tuple(matching),
            symbol_name=symbol.name,
        )

    @staticmethod
    def _gather_group(grid: SymbolGrid, group_id: int) -> Tuple[List[int], int]:
        """Collect non-wild cells in a match group and how many of them carry a name."""
        matching = []
        named = 0
        for index in grid.valid_indices():
            other = grid.cells[index]
            if other is None or other.is_wild:
                continue
            if other.match_group_id == group_id:
                matching.append(index)
                if other.name:
                    named += 1
        return matching, named


def evaluate_wins(cells: Sequence[Optional[SymbolEntry]], column_count: int,
                  rows_per_column: Sequence[int], patterns: Optional[Sequence[PatternLike]],
                  credit_cost: int = 1) -> List[WinRecord]:
    """Module-level shortcut for WinEvaluator().evaluate_grid(...)."""
    return WinEvaluator().evaluate_grid(cells, column_count, rows_per_column, patterns, credit_cost)
