# reelpay/domain/machine/entities/slot_machine.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Tuple, Optional, Sequence, Union

from .grid import SymbolGrid
from .payline import PaylineDefinition, PaylinePattern, generate_patterns
from .reel_strip import ReelStrip
from .symbol import SymbolEntry
from .win_record import WinRecord, saturate
from ..exceptions import MachineConfigurationError, PatternConfigurationError
from ..services.strip_selection import StripSelector
from ..services.win_evaluation import WinEvaluator


@dataclass
class SpinOutcome:
    """Result of one spin: the landed grid, its wins and any decorative filler."""
    grid: SymbolGrid
    wins: List[WinRecord]
    total_win: int
    credit_cost: int = 1
    filler: List[List[SymbolEntry]] = field(default_factory=list)

    @property
    def is_win(self) -> bool:
        return self.total_win > 0

    def symbol_names(self) -> List[List[str]]:
        """Landed symbol names per column, row 0 first."""
        return [
            [s.name if s is not None else "" for s in self.grid.get_column(c)]
            for c in range(self.grid.column_count)
        ]


class SlotMachine:
    """
    A set of reel strips, payline definitions and bet levels driven by one RNG.

    Core entity in the machine domain. Draw states are rebuilt on every spin so
    that reservations never leak between spins.
    """
    def __init__(self, machine_id: str, strips: Sequence[ReelStrip],
                 paylines: Sequence[Union[PaylineDefinition, PaylinePattern]],
                 rng_strategy=None, filler_rows: int = 0,
                 bet_levels: Optional[Dict[str, int]] = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Initialize the slot machine.

        Args:
            machine_id: Unique identifier for this machine
            strips: One reel strip per column, left to right
            paylines: Payline definitions (or ready-made patterns)
            rng_strategy: Random number generator strategy
            filler_rows: Decorative symbols drawn per reel without consuming reservations
            bet_levels: Mapping of bet level name to credit cost
            config: Original configuration dictionary, kept for reporting

        Raises:
            MachineConfigurationError: If the machine has no reels
            PatternConfigurationError: If a payline does not fit the reel layout
        """
        self.id = machine_id
        self.logger = logging.getLogger(f"domain.machine.{machine_id}")
        self.logger.info(f"Initializing slot machine: {machine_id}")

        if not strips:
            raise MachineConfigurationError(f"Machine {machine_id} has no reels")

        self.config = config or {}
        self.strips = list(strips)
        self.paylines = list(paylines or [])
        self.filler_rows = max(int(filler_rows), 0)
        self.bet_levels = dict(bet_levels or {"default": 1})

        self.rng = rng_strategy
        self._selector = StripSelector(rng_strategy)
        self._evaluator = WinEvaluator()
        self._pattern_cache: Dict[Tuple[int, ...], List[PaylinePattern]] = {}

        # Fail at setup rather than on the first spin
        self.get_patterns(self.rows_per_column, validate=True)

        self.logger.info(
            f"Slot machine {machine_id} initialized: {self.column_count} reels, "
            f"rows {self.rows_per_column}, {len(self.paylines)} paylines"
        )

    @property
    def column_count(self) -> int:
        return len(self.strips)

    @property
    def rows_per_column(self) -> List[int]:
        return [strip.visible_rows for strip in self.strips]

    def get_patterns(self, rows_per_column: Sequence[int], column_count: Optional[int] = None,
                     validate: bool = False) -> List[PaylinePattern]:
        """
        Concrete payline patterns for a grid shape, generated once per shape.

        The machine's own shape is validated strictly at setup. Other shapes are
        only checked for fit: a pattern that does not fit is logged and kept, and
        evaluation skips the cells it cannot reach.

        Args:
            rows_per_column: Row count per column
            column_count: Column count of the grid; defaults to the machine's reel count
            validate: Raise on the first pattern that does not fit

        Returns:
            Patterns in definition order

        Raises:
            PatternConfigurationError: If validate is set and a pattern does not fit
        """
        columns = self.column_count if column_count is None else column_count
        key = (columns,) + tuple(rows_per_column)
        patterns = self._pattern_cache.get(key)
        if patterns is None:
            patterns = generate_patterns(self.paylines, columns, rows_per_column, validate=validate)
            if not validate:
                self._warn_unfit_patterns(patterns, columns, rows_per_column)
            self._pattern_cache[key] = patterns
            self.logger.debug(f"Generated {len(patterns)} payline patterns for shape {list(rows_per_column)}")
        return patterns

    def _warn_unfit_patterns(self, patterns: Sequence[PaylinePattern], column_count: int,
                             rows_per_column: Sequence[int]) -> None:
        for line_idx, pattern in enumerate(patterns):
            try:
                pattern.validate(column_count, rows_per_column)
            except PatternConfigurationError as e:
                self.logger.warning(f"Payline {line_idx} does not fit shape {list(rows_per_column)}: {e}")

    def get_credit_cost(self, bet_level: Optional[str] = None) -> int:
        """
        Resolve a bet level name to its credit cost.

        Args:
            bet_level: Bet level name; the first configured level when None

        Returns:
            Credit cost for the level

        Raises:
            KeyError: If the bet level is not configured
        """
        if bet_level is None:
            return next(iter(self.bet_levels.values()))
        if bet_level not in self.bet_levels:
            self.logger.error(f"Unknown bet level '{bet_level}', available: {list(self.bet_levels)}")
            raise KeyError(bet_level)
        return self.bet_levels[bet_level]

    def spin(self, credit_cost: Optional[int] = None, bet_level: Optional[str] = None) -> SpinOutcome:
        """
        Draw every reel, build the grid and evaluate it.

        Args:
            credit_cost: Explicit credit cost; takes precedence over bet_level
            bet_level: Bet level name used when credit_cost is not given

        Returns:
            SpinOutcome with the grid, wins and total payout
        """
        if self.rng is None:
            raise MachineConfigurationError(f"Machine {self.id} has no RNG strategy")
        if credit_cost is None:
            credit_cost = self.get_credit_cost(bet_level)

        columns: List[List[SymbolEntry]] = []
        filler: List[List[SymbolEntry]] = []
        for strip in self.strips:
            state = strip.new_draw_state()
            columns.append([
                self._selector.draw_symbol(strip, state, consume=True)
                for _ in range(strip.visible_rows)
            ])
            filler.append([
                self._selector.draw_symbol(strip, state, consume=False)
                for _ in range(self.filler_rows)
            ])

        grid = SymbolGrid.from_columns(columns)
        wins = self.evaluate(grid, credit_cost)
        total_win = saturate(sum(win.value for win in wins))

        if total_win > 0:
            self.logger.debug(f"Spin won {total_win} across {len(wins)} wins")

        return SpinOutcome(grid=grid, wins=wins, total_win=total_win,
                           credit_cost=credit_cost, filler=filler)

    def evaluate(self, grid: SymbolGrid, credit_cost: int = 1) -> List[WinRecord]:
        """Evaluate a landed grid against this machine's paylines."""
        patterns = self.get_patterns(grid.rows_per_column, grid.column_count)
        return self._evaluator.evaluate_wins(grid, patterns, credit_cost)

    def get_info(self) -> Dict[str, Any]:
        """
        Summary of the machine's layout for reports.

        Returns:
            Dictionary of machine information
        """
        return {
            "machine_id": self.id,
            "reels": self.column_count,
            "rows_per_column": self.rows_per_column,
            "paylines": len(self.paylines),
            "filler_rows": self.filler_rows,
            "bet_levels": dict(self.bet_levels),
            "rng": getattr(self.rng, "name", type(self.rng).__name__),
            "symbols": sorted({entry.name for strip in self.strips for entry in strip.entries}),
        }
