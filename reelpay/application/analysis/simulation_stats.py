# reelpay/application/analysis/simulation_stats.py
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional

from ...domain.machine.entities.slot_machine import SpinOutcome


@dataclass
class SimulationStats:
    """Running totals for a batch of spins on one machine."""
    machine_id: str
    credit_cost: int = 1
    sim_start_time: Optional[datetime] = None
    sim_end_time: Optional[datetime] = None
    duration: float = 0.0

    total_spins: int = 0
    win_count: int = 0
    total_bet: int = 0
    total_win: int = 0
    line_win: int = 0
    group_win: int = 0
    max_win: int = 0
    big_win_count: int = 0

    line_hits: Dict[int, int] = field(default_factory=dict)
    symbol_hits: Dict[str, int] = field(default_factory=dict)
    # Exact integer sums of payouts and squared payouts, for the spread
    win_sum_squares: int = 0

    def update_spin(self, outcome: SpinOutcome):
        """
        Fold one spin outcome into the totals.

        Args:
            outcome: Result returned by SlotMachine.spin
        """
        self.total_spins += 1
        self.total_bet += outcome.credit_cost
        self.total_win += outcome.total_win
        self.win_sum_squares += outcome.total_win * outcome.total_win

        if outcome.total_win > 0:
            self.win_count += 1
        self.max_win = max(self.max_win, outcome.total_win)

        # 10x the bet or more counts as a big win
        if outcome.credit_cost > 0 and outcome.total_win >= outcome.credit_cost * 10:
            self.big_win_count += 1

        for win in outcome.wins:
            if win.is_line_win:
                self.line_win += win.value
                self.line_hits[win.line_index] = self.line_hits.get(win.line_index, 0) + 1
            else:
                self.group_win += win.value
            self.symbol_hits[win.symbol_name] = self.symbol_hits.get(win.symbol_name, 0) + 1

    @property
    def return_to_player(self) -> float:
        return self.total_win / self.total_bet if self.total_bet > 0 else 0.0

    @property
    def hit_rate(self) -> float:
        return self.win_count / self.total_spins if self.total_spins > 0 else 0.0

    @property
    def win_std(self) -> float:
        """Standard deviation of per-spin payouts."""
        if self.total_spins == 0:
            return 0.0
        n = self.total_spins
        variance_numerator = max(n * self.win_sum_squares - self.total_win * self.total_win, 0)
        return math.sqrt(variance_numerator) / n

    def to_dict(self) -> Dict[str, Any]:
        return {
            "machine_id": self.machine_id,
            "credit_cost": self.credit_cost,
            "sim_start_time": self.sim_start_time.strftime('%Y-%m-%d %H:%M:%S') if self.sim_start_time else None,
            "sim_end_time": self.sim_end_time.strftime('%Y-%m-%d %H:%M:%S') if self.sim_end_time else None,
            "duration": self.duration,
            "total_spins": self.total_spins,
            "win_count": self.win_count,
            "hit_rate": self.hit_rate,
            "total_bet": self.total_bet,
            "total_win": self.total_win,
            "return_to_player": self.return_to_player,
            "line_win": self.line_win,
            "group_win": self.group_win,
            "max_win": self.max_win,
            "big_win_count": self.big_win_count,
            "win_std": self.win_std,
            "line_hits": {str(k): v for k, v in sorted(self.line_hits.items())},
            "symbol_hits": dict(sorted(self.symbol_hits.items())),
        }
