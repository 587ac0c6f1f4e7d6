# reelpay/application/simulation/spin_simulator.py
import logging
import time
from datetime import datetime
from typing import Optional

from tqdm import tqdm

from ..analysis.simulation_stats import SimulationStats
from ...domain.machine.entities.slot_machine import SlotMachine


class SpinSimulator:
    """
    Monte Carlo driver: spins a machine many times and collects statistics.
    """
    def __init__(self, machine: SlotMachine, batch_size: int = 10000):
        """
        Initialize the simulator.

        Args:
            machine: Machine to spin
            batch_size: Spins between progress bar updates
        """
        self.logger = logging.getLogger("application.simulation.spin_simulator")
        self.machine = machine
        self.batch_size = max(int(batch_size), 1)

    def run(self, num_spins: int, credit_cost: Optional[int] = None,
            bet_level: Optional[str] = None, show_progress: bool = False) -> SimulationStats:
        """
        Spin the machine ``num_spins`` times.

        Args:
            num_spins: Number of spins
            credit_cost: Credit cost per spin; resolved from bet_level when None
            bet_level: Bet level name used when credit_cost is None
            show_progress: Show a tqdm progress bar

        Returns:
            Collected SimulationStats

        Raises:
            ValueError: If num_spins is negative
        """
        if num_spins < 0:
            raise ValueError(f"Invalid number of spins: {num_spins}")
        if credit_cost is None:
            credit_cost = self.machine.get_credit_cost(bet_level)

        stats = SimulationStats(self.machine.id, credit_cost=credit_cost, sim_start_time=datetime.now())
        self.logger.info(f"Simulating {num_spins:,} spins on {self.machine.id} at {credit_cost} credits")

        start_time = time.time()
        pbar = tqdm(total=num_spins, desc=self.machine.id, unit="spin") if show_progress else None

        num_batches = (num_spins + self.batch_size - 1) // self.batch_size
        try:
            for batch in range(num_batches):
                current_batch_size = min(self.batch_size, num_spins - batch * self.batch_size)
                for _ in range(current_batch_size):
                    stats.update_spin(self.machine.spin(credit_cost=credit_cost))

                if pbar:
                    pbar.update(current_batch_size)
                    pbar.set_postfix(rtp=f"{stats.return_to_player:.4f}")
        finally:
            if pbar:
                pbar.close()

        stats.duration = time.time() - start_time
        stats.sim_end_time = datetime.now()

        self.logger.info(
            f"Finished {stats.total_spins:,} spins in {stats.duration:.2f}s: "
            f"RTP {stats.return_to_player:.4f}, hit rate {stats.hit_rate:.4f}"
        )
        return stats
