# reelpay/application/analysis/report_generator.py
import logging
import json
import os
import time
from typing import Dict, Any, Optional

from .simulation_stats import SimulationStats


class ReportGenerator:
    """
    Writes simulation results to JSON reports.
    """
    def __init__(self, output_dir: str = "reports"):
        """
        Initialize the report generator.

        Args:
            output_dir: Directory for storing reports
        """
        self.logger = logging.getLogger("application.analysis.report")
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def generate_summary_report(self, stats: SimulationStats,
                                machine_info: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate a summary report for one simulation run.

        Args:
            stats: Statistics collected by the spin simulator
            machine_info: Machine layout from SlotMachine.get_info

        Returns:
            Path to the generated report file
        """
        self.logger.info(f"Generating summary report for {stats.machine_id}")

        report = {
            "generated_at": time.strftime("%Y-%m-%d %H:%M:%S"),
            "machine": machine_info or {"machine_id": stats.machine_id},
            "summary": self._create_summary(stats),
            "statistics": stats.to_dict(),
        }

        timestamp = time.strftime("%Y%m%d-%H%M%S")
        filename = f"{stats.machine_id}_report_{timestamp}.json"
        filepath = os.path.join(self.output_dir, filename)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2)

        self.logger.info(f"Summary report saved to {filepath}")
        return filepath

    @staticmethod
    def _create_summary(stats: SimulationStats) -> Dict[str, Any]:
        total_win = stats.total_win
        return {
            "spins": stats.total_spins,
            "rtp": round(stats.return_to_player, 6),
            "hit_rate": round(stats.hit_rate, 6),
            "line_share": round(stats.line_win / total_win, 6) if total_win > 0 else 0.0,
            "group_share": round(stats.group_win / total_win, 6) if total_win > 0 else 0.0,
            "max_win": stats.max_win,
            "spins_per_second": round(stats.total_spins / stats.duration, 2) if stats.duration > 0 else None,
        }
