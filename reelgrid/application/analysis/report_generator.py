# reelgrid/application/analysis/report_generator.py
import csv
import json
import logging
import os
import time
from typing import Any, Dict, List, Optional


ROUND_FIELDS = [
    "round", "bet", "win_amount", "delta", "balance", "outcome",
    "lines_won", "total_multiplier", "tier", "winning_cells", "grid",
]


class ReportGenerator:
    """
    Writes simulation results to disk: a JSON summary and, optionally, the
    per-round log as CSV.
    """
    def __init__(self, output_dir: str = "results"):
        """
        Args:
            output_dir: Directory for storing reports, created if missing
        """
        self.logger = logging.getLogger("application.analysis.report")
        self.output_dir = output_dir

        os.makedirs(output_dir, exist_ok=True)

    def generate_summary_report(self, summary: Dict[str, Any],
                                engine_info: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate a JSON summary report.

        Args:
            summary: Results from SessionRunner.run
            engine_info: Optional PayoutEngine.get_info output

        Returns:
            Path to the generated report file
        """
        self.logger.info("Generating summary report")

        report = {
            "generated_at": time.strftime("%Y-%m-%d %H:%M:%S"),
            "engine": engine_info or {},
            "summary": summary,
        }

        filepath = self._report_path("summary", "json")
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, default=str)

        self.logger.info(f"Summary report saved to {filepath}")
        return filepath

    def generate_rounds_report(self, rounds: List[Dict[str, Any]]) -> Optional[str]:
        """
        Write one CSV row per round. Grid and winning cells are stored as
        space-separated indices.

        Returns:
            Path to the CSV file, or None when there are no rounds
        """
        if not rounds:
            self.logger.warning("No rounds recorded, skipping rounds report")
            return None

        filepath = self._report_path("rounds", "csv")
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=ROUND_FIELDS, extrasaction='ignore')
            writer.writeheader()
            for record in rounds:
                row = dict(record)
                row["grid"] = " ".join(str(s) for s in record.get("grid", []))
                row["winning_cells"] = " ".join(str(i) for i in record.get("winning_cells", []))
                writer.writerow(row)

        self.logger.info(f"Rounds report saved to {filepath} ({len(rounds)} rounds)")
        return filepath

    def _report_path(self, kind: str, extension: str) -> str:
        timestamp = time.strftime("%Y%m%d-%H%M%S")
        return os.path.join(self.output_dir, f"{kind}_report_{timestamp}.{extension}")
