"""Summary and export of computed schedules."""

import csv
import json
from pathlib import Path
from typing import Optional

from .critical import critical_chains
from .models import ScheduleSnapshot
from .network import TaskNetwork

CSV_FIELDS = [
    "id",
    "duration",
    "early_start",
    "early_finish",
    "late_start",
    "late_finish",
    "total_float",
    "free_float",
    "is_critical",
    "is_near_critical",
]


class ScheduleReport:
    """Summarizes and exports a ScheduleSnapshot."""

    def __init__(self, snapshot: ScheduleSnapshot, network: Optional[TaskNetwork] = None):
        """Initialize the report.

        Args:
            snapshot: Computed schedule
            network: Network the snapshot came from; enables chain output
        """
        self.snapshot = snapshot
        self.network = network

    def get_summary(self) -> dict:
        """Generate a summary of the schedule.

        Returns:
            Summary dictionary
        """
        snapshot = self.snapshot
        floats = [entry.total_float for entry in snapshot.tasks]

        summary = {
            "num_tasks": len(snapshot),
            "project_duration": snapshot.project_duration,
            "critical_path_duration": snapshot.critical_path_duration,
            "critical_task_count": len(snapshot.critical_task_ids),
            "critical_task_ids": list(snapshot.critical_task_ids),
            "near_critical_threshold": snapshot.near_critical_threshold,
            "near_critical_task_ids": list(snapshot.near_critical_task_ids),
            "max_total_float": max(floats, default=0),
            "average_total_float": sum(floats) / len(floats) if floats else 0,
            "ignored_references": [list(pair) for pair in snapshot.ignored_references],
        }
        if self.network is not None:
            summary["critical_chains"] = critical_chains(self.network, snapshot)
        return summary

    def export_json(self, filepath: str, summary: Optional[dict] = None):
        """Export the schedule to a JSON file.

        Args:
            filepath: Output file path
            summary: Optional summary to include
        """
        output = self.snapshot.to_dict()
        output["summary"] = summary or {}

        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w") as f:
            json.dump(output, f, indent=2)

    def export_csv(self, filepath: str):
        """Export per-task dates to a CSV file.

        Args:
            filepath: Output file path
        """
        if not self.snapshot.tasks:
            return

        Path(filepath).parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for entry in self.snapshot.tasks:
                writer.writerow(entry.to_dict())

    def print_summary(self):
        """Print a human-readable summary to console."""
        summary = self.get_summary()

        print("\n" + "=" * 60)
        print("CPM SCHEDULE")
        print("=" * 60)

        print(f"\nTasks scheduled: {summary['num_tasks']}")
        print(f"Project duration: {summary['project_duration']} days")

        print("\nCRITICAL PATH:")
        print(f"  Critical tasks: {summary['critical_task_count']}")
        for chain in summary.get("critical_chains", []):
            print(f"    {' -> '.join(str(task_id) for task_id in chain)}")

        print(f"\nNEAR-CRITICAL (float <= {summary['near_critical_threshold']} days):")
        if summary["near_critical_task_ids"]:
            for task_id in summary["near_critical_task_ids"]:
                print(f"  {task_id}: float {self.snapshot[task_id].total_float}")
        else:
            print("  None")

        print("\nFLOAT:")
        print(f"  Max total float:     {summary['max_total_float']}")
        print(f"  Average total float: {summary['average_total_float']:.2f}")

        if summary["ignored_references"]:
            print("\nIGNORED REFERENCES:")
            for task_id, missing_id in summary["ignored_references"]:
                print(f"  {task_id} -> unknown predecessor {missing_id}")

        print("\n" + "=" * 60)
