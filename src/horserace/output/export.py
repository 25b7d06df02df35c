"""Save and load race configurations, export simulation results."""

import csv
import json
from pathlib import Path

from horserace.analysis.montecarlo import SimulationResults, summarize
from horserace.models import Race


def save_race(race: Race, path: str | Path) -> Path:
    """Write a race (configuration, horses and run state) as JSON.

    Returns:
        Path to created file
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(race.model_dump_json(indent=2))
    return filepath


def load_race(path: str | Path) -> Race:
    """Read a race written by save_race.

    Raises:
        OSError: if the file cannot be read
        pydantic.ValidationError: if the content is not a valid race
    """
    return Race.model_validate_json(Path(path).read_text())


class Exporter:
    """Exports Monte Carlo results to CSV and JSON."""

    def __init__(self, output_dir: str | Path = "output"):
        """Initialize exporter.

        Args:
            output_dir: Directory for output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_lane_statistics_csv(
        self,
        results: SimulationResults,
        filename: str = "lane_statistics.csv",
    ) -> Path:
        """Export per-lane statistics to CSV.

        Args:
            results: Simulation results
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "lane", "horse_name", "starting_confidence", "wins", "win_rate",
                "falls", "fall_rate", "avg_winning_ticks",
            ])

            for lane, stats in sorted(results.lane_stats.items()):
                writer.writerow([
                    lane,
                    stats.horse_name,
                    f"{stats.starting_confidence:.3f}",
                    stats.wins,
                    f"{stats.win_rate:.2f}",
                    stats.falls,
                    f"{stats.fall_rate:.2f}",
                    f"{stats.avg_winning_ticks:.2f}",
                ])

        return filepath

    def export_statistics_json(
        self,
        results: SimulationResults,
        filename: str = "statistics.json",
    ) -> Path:
        """Export aggregated statistics to JSON.

        Args:
            results: Simulation results
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w") as f:
            json.dump(summarize(results), f, indent=2)

        return filepath

    def export_all(
        self,
        results: SimulationResults,
        prefix: str = "",
    ) -> dict[str, Path]:
        """Export all result formats.

        Args:
            results: Simulation results
            prefix: Optional prefix for filenames

        Returns:
            Dictionary of format -> filepath
        """
        prefix = f"{prefix}_" if prefix else ""

        return {
            "lane_csv": self.export_lane_statistics_csv(
                results, f"{prefix}lane_statistics.csv"
            ),
            "statistics_json": self.export_statistics_json(
                results, f"{prefix}statistics.json"
            ),
        }
