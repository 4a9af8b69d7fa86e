"""Result types and collection for benchmark sweeps."""

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Any, Optional, Tuple, Union
from dataclasses import dataclass, field, asdict
import pandas as pd
from ..utils.logging import LoggerMixin


def elapsed_to_seconds(value: str) -> float:
    """Convert a ``[h:]mm:ss.ss`` elapsed string to seconds."""
    parts = value.split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    if len(parts) == 2:
        minutes, seconds = parts
        return int(minutes) * 60 + float(seconds)
    return float(parts[0])


@dataclass(frozen=True)
class TimingResult:
    """Timing report of one benchmark invocation.

    The times are kept as the text the wrapper printed.
    """
    user_time: str
    system_time: str
    elapsed_time: str
    raw_output: str

    def as_tuple(self) -> Tuple[str, str, str, str]:
        return (self.user_time, self.system_time, self.elapsed_time, self.raw_output)

    @property
    def user_seconds(self) -> float:
        return float(self.user_time)

    @property
    def system_seconds(self) -> float:
        return float(self.system_time)

    @property
    def elapsed_seconds(self) -> float:
        return elapsed_to_seconds(self.elapsed_time)


@dataclass
class ScenarioResult:
    """Result of running a single scenario."""
    name: str
    concurrency: int
    iterations: int
    command: List[str]
    timing: TimingResult
    start_time: float
    end_time: float

    @property
    def duration_seconds(self) -> float:
        """Wall time measured around the subprocess call."""
        return self.end_time - self.start_time


@dataclass
class SweepResult:
    """All scenario results of one run, in execution order."""
    run_id: str
    start_time: float
    end_time: float = 0.0

    binary: str = ""
    time_command: str = ""

    scenarios: List[ScenarioResult] = field(default_factory=list)

    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        return self.end_time - self.start_time

    @property
    def total_scenarios(self) -> int:
        return len(self.scenarios)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SweepResult":
        data = dict(data)
        scenarios = []
        for item in data.pop("scenarios", []):
            item = dict(item)
            item["timing"] = TimingResult(**item["timing"])
            scenarios.append(ScenarioResult(**item))
        return cls(scenarios=scenarios, **data)


class ResultCollector(LoggerMixin):
    """Collects scenario results into sweep results and exports them."""

    def __init__(self):
        super().__init__()
        self.results: List[SweepResult] = []

    def create_result(self, binary: str = "", time_command: str = "",
                      metadata: Optional[Dict[str, Any]] = None) -> SweepResult:
        """Create a new sweep result."""
        run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        result = SweepResult(
            run_id=run_id,
            start_time=time.time(),
            binary=binary,
            time_command=time_command,
            metadata=metadata or {}
        )

        self.results.append(result)
        self.logger.debug(f"Created sweep result: {run_id}")
        return result

    def add_scenario_result(self, sweep: SweepResult, scenario_result: ScenarioResult) -> None:
        sweep.scenarios.append(scenario_result)

    def finalize_result(self, sweep: SweepResult) -> None:
        sweep.end_time = time.time()
        self.logger.info(
            f"Finalized sweep {sweep.run_id}: {sweep.total_scenarios} scenarios "
            f"in {sweep.duration_seconds:.1f}s"
        )

    def save_result(self, result: SweepResult, file_path: Union[str, Path]) -> None:
        """Save sweep result to JSON file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(result.to_json())

        self.logger.info(f"Saved sweep result to: {file_path}")

    def load_result(self, file_path: Union[str, Path]) -> SweepResult:
        """Load sweep result from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        result = SweepResult.from_dict(data)
        self.logger.info(f"Loaded sweep result from: {file_path}")
        return result

    def to_dataframe(self, result: SweepResult) -> pd.DataFrame:
        """One row per scenario, raw output excluded."""
        rows = []
        for scenario in result.scenarios:
            timing = scenario.timing
            rows.append({
                'run_id': result.run_id,
                'scenario': scenario.name,
                'concurrency': scenario.concurrency,
                'iterations': scenario.iterations,
                'user_time': timing.user_time,
                'system_time': timing.system_time,
                'elapsed_time': timing.elapsed_time,
                'elapsed_seconds': timing.elapsed_seconds,
                'wall_seconds': scenario.duration_seconds,
            })

        columns = [
            'run_id', 'scenario', 'concurrency', 'iterations', 'user_time',
            'system_time', 'elapsed_time', 'elapsed_seconds', 'wall_seconds',
        ]
        return pd.DataFrame(rows, columns=columns)

    def export_csv(self, result: SweepResult, file_path: Union[str, Path]) -> None:
        """Export sweep result to CSV format."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        # Keep the times as the wrapper printed them
        df = self.to_dataframe(result).astype(
            {'user_time': str, 'system_time': str, 'elapsed_time': str}
        )
        df.to_csv(file_path, index=False)

        self.logger.info(f"Exported sweep result to CSV: {file_path}")

    def generate_report(self, result: SweepResult) -> str:
        """Generate a markdown report for a sweep."""
        report = [f"# Benchmark Sweep {result.run_id}\n"]
        report.append(f"Generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        report.append(f"Binary: `{result.binary}`\n")
        report.append(f"Scenarios: {result.total_scenarios}\n\n")

        report.append("| Scenario | Concurrency | Iterations | User (s) | System (s) | Elapsed |")
        report.append("|----------|-------------|------------|----------|------------|---------|")

        for scenario in result.scenarios:
            timing = scenario.timing
            report.append(
                f"| {scenario.name} | {scenario.concurrency} | {scenario.iterations} | "
                f"{timing.user_time} | {timing.system_time} | {timing.elapsed_time} |"
            )

        return "\n".join(report)
