"""Core components of traf-bench."""

from .config import RunnerConfig, Scenario, ConfigLoader
from .parser import TimingFormatError, parse
from .results import TimingResult, ScenarioResult, SweepResult, ResultCollector
from .runner import BenchmarkRunner, build_command, execute, run

__all__ = [
    "RunnerConfig",
    "Scenario",
    "ConfigLoader",
    "TimingFormatError",
    "parse",
    "TimingResult",
    "ScenarioResult",
    "SweepResult",
    "ResultCollector",
    "BenchmarkRunner",
    "build_command",
    "execute",
    "run",
]
