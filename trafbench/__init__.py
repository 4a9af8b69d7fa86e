"""traf-bench: run traf_benchmark under a process-timing wrapper and parse the report."""

from .core.parser import TimingFormatError, parse
from .core.results import TimingResult
from .core.runner import BenchmarkRunner, run

__version__ = "0.1.0"

__all__ = [
    "BenchmarkRunner",
    "TimingFormatError",
    "TimingResult",
    "parse",
    "run",
]
