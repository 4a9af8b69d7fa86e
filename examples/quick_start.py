#!/usr/bin/env python3
"""Quick start example for traf-bench."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from trafbench.core.config import RunnerConfig, Scenario
from trafbench.core.runner import BenchmarkRunner, run
from trafbench.utils.logging import setup_logging


def run_quick_benchmark():
    """Run a quick benchmark example."""

    setup_logging(level="INFO", component="example")

    # A single invocation returns (user, system, elapsed, raw_output)
    print(run(concurrency=1, iterations=10).as_tuple())

    # A short sweep through the runner
    config = RunnerConfig(
        binary="target/release/traf_benchmark",
        scenarios=[
            Scenario(concurrency=1, iterations=100),
            Scenario(concurrency=10, iterations=10),
        ],
        timeoutSeconds=120
    )

    runner = BenchmarkRunner(config)
    sweep = runner.run_all()

    print(runner.collector.generate_report(sweep))
    for scenario in sweep.scenarios:
        print(f"{scenario.name}: {scenario.timing.elapsed_seconds:.2f}s elapsed")


if __name__ == '__main__':
    run_quick_benchmark()
