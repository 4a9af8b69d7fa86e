"""Runs the benchmark binary under the process-timing wrapper."""

import os
import shlex
import subprocess
import time
from typing import Callable, Dict, List, Optional

from .config import DEFAULT_BINARY, DEFAULT_TIME_COMMAND, RunnerConfig, Scenario
from .parser import parse
from .results import ResultCollector, ScenarioResult, SweepResult, TimingResult
from ..utils.logging import LoggerMixin, get_logger

logger = get_logger("runner")


def build_command(
    concurrency: int = 1,
    iterations: int = 1,
    binary: str = DEFAULT_BINARY,
    time_command: str = DEFAULT_TIME_COMMAND
) -> List[str]:
    """Build the argv for one invocation.

    The wrapper command is split shell-style so extra flags can be passed
    with it, e.g. ``"/usr/bin/time --quiet"``.
    """
    return [
        *shlex.split(time_command),
        binary,
        "-c", str(concurrency),
        "-i", str(iterations),
    ]


def execute(
    command: List[str],
    timeout: Optional[float] = None,
    env: Optional[Dict[str, str]] = None
) -> str:
    """Run a command to completion and return stdout and stderr as one text.

    Blocks until the process exits. Spawn errors (``OSError``) and, when a
    timeout is given, ``subprocess.TimeoutExpired`` propagate.
    """
    child_env = None
    if env:
        child_env = dict(os.environ)
        child_env.update(env)

    logger.debug(f"Executing: {shlex.join(command)}")
    completed = subprocess.run(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        timeout=timeout,
        env=child_env,
        check=False
    )

    if completed.returncode != 0:
        logger.warning(f"Command exited with status {completed.returncode}: {command[0]}")
    else:
        logger.debug(f"Command exited with status 0: {command[0]}")

    return completed.stdout


def run(
    concurrency: int = 1,
    iterations: int = 1,
    binary: str = DEFAULT_BINARY,
    time_command: str = DEFAULT_TIME_COMMAND,
    timeout: Optional[float] = None,
    env: Optional[Dict[str, str]] = None
) -> TimingResult:
    """Run the benchmark once and parse the timing report.

    Raises:
        OSError: If the wrapper cannot be spawned
        TimingFormatError: If the captured output is not a timing report
    """
    command = build_command(concurrency, iterations, binary, time_command)
    return parse(execute(command, timeout=timeout, env=env))


class BenchmarkRunner(LoggerMixin):
    """Runs the configured scenarios one after another."""

    def __init__(self, config: RunnerConfig, collector: Optional[ResultCollector] = None):
        super().__init__()
        self.config = config
        self.collector = collector or ResultCollector()

    def run_scenario(self, scenario: Scenario) -> ScenarioResult:
        """Run a single scenario and time it."""
        command = build_command(
            scenario.concurrency,
            scenario.iterations,
            self.config.binary,
            self.config.time_command
        )

        self.logger.info(
            f"Running {scenario.label}: concurrency={scenario.concurrency} "
            f"iterations={scenario.iterations}"
        )

        start_time = time.time()
        output = execute(
            command,
            timeout=self.config.timeout_seconds,
            env=self.config.environment
        )
        end_time = time.time()

        timing = parse(output)
        self.logger.info(
            f"{scenario.label}: user={timing.user_time} system={timing.system_time} "
            f"elapsed={timing.elapsed_time}"
        )

        return ScenarioResult(
            name=scenario.label,
            concurrency=scenario.concurrency,
            iterations=scenario.iterations,
            command=command,
            timing=timing,
            start_time=start_time,
            end_time=end_time
        )

    def run_all(
        self,
        on_result: Optional[Callable[[ScenarioResult], None]] = None
    ) -> SweepResult:
        """Run every scenario in order.

        ``on_result`` is called after each scenario, before the next one is
        spawned. The first failure aborts the sweep.
        """
        sweep = self.collector.create_result(
            binary=self.config.binary,
            time_command=self.config.time_command
        )

        for scenario in self.config.scenarios:
            result = self.run_scenario(scenario)
            self.collector.add_scenario_result(sweep, result)
            if on_result is not None:
                on_result(result)

        self.collector.finalize_result(sweep)
        return sweep
