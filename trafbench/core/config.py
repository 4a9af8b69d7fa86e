"""Configuration management for traf-bench."""

import os
import yaml
from typing import Dict, List, Optional, Union
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


DEFAULT_BINARY = "target/release/traf_benchmark"
DEFAULT_TIME_COMMAND = "/usr/bin/time"


class Scenario(BaseModel):
    """One (concurrency, iterations) pair passed to the benchmark binary."""

    name: Optional[str] = Field(default=None, description="Display name")
    concurrency: int = Field(1, ge=1, description="Concurrent clients (-c)")
    iterations: int = Field(1, ge=1, description="Iterations per client (-i)")

    class Config:
        populate_by_name = True

    @property
    def label(self) -> str:
        return self.name or f"c{self.concurrency}-i{self.iterations}"

    @classmethod
    def from_string(cls, value: str) -> "Scenario":
        """Parse ``C:I`` or ``CxI`` shorthand, e.g. ``10:100``."""
        separator = ":" if ":" in value else "x"
        parts = value.strip().split(separator)
        if len(parts) != 2:
            raise ValueError(
                f"Invalid scenario {value!r}: expected CONCURRENCY:ITERATIONS"
            )
        return cls(concurrency=int(parts[0]), iterations=int(parts[1]))


def default_scenarios() -> List[Scenario]:
    """Fixed sweep; concurrency * iterations is 1000 in every scenario."""
    return [
        Scenario(concurrency=1, iterations=1000),
        Scenario(concurrency=10, iterations=100),
        Scenario(concurrency=100, iterations=10),
        Scenario(concurrency=1000, iterations=1),
    ]


class RunnerConfig(BaseModel):
    """Benchmark runner configuration."""

    binary: str = Field(default=DEFAULT_BINARY, description="Benchmark executable")
    time_command: str = Field(alias="timeCommand", default=DEFAULT_TIME_COMMAND,
                              description="Process-timing wrapper command")
    scenarios: List[Scenario] = Field(default_factory=default_scenarios)

    # None blocks until the benchmark exits
    timeout_seconds: Optional[float] = Field(alias="timeoutSeconds", default=None, gt=0)
    environment: Dict[str, str] = Field(default_factory=dict,
                                        description="Extra environment for the benchmark")

    # Logging settings
    log_level: str = Field(alias="logLevel", default="INFO", description="Logging level")
    log_file: Optional[str] = Field(alias="logFile", default=None, description="Log file path")

    # Results settings
    results_dir: Optional[str] = Field(alias="resultsDir", default=None,
                                       description="Directory for JSON/CSV results")
    results_file_prefix: str = Field(alias="resultsFilePrefix", default="traf_bench")

    class Config:
        populate_by_name = True

    @field_validator('scenarios')
    @classmethod
    def check_scenarios(cls, v):
        if not v:
            raise ValueError("at least one scenario is required")
        return v

    @field_validator('time_command')
    @classmethod
    def check_time_command(cls, v):
        if not v.strip():
            raise ValueError("time command must not be empty")
        return v

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"unknown log level: {v}")
        return level


class ConfigLoader:
    """Configuration loader utility."""

    @staticmethod
    def load_runner(file_path: Union[str, Path]) -> RunnerConfig:
        """Load runner configuration from YAML file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return RunnerConfig(**data)

    @staticmethod
    def save_config(config: BaseModel, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            data = config.model_dump(by_alias=True, exclude_none=True)
            yaml.dump(data, f, default_flow_style=False, indent=2, sort_keys=False)


def load_env_config() -> RunnerConfig:
    """Load configuration from environment variables.

    Only variables that are set end up as explicitly set fields, so the
    result can be merged without masking other sources.
    """
    data = {}
    env_map = {
        'TRAF_BENCH_BINARY': 'binary',
        'TRAF_BENCH_TIME_COMMAND': 'time_command',
        'TRAF_BENCH_TIMEOUT': 'timeout_seconds',
        'TRAF_BENCH_LOG_LEVEL': 'log_level',
        'TRAF_BENCH_LOG_FILE': 'log_file',
        'TRAF_BENCH_RESULTS_DIR': 'results_dir',
    }
    for env_key, field_name in env_map.items():
        value = os.getenv(env_key)
        if value:
            data[field_name] = value
    return RunnerConfig(**data)


def merge_configs(base: RunnerConfig, override: RunnerConfig) -> RunnerConfig:
    """Merge two configurations, with override's explicitly set fields taking precedence."""
    base_dict = base.model_dump(exclude_unset=True)
    override_dict = override.model_dump(exclude_unset=True)
    base_dict.update(override_dict)
    return RunnerConfig(**base_dict)
