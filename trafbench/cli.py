"""Command line interface for traf-bench."""

import sys
from pathlib import Path
from typing import List, Optional
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import ConfigLoader, RunnerConfig, Scenario, load_env_config, merge_configs
from .core.parser import parse
from .core.results import ScenarioResult, SweepResult
from .core.runner import BenchmarkRunner
from .utils.logging import setup_logging


# stdout carries the parsed tuples only
console = Console(stderr=True)


@click.group()
@click.option('--log-level', default=None, help='Logging level')
@click.option('--log-file', help='Log file path')
@click.pass_context
def cli(ctx, log_level, log_file):
    """traf benchmark runner CLI."""
    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file

    setup_logging(level=log_level or "WARNING", log_file=log_file, component="cli")


@cli.command()
@click.option('--config', '-f', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='Runner configuration file')
@click.option('--binary', '-b', help='Benchmark executable')
@click.option('--time-command', help='Process-timing wrapper command')
@click.option('--scenario', '-s', 'scenarios', multiple=True,
              help='Scenario as CONCURRENCY:ITERATIONS (repeatable)')
@click.option('--timeout', type=float, help='Per-scenario timeout in seconds')
@click.option('--output-dir', '-o', help='Output directory for results')
@click.option('--results-prefix', help='Results file prefix')
@click.option('--summary/--no-summary', default=True, help='Print a summary table to stderr')
@click.pass_context
def run(ctx, config_file, binary, time_command, scenarios, timeout, output_dir,
        results_prefix, summary):
    """Run the benchmark scenarios and print each timing result."""
    try:
        config = _build_config(
            ctx.obj,
            config_file=config_file,
            binary=binary,
            time_command=time_command,
            scenarios=list(scenarios),
            timeout=timeout,
            output_dir=output_dir,
            results_prefix=results_prefix
        )
        setup_logging(level=config.log_level, log_file=config.log_file, component="cli")

        runner = BenchmarkRunner(config)
        sweep = runner.run_all(on_result=_print_scenario_result)

        if config.results_dir:
            output_path = Path(config.results_dir)
            results_file = output_path / f"{config.results_file_prefix}_{sweep.run_id}.json"
            runner.collector.save_result(sweep, results_file)

            csv_file = output_path / f"{config.results_file_prefix}_{sweep.run_id}.csv"
            runner.collector.export_csv(sweep, csv_file)
            console.print(f"Results saved to: {results_file}")

        if summary:
            _display_results_summary(sweep)

    except Exception as e:
        console.print(f"[red]✗ Benchmark failed: {escape(str(e))}[/red]", highlight=False)
        sys.exit(1)


def _build_config(
    options: dict,
    config_file: Optional[str],
    binary: Optional[str],
    time_command: Optional[str],
    scenarios: List[str],
    timeout: Optional[float],
    output_dir: Optional[str],
    results_prefix: Optional[str]
) -> RunnerConfig:
    """Defaults < environment < config file < command line."""
    config = load_env_config()
    if config_file:
        config = merge_configs(config, ConfigLoader.load_runner(config_file))

    overrides = {
        'binary': binary,
        'time_command': time_command,
        'timeout_seconds': timeout,
        'results_dir': output_dir,
        'results_file_prefix': results_prefix,
        'log_level': options.get('log_level'),
        'log_file': options.get('log_file'),
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if scenarios:
        overrides['scenarios'] = [Scenario.from_string(s) for s in scenarios]

    return merge_configs(config, RunnerConfig(**overrides))


def _print_scenario_result(result: ScenarioResult) -> None:
    click.echo(repr(result.timing.as_tuple()))


def _display_results_summary(sweep: SweepResult) -> None:
    """Display sweep results summary."""
    table = Table(title=f"Sweep {sweep.run_id}", show_header=True, header_style="bold magenta")
    table.add_column("Scenario", style="cyan")
    table.add_column("Concurrency", justify="right")
    table.add_column("Iterations", justify="right")
    table.add_column("User (s)", justify="right", style="green")
    table.add_column("System (s)", justify="right", style="green")
    table.add_column("Elapsed", justify="right", style="green")

    for scenario in sweep.scenarios:
        table.add_row(
            scenario.name,
            str(scenario.concurrency),
            str(scenario.iterations),
            scenario.timing.user_time,
            scenario.timing.system_time,
            scenario.timing.elapsed_time
        )

    console.print(table)


@cli.command(name='parse')
@click.argument('source', type=click.File('r'), default='-')
def parse_command(source):
    """Parse timing wrapper output from SOURCE (default: stdin)."""
    try:
        result = parse(source.read())
        click.echo(repr(result.as_tuple()))
    except Exception as e:
        console.print(f"[red]✗ Parse failed: {escape(str(e))}[/red]", highlight=False)
        sys.exit(1)


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
def validate(config_file):
    """Validate a runner configuration file."""
    try:
        console.print(f"[blue]Validating runner config: {config_file}[/blue]")
        config = ConfigLoader.load_runner(config_file)
        console.print("[green]✓ Valid runner config[/green]")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Binary", config.binary)
        table.add_row("Time command", config.time_command)
        table.add_row("Timeout", f"{config.timeout_seconds}s" if config.timeout_seconds else "none")
        for scenario in config.scenarios:
            table.add_row(scenario.label, f"-c {scenario.concurrency} -i {scenario.iterations}")

        console.print(table)

    except Exception as e:
        console.print(f"[red]✗ Validation failed: {escape(str(e))}[/red]", highlight=False)
        sys.exit(1)


def main():
    """Entry point for the traf-bench CLI."""
    cli()


if __name__ == '__main__':
    main()
