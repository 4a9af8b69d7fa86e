"""Test benchmark invocation and sweeps."""

import subprocess
from unittest import mock

import pytest

from trafbench.core.config import RunnerConfig, Scenario
from trafbench.core.parser import TimingFormatError
from trafbench.core.runner import BenchmarkRunner, build_command, execute, run


def report(user="0.10", system="0.05", elapsed="0:00.20"):
    return (
        f"{user}user {system}system {elapsed}elapsed 75%CPU (0avgtext+0avgdata 4088maxresident)k\n"
        "0inputs+0outputs (0major+206minor)pagefaults 0swaps\n"
    )


def completed(stdout, returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


class TestBuildCommand:
    """Test command construction."""

    def test_build_command_defaults(self):
        assert build_command() == [
            "/usr/bin/time", "target/release/traf_benchmark", "-c", "1", "-i", "1"
        ]

    def test_build_command_embeds_parameters(self):
        command = build_command(1, 1000, binary="/opt/bench")

        assert command[1:] == ["/opt/bench", "-c", "1", "-i", "1000"]

    def test_build_command_splits_wrapper(self):
        command = build_command(10, 100, binary="bench", time_command="/usr/bin/time -a -o 'my log'")

        assert command == [
            "/usr/bin/time", "-a", "-o", "my log", "bench", "-c", "10", "-i", "100"
        ]


class TestExecute:
    """Test subprocess execution."""

    def test_execute_merges_stderr(self):
        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(report())) as run_mock:
            output = execute(["/usr/bin/time", "bench"])

        assert output == report()
        kwargs = run_mock.call_args.kwargs
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["text"] is True
        assert kwargs["timeout"] is None
        assert kwargs["env"] is None

    def test_execute_env_overrides(self, monkeypatch):
        monkeypatch.setenv("KEEP_ME", "1")

        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(report())) as run_mock:
            execute(["bench"], env={"LC_ALL": "C"})

        env = run_mock.call_args.kwargs["env"]
        assert env["LC_ALL"] == "C"
        assert env["KEEP_ME"] == "1"

    def test_execute_nonzero_status_returns_output(self):
        text = "Command exited with non-zero status 2\n" + report()

        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(text, returncode=2)):
            assert execute(["bench"]) == text

    def test_execute_spawn_failure_propagates(self):
        with pytest.raises(FileNotFoundError):
            execute(["/nonexistent/traf-bench-wrapper", "bench"])

    def test_execute_timeout_propagates(self):
        with mock.patch("trafbench.core.runner.subprocess.run",
                        side_effect=subprocess.TimeoutExpired(["bench"], 1.0)):
            with pytest.raises(subprocess.TimeoutExpired):
                execute(["bench"], timeout=1.0)


class TestRun:
    """Test single benchmark runs."""

    def test_run_parses_output(self):
        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(report("1.50", "0.25", "0:03.10"))) as run_mock:
            result = run(1, 1000, binary="bench")

        assert result.as_tuple()[:3] == ("1.50", "0.25", "0:03.10")
        assert result.raw_output == report("1.50", "0.25", "0:03.10")

        command = run_mock.call_args.args[0]
        assert command[-5:] == ["bench", "-c", "1", "-i", "1000"]
        assert run_mock.call_count == 1

    def test_run_empty_output_fails(self):
        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed("")):
            with pytest.raises(TimingFormatError):
                run()

    def test_run_benchmark_crash_fails(self):
        text = "thread 'main' panicked\nCommand exited with non-zero status 101\n" + report()

        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(text, returncode=101)):
            with pytest.raises(TimingFormatError) as exc_info:
                run()

        assert exc_info.value.position == 0


class TestBenchmarkRunner:
    """Test sequential sweeps."""

    def make_config(self, **kwargs):
        return RunnerConfig(binary="bench", **kwargs)

    def test_run_all_default_order(self):
        """Test the four default scenarios run in order."""
        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(report())) as run_mock:
            sweep = BenchmarkRunner(self.make_config()).run_all()

        commands = [call.args[0][-4:] for call in run_mock.call_args_list]
        assert commands == [
            ["-c", "1", "-i", "1000"],
            ["-c", "10", "-i", "100"],
            ["-c", "100", "-i", "10"],
            ["-c", "1000", "-i", "1"],
        ]
        assert sweep.total_scenarios == 4
        assert [s.name for s in sweep.scenarios] == ["c1-i1000", "c10-i100", "c100-i10", "c1000-i1"]

    def test_callback_before_next_scenario(self):
        """Test each result is reported before the next process starts."""
        events = []

        def fake_run(command, **kwargs):
            events.append(("spawn", command[-3]))
            return completed(report())

        with mock.patch("trafbench.core.runner.subprocess.run", side_effect=fake_run):
            BenchmarkRunner(self.make_config()).run_all(
                on_result=lambda r: events.append(("result", str(r.concurrency)))
            )

        assert events == [
            ("spawn", "1"), ("result", "1"),
            ("spawn", "10"), ("result", "10"),
            ("spawn", "100"), ("result", "100"),
            ("spawn", "1000"), ("result", "1000"),
        ]

    def test_failure_aborts_sweep(self):
        """Test a parse failure stops the remaining scenarios."""
        outputs = [completed(report()), completed("garbage"), completed(report()), completed(report())]

        with mock.patch("trafbench.core.runner.subprocess.run", side_effect=outputs) as run_mock:
            with pytest.raises(TimingFormatError):
                BenchmarkRunner(self.make_config()).run_all()

        assert run_mock.call_count == 2

    def test_run_scenario_uses_config(self):
        config = self.make_config(
            time_command="/usr/bin/time --quiet",
            timeout_seconds=30,
            environment={"LC_ALL": "C"}
        )

        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(report())) as run_mock:
            result = BenchmarkRunner(config).run_scenario(Scenario(concurrency=5, iterations=20))

        assert result.command == ["/usr/bin/time", "--quiet", "bench", "-c", "5", "-i", "20"]
        assert result.timing.user_time == "0.10"
        assert result.end_time >= result.start_time
        assert run_mock.call_args.kwargs["timeout"] == 30
        assert run_mock.call_args.kwargs["env"]["LC_ALL"] == "C"

    def test_collector_receives_results(self):
        config = self.make_config(scenarios=[Scenario(concurrency=2, iterations=3)])
        runner = BenchmarkRunner(config)

        with mock.patch("trafbench.core.runner.subprocess.run",
                        return_value=completed(report())):
            sweep = runner.run_all()

        assert runner.collector.results == [sweep]
        assert sweep.binary == "bench"
        assert sweep.end_time >= sweep.start_time
