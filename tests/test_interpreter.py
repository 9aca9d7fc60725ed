"""
Tests for interpreter discovery — candidate order and the version gate.
"""

import pytest

from mlinstall.adapters.mock import MockRunner
from mlinstall.core.errors import MissingPrerequisiteError
from mlinstall.core.services.interpreter import discover_interpreter, probe_version
from mlinstall.core.services.version import encode_version

CANDIDATES = ["python3.11", "python3.10", "python3", "python"]


class TestProbeVersion:
    def test_reads_stdout(self):
        runner = MockRunner()
        runner.set_program_output("python3", "Python 3.10.12")
        assert probe_version(runner, "/usr/bin/python3") == "3.10.12"
        assert runner.call_log[0].argv == ["/usr/bin/python3", "--version"]
        assert runner.call_log[0].capture

    def test_failure_is_none(self):
        runner = MockRunner()
        runner.set_program_output("python3", "boom", ok=False)
        assert probe_version(runner, "python3") is None


class TestDiscoverInterpreter:
    def test_skips_too_old_and_missing(self, runner, fake_which):
        interp = discover_interpreter(CANDIDATES, "3.9.0", runner, which=fake_which)
        assert interp.path == "/usr/bin/python3.10"
        assert interp.version == "3.10.12"
        assert interp.encoded == encode_version("3.10.12")

    def test_first_qualifying_wins(self, fake_which):
        runner = MockRunner()
        runner.set_program_output("python3.10", "Python 3.10.0")
        runner.set_program_output("python3", "Python 3.12.1")
        interp = discover_interpreter(["python3.10", "python3"], "3.9", runner, which=fake_which)
        assert interp.path == "/usr/bin/python3.10"
        # later candidates never probed
        assert runner.call_count == 1

    def test_none_qualify(self, runner, fake_which):
        with pytest.raises(MissingPrerequisiteError) as exc:
            discover_interpreter(CANDIDATES, "3.11.0", runner, which=fake_which)
        assert "3.11.0" in str(exc.value)
        assert "python3 (3.8.10)" in exc.value.guidance
        assert exc.value.pause

    def test_nothing_on_path(self, runner):
        with pytest.raises(MissingPrerequisiteError) as exc:
            discover_interpreter(CANDIDATES, "3.9.0", runner, which=lambda name: None)
        assert "none found on PATH" in exc.value.guidance
        assert runner.call_count == 0

    def test_unparseable_version_skipped(self, fake_which):
        runner = MockRunner()
        runner.set_program_output("python3.10", "no version here")
        runner.set_program_output("python3", "Python 3.9.1")
        interp = discover_interpreter(["python3.10", "python3"], "3.9.0", runner, which=fake_which)
        assert interp.path == "/usr/bin/python3"
