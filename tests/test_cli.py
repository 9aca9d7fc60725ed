"""
Tests for CLI commands — install, detect, and global options.
"""

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

import mlinstall.main as main_mod
from mlinstall.adapters.mock import MockRunner
from mlinstall.adapters.platform_probe import StaticPlatformProbe
from mlinstall.adapters.prompt import ScriptedPrompter
from mlinstall.core.data import DATA_DIR
from mlinstall.core.engine.orchestrator import STEP_INSTALL_APPLICATION, STEP_INSTALL_REQUIREMENTS
from mlinstall.main import cli


@pytest.fixture
def host(monkeypatch, home: Path, fake_which):
    """Swap the real host for a Linux box with python3.10 and a mock runner."""
    mock = MockRunner()
    mock.set_program_output("python3.10", "Python 3.10.12")
    state = {"probe": StaticPlatformProbe("Linux", "x86_64")}

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("MLI_SOURCE_DIR", raising=False)
    monkeypatch.delenv("MLI_LOG_FILE", raising=False)
    monkeypatch.delenv("MLI_LOG_FILE_LEVEL", raising=False)
    monkeypatch.chdir(home)
    monkeypatch.setattr(main_mod, "SubprocessRunner", lambda: mock)
    monkeypatch.setattr(main_mod, "HostPlatformProbe", lambda: state["probe"])
    monkeypatch.setattr(main_mod.shutil, "which", fake_which)
    return {"runner": mock, "state": state, "home": home}


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "install" in result.output
        assert "detect" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config(self, tmp_path: Path):
        bad = tmp_path / "installer.yml"
        bad.write_text("- not a mapping\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "detect"])
        assert result.exit_code == 1
        assert "mapping" in result.output


class TestInstallCommand:
    def test_install_defaults(self, host):
        result = CliRunner().invoke(cli, ["install"], input="\n\n")
        assert result.exit_code == 0, result.output
        root = host["home"] / "invokeai"
        assert "is installed in" in result.output
        assert (root / "invoke.sh").is_file()
        assert (root / "requirements.txt").is_file()
        assert host["runner"].called_ids[-1] == "configure"

    def test_bare_command_runs_install(self, host):
        result = CliRunner().invoke(cli, [], input="\n\n")
        assert result.exit_code == 0, result.output
        assert (host["home"] / "invokeai" / "update.sh").is_file()

    def test_custom_root(self, host, tmp_path: Path):
        target = tmp_path / "elsewhere"
        result = CliRunner().invoke(cli, ["install"], input=f"{target}\ny\n")
        assert result.exit_code == 0, result.output
        assert (target / "invoke.sh").is_file()

    def test_step_failure_exits_1(self, host):
        host["runner"].set_failure(STEP_INSTALL_REQUIREMENTS, error="No matching distribution")
        result = CliRunner().invoke(cli, ["install"], input="\n\n")
        assert result.exit_code == 1
        assert "Could not install the dependencies" in result.output
        assert "Troubleshooting:" in result.output
        assert STEP_INSTALL_APPLICATION not in host["runner"].called_ids

    def test_unsupported_platform(self, host):
        host["state"]["probe"] = StaticPlatformProbe("SunOS", "x86_64")
        result = CliRunner().invoke(cli, ["install"], input="\n\n")
        assert result.exit_code == 1
        assert "Unsupported operating system: SunOS" in result.output
        assert not (host["home"] / "invokeai").exists()

    def test_missing_python(self, host, monkeypatch):
        monkeypatch.setattr(main_mod.shutil, "which", lambda name: None)
        result = CliRunner().invoke(cli, ["install"], input="\n\n")
        assert result.exit_code == 1
        assert "Python 3.9.0 or higher is required" in result.output

    def test_quiet_hides_progress(self, host):
        result = CliRunner().invoke(cli, ["--quiet", "install"], input="\n\n")
        assert result.exit_code == 0, result.output
        assert "→ Upgrading pip" not in result.output

    def test_install_log_in_root(self, host):
        result = CliRunner().invoke(cli, ["install"], input="\n\n")
        assert result.exit_code == 0, result.output
        log = (host["home"] / "invokeai" / "install.log").read_text()
        assert "CMD" in log
        assert "install-requirements" in log

    def test_explicit_log_file_replaces_root_log(self, host, tmp_path: Path, monkeypatch):
        log_file = tmp_path / "elsewhere.log"
        monkeypatch.setenv("MLI_LOG_FILE", str(log_file))
        monkeypatch.setenv("MLI_LOG_FILE_LEVEL", "INFO")
        result = CliRunner().invoke(cli, ["install"], input="\n\n")
        assert result.exit_code == 0, result.output
        assert "CMD" in log_file.read_text()
        assert not (host["home"] / "invokeai" / "install.log").exists()


class TestInstallLocalFailures:
    @pytest.fixture
    def prompter(self, monkeypatch):
        scripted = ScriptedPrompter([None, None])
        monkeypatch.setattr(main_mod, "ClickPrompter", lambda: scripted)
        return scripted

    def _bundle(self, tmp_path: Path) -> Path:
        bundle = tmp_path / "bundle"
        shutil.copytree(DATA_DIR / "environments-and-requirements", bundle / "environments-and-requirements")
        return bundle

    def test_missing_templates_reported(self, host, prompter, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MLI_SOURCE_DIR", str(self._bundle(tmp_path)))
        result = CliRunner().invoke(cli, ["install"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, FileNotFoundError)
        assert "❌ Could not copy the launcher scripts" in result.output
        assert "Troubleshooting:" in result.output
        assert "install.log" in result.output
        assert prompter.pauses[-1] == "Press any key to exit..."
        assert len(prompter.pauses) == 2

    def test_broken_manifest_reported(self, host, prompter, tmp_path: Path, monkeypatch):
        bundle = self._bundle(tmp_path)
        (bundle / "environments-and-requirements" / "requirements-lin-cuda.txt").write_text("-r nowhere.txt\n")
        monkeypatch.setenv("MLI_SOURCE_DIR", str(bundle))
        result = CliRunner().invoke(cli, ["install"])

        assert result.exit_code == 1
        assert "❌ Could not prepare the dependency list" in result.output
        assert "nowhere.txt" in result.output
        assert prompter.pauses[-1] == "Press any key to exit..."
        assert STEP_INSTALL_REQUIREMENTS not in host["runner"].called_ids


class TestDetectCommand:
    def test_detect_text(self, host):
        result = CliRunner().invoke(cli, ["detect"])
        assert result.exit_code == 0, result.output
        assert "requirements-lin-cuda.txt" in result.output
        assert "/usr/bin/python3.10" in result.output

    def test_detect_json_amd(self, host):
        host["state"]["probe"] = StaticPlatformProbe("Linux", "x86_64", {"amdgpu"})
        result = CliRunner().invoke(cli, ["detect", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["platform"] == {"os_family": "linux", "arch": "x86_64", "gpu": "amd"}
        assert data["manifest"] == "requirements-lin-amd.txt"
        assert data["interpreter"]["version"] == "3.10.12"
        assert data["error"] is None

    def test_detect_unsupported_json(self, host):
        host["state"]["probe"] = StaticPlatformProbe("Linux", "mips")
        result = CliRunner().invoke(cli, ["detect", "--json"])
        assert result.exit_code == 1
        assert "architecture" in json.loads(result.output)["error"]

    def test_detect_no_python(self, host, monkeypatch):
        monkeypatch.setattr(main_mod.shutil, "which", lambda name: None)
        result = CliRunner().invoke(cli, ["detect"])
        assert result.exit_code == 1
        assert "Python" in result.output

    def test_detect_touches_nothing(self, host):
        CliRunner().invoke(cli, ["detect"])
        assert list(host["home"].iterdir()) == []
