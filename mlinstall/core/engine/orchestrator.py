"""
Installer orchestrator — the install flow, one step after another.

Flow:
    preflight → root directory → virtual env → manifest → pip installs
              → templates → configure

Each step takes the current InstallState and returns the next one.
Delegated steps run through the injected Runner; the first receipt
that is not ok aborts the whole run with StepFailedError, so nothing
after a failed step ever executes. The two local steps (writing
requirements.txt, copying templates) turn filesystem and manifest
errors into the same StepFailedError. There are no retries: re-running
against the same root (and answering "resume") is the recovery path.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from mlinstall.adapters.base import Runner
from mlinstall.adapters.platform_probe import PlatformProbe
from mlinstall.adapters.prompt import Prompter
from mlinstall.core.errors import MissingPrerequisiteError, StepFailedError
from mlinstall.core.models.action import Action, Receipt
from mlinstall.core.models.platform import Interpreter
from mlinstall.core.models.settings import InstallerSettings
from mlinstall.core.models.state import InstallState
from mlinstall.core.services.interpreter import Which, discover_interpreter
from mlinstall.core.services.manifests import select_manifest, write_requirements
from mlinstall.core.services.platform_detect import detect_platform
from mlinstall.core.services.rootdir import default_root, select_root_directory
from mlinstall.core.services.templates import materialize_templates

logger = logging.getLogger(__name__)

STEP_CREATE_VENV = "create-venv"
STEP_WRITE_REQUIREMENTS = "write-requirements"
STEP_UPGRADE_PIP = "upgrade-pip"
STEP_INSTALL_REQUIREMENTS = "install-requirements"
STEP_INSTALL_APPLICATION = "install-application"
STEP_MATERIALIZE = "materialize-templates"
STEP_CONFIGURE = "configure"

STEP_MESSAGES = {
    STEP_CREATE_VENV: "Could not create the virtual environment.",
    STEP_WRITE_REQUIREMENTS: "Could not prepare the dependency list.",
    STEP_UPGRADE_PIP: "Could not upgrade pip inside the virtual environment.",
    STEP_INSTALL_REQUIREMENTS: "Could not install the dependencies.",
    STEP_INSTALL_APPLICATION: "Could not install {app} {version}.",
    STEP_MATERIALIZE: "Could not copy the launcher scripts into the root directory.",
    STEP_CONFIGURE: "The {app} configuration step did not complete.",
}


@dataclass
class InstallReport:
    """Receipts of the delegated steps, in execution order."""

    root: str = ""
    manifest: str = ""
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def status(self) -> str:
        return "failed" if self.failed else "ok"

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "manifest": self.manifest,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": self.failed,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class Installer:
    """Sequences the install against injected capabilities.

    Args:
        settings: Validated installer settings.
        runner: Executes every delegated command.
        prompter: Answers the root-directory questions.
        probe: Reports raw OS / arch / kernel-module facts.
        which: PATH lookup used for interpreter discovery.
        home: Home directory for the default root (tests override it).
        progress: Receives one-line progress messages for the user.
        on_root: Called with the chosen root directory before anything
            is written into it (the CLI starts ``install.log`` here).
    """

    def __init__(
        self,
        settings: InstallerSettings,
        runner: Runner,
        prompter: Prompter,
        probe: PlatformProbe,
        *,
        which: Which = shutil.which,
        home: Path | None = None,
        progress: Callable[[str], None] | None = None,
        on_root: Callable[[Path], object] | None = None,
    ):
        self.settings = settings
        self.runner = runner
        self.prompter = prompter
        self.probe = probe
        self.which = which
        self.home = home
        self.progress = progress or logger.info
        self.on_root = on_root
        self.report = InstallReport()

    # ── Steps ───────────────────────────────────────────────────

    def preflight(self) -> InstallState:
        """Detect the platform and a base interpreter; touches nothing on disk."""
        platform = detect_platform(self.probe)
        if not self.runner.is_available():
            raise MissingPrerequisiteError(
                f"The {self.runner.name} runner cannot start programs on this host.",
                guidance="A POSIX shell environment is required to run pip and the launcher scripts.",
            )
        interpreter = discover_interpreter(
            self.settings.python_candidates,
            self.settings.minimum_python,
            self.runner,
            which=self.which,
        )
        self.progress(f"Platform: {platform.label}")
        self.progress(f"Python: {interpreter.path} ({interpreter.version})")
        return InstallState(settings=self.settings, platform=platform, interpreter=interpreter)

    def choose_root(self, state: InstallState) -> InstallState:
        root = select_root_directory(
            self.prompter,
            default_root(state.settings.default_root_name, self.home),
            app_name=state.settings.app_name,
        )
        if self.on_root is not None:
            self.on_root(root)
        self.report.root = str(root)
        return state.model_copy(update={"root": root})

    def create_environment(self, state: InstallState) -> InstallState:
        """Create ``<root>/.venv`` and switch to its interpreter."""
        if state.venv_python.exists():
            self.progress(f"Reusing virtual environment in {state.venv_dir}")
            self._record(
                Receipt.skip(
                    runner=self.runner.name,
                    action_id=STEP_CREATE_VENV,
                    reason=f"{state.venv_dir} already exists",
                )
            )
        else:
            self.progress(f"Creating virtual environment in {state.venv_dir}")
            self._delegate(
                state,
                Action(
                    id=STEP_CREATE_VENV,
                    name="Create virtual environment",
                    argv=[state.interpreter.path, "-m", "venv", str(state.venv_dir)],
                ),
                activate=False,
            )

        venv_interpreter = Interpreter(
            path=str(state.venv_python),
            version=state.interpreter.version,
            encoded=state.interpreter.encoded,
        )
        return state.model_copy(update={"interpreter": venv_interpreter})

    def select_dependencies(self, state: InstallState) -> InstallState:
        """Pick the platform manifest and write ``<root>/requirements.txt``."""
        manifest = select_manifest(state.platform)
        assert state.root is not None
        try:
            write_requirements(state.root, Path(state.settings.source_dir), manifest)
        except (OSError, ValueError) as e:
            raise self._step_failed(state, STEP_WRITE_REQUIREMENTS, str(e)) from e
        self.progress(f"Dependency manifest: {manifest}")
        self.report.manifest = manifest
        return state.model_copy(update={"manifest": manifest})

    def install_dependencies(self, state: InstallState) -> None:
        assert state.root is not None
        python = state.interpreter.path

        self.progress("Upgrading pip")
        self._delegate(
            state,
            Action(
                id=STEP_UPGRADE_PIP,
                name="Upgrade pip",
                argv=[python, "-m", "pip", "install", "--upgrade", "pip"],
            ),
        )

        self.progress("Installing dependencies (this can take a while)")
        self._delegate(
            state,
            Action(
                id=STEP_INSTALL_REQUIREMENTS,
                name="Install dependencies",
                argv=[python, "-m", "pip", "install", "--prefer-binary", "-r", str(state.root / "requirements.txt")],
                cwd=str(state.root),
            ),
        )

        settings = state.settings
        self.progress(f"Installing {settings.app_name} {settings.app_version}")
        self._delegate(
            state,
            Action(
                id=STEP_INSTALL_APPLICATION,
                name=f"Install {settings.app_name}",
                argv=[python, "-m", "pip", "install", "--prefer-binary", settings.resolved_archive_url],
            ),
        )

    def materialize(self, state: InstallState) -> list[Path]:
        assert state.root is not None
        self.progress(f"Copying launcher scripts into {state.root}")
        try:
            return materialize_templates(
                Path(state.settings.source_dir),
                state.root,
                values=launcher_values(state.settings),
            )
        except OSError as e:
            raise self._step_failed(state, STEP_MATERIALIZE, str(e)) from e

    def configure(self, state: InstallState) -> None:
        assert state.root is not None
        settings = state.settings
        python = state.interpreter.path
        if settings.configure_module:
            entry = [python, "-m", settings.configure_module]
        else:
            entry = [python, str(state.venv_bin / str(settings.configure_script))]

        self.progress(f"Running the {settings.app_name} configuration script")
        self._delegate(
            state,
            Action(
                id=STEP_CONFIGURE,
                name="Configure application",
                argv=entry + ["--root", str(state.root)],
                cwd=str(state.root),
            ),
        )

    # ── Flow ────────────────────────────────────────────────────

    def run(self) -> InstallReport:
        """Run every step in order; raises InstallerError on the first failure."""
        state = self.preflight()
        state = self.choose_root(state)
        state = self.create_environment(state)
        state = self.select_dependencies(state)
        self.install_dependencies(state)
        self.materialize(state)
        self.configure(state)
        logger.info("Install finished in %s", state.root)
        return self.report

    # ── Delegation ──────────────────────────────────────────────

    def _delegate(self, state: InstallState, action: Action, *, activate: bool = True) -> Receipt:
        """Run one delegated action; raise StepFailedError unless it succeeded."""
        update: dict = {"timeout": action.timeout or state.settings.pip_timeout}
        if activate:
            update["env"] = {**state.activation_env, **action.env}
        action = action.model_copy(update=update)

        logger.info("CMD %s", action.command_line)
        valid, reason = self.runner.validate(action)
        if valid:
            receipt = self.runner.execute(action)
        else:
            receipt = Receipt.failure(runner=self.runner.name, action_id=action.id, error=reason)
        self._record(receipt)

        if not receipt.ok:
            raise self._step_failed(state, action.id, receipt.error, receipt=receipt)
        return receipt

    def _step_failed(
        self,
        state: InstallState,
        step: str,
        detail: str | None,
        receipt: Receipt | None = None,
    ) -> StepFailedError:
        settings = state.settings
        message = STEP_MESSAGES.get(step, "Step {step} failed.").format(
            app=settings.app_name,
            version=settings.app_version,
            step=step,
        )
        if detail:
            message = f"{message}\n{detail}"
        logger.info("%s failed: %s", step, detail or "no detail")
        return StepFailedError(
            step,
            message,
            receipt=receipt,
            troubleshooting_url=settings.troubleshooting_url(state.platform.os_family),
        )

    def _record(self, receipt: Receipt) -> None:
        self.report.receipts.append(receipt)
        marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", marker, receipt.action_id, receipt.status)


def launcher_values(settings: InstallerSettings) -> dict[str, str]:
    """Placeholder values for the generated invoke.sh / update.sh."""
    if settings.configure_module:
        configure = f"python -m {settings.configure_module}"
    else:
        configure = str(settings.configure_script)
    return {
        "APP_NAME": settings.app_name,
        "APP_VERSION": settings.app_version,
        # update.sh takes the version as $1
        "ARCHIVE_URL": settings.archive_url.replace("{version}", "${version}"),
        "CONFIGURE_COMMAND": configure,
    }
