"""
Subprocess runner — execute delegated commands on the host.

This is the SINGLE PLACE where ``subprocess.run`` is called for install
steps. Long-running steps (pip) stream straight to the terminal so the
user sees progress; short probes capture their output for parsing.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from mlinstall.adapters.base import Runner
from mlinstall.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)

# Output kept on a receipt, from the end of the stream
_TAIL_CHARS = 2000


def _build_env(overrides: dict[str, str]) -> dict[str, str]:
    # values are taken literally; a root path may contain "$"
    env = os.environ.copy()
    env.update(overrides)
    return env


class SubprocessRunner(Runner):
    """Run actions as child processes and report exit status."""

    @property
    def name(self) -> str:
        return "subprocess"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def execute(self, action: Action) -> Receipt:
        valid, reason = self.validate(action)
        if not valid:
            return Receipt.failure(runner=self.name, action_id=action.id, error=reason)

        logger.debug("Executing: %s (cwd=%s)", action.command_line, action.cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                action.argv,
                cwd=action.cwd,
                env=_build_env(action.env),
                capture_output=action.capture,
                text=True,
                timeout=action.timeout,
            )
        except FileNotFoundError:
            return Receipt.failure(
                runner=self.name,
                action_id=action.id,
                error=f"Program not found: {action.argv[0]}",
                metadata={"command": action.command_line},
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                runner=self.name,
                action_id=action.id,
                error=f"Command timed out after {action.timeout}s",
                metadata={"command": action.command_line, "timeout": action.timeout},
            )
        except OSError as e:
            return Receipt.failure(
                runner=self.name,
                action_id=action.id,
                error=f"Command execution error: {e}",
                metadata={"command": action.command_line},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "")[-_TAIL_CHARS:].strip()
        stderr = (result.stderr or "")[-_TAIL_CHARS:].strip()

        if result.returncode == 0:
            return Receipt.success(
                runner=self.name,
                action_id=action.id,
                output=stdout,
                duration_ms=elapsed_ms,
                return_code=0,
                metadata={"command": action.command_line, "stderr": stderr},
            )

        return Receipt.failure(
            runner=self.name,
            action_id=action.id,
            error=stderr or f"Command exited with code {result.returncode}",
            output=stdout,
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            metadata={"command": action.command_line},
        )
