"""
InstallState — the value threaded through the install steps.

Each step receives the current state and returns a new one via
``model_copy(update=...)``. Nothing about the install lives in module
globals: the interpreter switch from the base Python to the virtual
environment's Python is just a new state value.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from mlinstall.core.models.platform import Interpreter, PlatformDescriptor
from mlinstall.core.models.settings import InstallerSettings


class InstallState(BaseModel):
    """Set-once install facts, read by downstream steps."""

    model_config = ConfigDict(frozen=True)

    settings: InstallerSettings
    platform: PlatformDescriptor
    interpreter: Interpreter
    root: Path | None = None
    manifest: str | None = None  # manifest filename picked for this platform

    @property
    def venv_dir(self) -> Path:
        assert self.root is not None, "root directory not selected yet"
        return self.root / ".venv"

    @property
    def venv_bin(self) -> Path:
        return self.venv_dir / "bin"

    @property
    def venv_python(self) -> Path:
        return self.venv_bin / "python"

    @property
    def activation_env(self) -> dict[str, str]:
        """Environment overrides equivalent to sourcing bin/activate."""
        if self.root is None:
            return {}
        return {
            "VIRTUAL_ENV": str(self.venv_dir),
            "PATH": os.pathsep.join([str(self.venv_bin), os.environ.get("PATH", os.defpath)]),
        }
