"""
Installer errors — every fatal condition the CLI knows how to report.

Runners never raise; the orchestrator turns failed receipts, and
filesystem errors while writing into the root, into StepFailedError.
Directory-creation failures are the only errors handled locally (by
re-prompting) and never reach this hierarchy.
"""

from __future__ import annotations

from mlinstall.core.models.action import Receipt


class InstallerError(Exception):
    """Base class for fatal installer errors.

    ``guidance`` is extra text shown after the message; ``pause`` tells
    the CLI to hold the terminal open before exiting.
    """

    pause: bool = True

    def __init__(self, message: str, guidance: str = "") -> None:
        super().__init__(message)
        self.guidance = guidance


class UnsupportedPlatformError(InstallerError):
    """The OS or CPU architecture is not one we ship a manifest for."""

    pause = False


class MissingPrerequisiteError(InstallerError):
    """No interpreter on PATH meets the minimum Python version."""


class StepFailedError(InstallerError):
    """An install step failed: a delegated command or a root-directory write."""

    def __init__(
        self,
        step: str,
        message: str,
        receipt: Receipt | None = None,
        troubleshooting_url: str = "",
    ) -> None:
        guidance = ""
        if troubleshooting_url:
            guidance = f"Troubleshooting: {troubleshooting_url}"
        super().__init__(message, guidance=guidance)
        self.step = step
        self.receipt = receipt
        self.troubleshooting_url = troubleshooting_url
