"""
Interpreter discovery — find a base Python that is new enough.

Candidates are tried in order; the first one that is on PATH and
reports a version at or above the minimum wins.
"""

from __future__ import annotations

import logging
import shutil
from typing import Callable

from mlinstall.adapters.base import Runner
from mlinstall.core.errors import MissingPrerequisiteError
from mlinstall.core.models.action import Action
from mlinstall.core.models.platform import Interpreter
from mlinstall.core.services.version import encode_version, meets_minimum, parse_version_output

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]


def probe_version(runner: Runner, executable: str) -> str | None:
    """Ask an interpreter for its version; None when it can't say."""
    receipt = runner.execute(
        Action(
            id="probe-python",
            name=f"{executable} --version",
            argv=[executable, "--version"],
            capture=True,
            timeout=30,
        )
    )
    if not receipt.ok:
        logger.debug("%s --version failed: %s", executable, receipt.error)
        return None
    # Python 2 printed its version on stderr
    text = receipt.output or receipt.metadata.get("stderr", "")
    return parse_version_output(text)


def discover_interpreter(
    candidates: list[str],
    minimum: str,
    runner: Runner,
    which: Which = shutil.which,
) -> Interpreter:
    """Return the first candidate meeting ``minimum``.

    Raises:
        MissingPrerequisiteError: if no candidate qualifies.
    """
    rejected: list[str] = []

    for name in candidates:
        path = which(name)
        if not path:
            logger.debug("Interpreter candidate %s not on PATH", name)
            continue

        version = probe_version(runner, path)
        if version is None:
            rejected.append(f"{name} (version unknown)")
            continue

        try:
            encoded = encode_version(version)
        except ValueError:
            rejected.append(f"{name} ({version}, unparseable)")
            continue

        if meets_minimum(version, minimum):
            logger.info("Using %s (Python %s)", path, version)
            return Interpreter(path=path, version=version, encoded=encoded)

        logger.info("Skipping %s: Python %s < %s", path, version, minimum)
        rejected.append(f"{name} ({version})")

    found = ", ".join(rejected) if rejected else "none found on PATH"
    raise MissingPrerequisiteError(
        f"A suitable Python interpreter could not be found. Python {minimum} or higher is required.",
        guidance=(
            f"Interpreters checked: {found}.\n"
            f"Install Python {minimum} or newer from https://www.python.org/downloads/ "
            "or your system package manager, make sure it is on PATH, "
            "then run the installer again."
        ),
    )
