"""
Root directory selection — the installer's one interactive loop.

The user picks a directory; an existing one can be resumed (reused as
is) and a fresh one is created. A directory that cannot be created
sends the user back to the path prompt.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mlinstall.adapters.prompt import Prompter

logger = logging.getLogger(__name__)


def default_root(dirname: str, home: Path | None = None) -> Path:
    """``~/<dirname>``."""
    return (home or Path.home()) / dirname


def select_root_directory(prompter: Prompter, default: Path, app_name: str = "the application") -> Path:
    """Prompt until the user settles on a usable root directory.

    Existing directories are never deleted or re-created; choosing
    "resume" leaves their contents exactly as they were.
    """
    selected: Path | None = None

    while selected is None:
        answer = prompter.ask("Select an installation root directory", str(default)).strip()
        if not answer:
            continue
        path = Path(answer).expanduser()

        if path.exists():
            if not prompter.confirm(
                f"Directory {path} already exists. Resume the installation there "
                "(existing files will be reused)?",
                default=True,
            ):
                continue

        if not prompter.confirm(f"{app_name} will be installed in {path}. Continue?", default=True):
            continue

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create %s: %s", path, e)
            continue

        selected = path.resolve()

    logger.info("Installation root: %s", selected)
    return selected
