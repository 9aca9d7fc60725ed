"""
Template materialization — lay out launcher scripts and support files.

Launcher templates may carry ``@NAME@`` placeholders, filled from the
installer settings so the generated scripts point at the configured
application. No recovery here: filesystem errors propagate to the
caller.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from mlinstall.core.data import MANIFESTS_DIR, ROOTDIR_TEMPLATES, TEMPLATES_DIR

logger = logging.getLogger(__name__)

# template -> file in the root directory; both are made executable
LAUNCHERS = {
    "invoke.sh.in": "invoke.sh",
    "update.sh.in": "update.sh",
}

EXECUTABLE_MODE = 0o755


def render_template(text: str, values: dict[str, str]) -> str:
    """Replace each ``@KEY@`` with its value; unknown placeholders stay."""
    for key, value in values.items():
        text = text.replace(f"@{key}@", value)
    return text


def materialize_templates(
    source_dir: Path,
    root: Path,
    values: dict[str, str] | None = None,
) -> list[Path]:
    """Copy launchers, manifests and the rootdir tree into ``root``.

    Launchers are rendered with ``values`` when given, copied byte for
    byte otherwise. Returns the top-level paths written, in copy order.
    """
    written: list[Path] = []

    for template, target_name in LAUNCHERS.items():
        source = source_dir / TEMPLATES_DIR / template
        target = root / target_name
        if values:
            target.write_text(render_template(source.read_text(encoding="utf-8"), values), encoding="utf-8")
        else:
            shutil.copyfile(source, target)
        target.chmod(EXECUTABLE_MODE)
        written.append(target)

    manifests = root / MANIFESTS_DIR
    shutil.copytree(source_dir / MANIFESTS_DIR, manifests, dirs_exist_ok=True)
    written.append(manifests)

    rootdir = source_dir / ROOTDIR_TEMPLATES
    if rootdir.is_dir():
        for entry in sorted(rootdir.iterdir()):
            target = root / entry.name
            if entry.is_dir():
                shutil.copytree(entry, target, dirs_exist_ok=True)
            else:
                shutil.copy2(entry, target)
            written.append(target)

    logger.info("Materialized %d template entries into %s", len(written), root)
    return written
