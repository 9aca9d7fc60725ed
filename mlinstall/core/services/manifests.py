"""
Dependency manifests — choose one per platform and make it installable.

Three manifests ship in ``environments-and-requirements/``. The chosen
one is read (with its ``-r`` includes inlined), stripped of editable
and path-relative entries that only make sense inside a development
checkout, and written to ``<root>/requirements.txt`` for pip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mlinstall.core.data import MANIFESTS_DIR
from mlinstall.core.models.platform import PlatformDescriptor

logger = logging.getLogger(__name__)

MAC_MANIFEST = "requirements-mac-mps-cpu.txt"
AMD_MANIFEST = "requirements-lin-amd.txt"
CUDA_MANIFEST = "requirements-lin-cuda.txt"

REQUIREMENTS_FILE = "requirements.txt"

_EDITABLE_PREFIXES = ("-e", "--editable")
_PATH_PREFIXES = (".", "/", "~", "file:")
_INCLUDE_PREFIXES = ("-r ", "--requirement ", "--requirement=")


def select_manifest(descriptor: PlatformDescriptor) -> str:
    """Pick the manifest filename for a platform.

    osx -> mac manifest; linux + amd -> AMD manifest; linux otherwise -> CUDA/CPU.
    """
    if descriptor.os_family == "osx":
        return MAC_MANIFEST
    if descriptor.gpu == "amd":
        return AMD_MANIFEST
    return CUDA_MANIFEST


def is_local_entry(line: str) -> bool:
    """Editable or path-relative requirement lines."""
    return line.startswith(_EDITABLE_PREFIXES) or line.startswith(_PATH_PREFIXES)


def filter_manifest(lines: list[str]) -> list[str]:
    """Drop blanks, comments and local entries; keep order otherwise."""
    kept: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if is_local_entry(line):
            logger.debug("Dropping local manifest entry: %s", line)
            continue
        kept.append(line)
    return kept


def _include_target(line: str) -> str | None:
    for prefix in _INCLUDE_PREFIXES:
        if line.startswith(prefix):
            return line[len(prefix):].strip()
    return None


def read_manifest(path: Path, _seen: set[Path] | None = None) -> list[str]:
    """Read a manifest, inlining ``-r`` includes.

    Included paths are tried relative to the including file's directory
    and then to its parent, since manifests refer to each other as
    ``environments-and-requirements/<name>``.
    """
    seen = _seen if _seen is not None else set()
    resolved = path.resolve()
    if resolved in seen:
        raise ValueError(f"Manifest include cycle at {path}")
    seen.add(resolved)

    lines: list[str] = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        target = _include_target(raw.strip())
        if target is None:
            lines.append(raw)
            continue

        candidates = [path.parent / target, path.parent.parent / target]
        include = next((c for c in candidates if c.is_file()), None)
        if include is None:
            raise FileNotFoundError(f"{path}: included manifest not found: {target}")
        lines.extend(read_manifest(include, seen))
    return lines


def manifest_path(source_dir: Path, manifest: str) -> Path:
    return source_dir / MANIFESTS_DIR / manifest


def write_requirements(root: Path, source_dir: Path, manifest: str) -> Path:
    """Write the filtered manifest to ``<root>/requirements.txt``."""
    entries = filter_manifest(read_manifest(manifest_path(source_dir, manifest)))
    target = root / REQUIREMENTS_FILE
    target.write_text("\n".join(entries) + "\n", encoding="utf-8")
    logger.info("Wrote %d requirement entries from %s to %s", len(entries), manifest, target)
    return target
