"""
Bundled installer data — launcher templates and dependency manifests.

Layout::

    templates/invoke.sh.in
    templates/update.sh.in
    templates/rootdir/...                 copied verbatim into the root
    environments-and-requirements/*.txt   one manifest per platform

``MLI_SOURCE_DIR`` or ``source_dir`` in installer.yml point the
installer at a different tree with the same layout.
"""

from __future__ import annotations

from pathlib import Path

DATA_DIR = Path(__file__).parent

TEMPLATES_DIR = "templates"
ROOTDIR_TEMPLATES = "templates/rootdir"
MANIFESTS_DIR = "environments-and-requirements"
