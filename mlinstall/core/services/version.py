"""
Version encoding (pure).

Dotted versions are folded into one integer so that comparing two
versions is an integer comparison:

    major * 10**9 + minor * 10**6 + patch * 10**3 + build

Each component must stay below 1000 for the encoding to be ordered.
No I/O, no subprocess.
"""

from __future__ import annotations

import re

_WEIGHTS = (10**9, 10**6, 10**3, 1)

# "Python 3.10.4", "Python 3.12.0rc1", "3.9"
_VERSION_RE = re.compile(r"(\d+(?:\.\d+){0,3})")


def encode_version(version: str) -> int:
    """Encode a dotted version string as an ordered integer.

    Missing components count as 0, so ``"3.9"`` == ``"3.9.0"``.

    Raises:
        ValueError: if a component is not numeric, there are more than
            four components, or a component is 1000 or larger.
    """
    parts = version.strip().lstrip("v").split(".")
    if not parts or len(parts) > len(_WEIGHTS):
        raise ValueError(f"Cannot encode version {version!r}")

    total = 0
    for weight, part in zip(_WEIGHTS, parts):
        if not part.isdigit():
            raise ValueError(f"Non-numeric version component {part!r} in {version!r}")
        value = int(part)
        if value >= 1000:
            raise ValueError(f"Version component {value} out of range in {version!r}")
        total += value * weight
    return total


def parse_version_output(text: str) -> str | None:
    """Pull the dotted version out of ``python --version`` style output."""
    m = _VERSION_RE.search(text or "")
    return m.group(1) if m else None


def meets_minimum(version: str, minimum: str) -> bool:
    """Whether ``version`` >= ``minimum`` under the integer encoding."""
    return encode_version(version) >= encode_version(minimum)
