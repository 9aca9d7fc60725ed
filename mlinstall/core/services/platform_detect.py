"""
Platform detection — map raw host identifiers to canonical labels.

Only the platforms we ship manifests for are accepted; anything else
is rejected outright rather than guessed at.
"""

from __future__ import annotations

import logging

from mlinstall.adapters.platform_probe import PlatformProbe
from mlinstall.core.errors import UnsupportedPlatformError
from mlinstall.core.models.platform import Arch, GpuVendor, OsFamily, PlatformDescriptor

logger = logging.getLogger(__name__)

# prefix of the raw identifier -> canonical label, checked in order
_OS_PREFIXES: tuple[tuple[str, OsFamily], ...] = (
    ("Linux", "linux"),
    ("Darwin", "osx"),
)
_ARCH_PREFIXES: tuple[tuple[str, Arch], ...] = (
    ("x86_64", "x86_64"),
    ("arm64", "arm64"),
)

AMD_KERNEL_MODULE = "amdgpu"


def canonical_os(identifier: str) -> OsFamily:
    for prefix, label in _OS_PREFIXES:
        if identifier.startswith(prefix):
            return label
    raise UnsupportedPlatformError(
        f"Unsupported operating system: {identifier or '<unknown>'}",
        guidance="This installer supports Linux and macOS only.",
    )


def canonical_arch(identifier: str) -> Arch:
    for prefix, label in _ARCH_PREFIXES:
        if identifier.startswith(prefix):
            return label
    raise UnsupportedPlatformError(
        f"Unsupported CPU architecture: {identifier or '<unknown>'}",
        guidance="This installer supports x86_64 and arm64 only.",
    )


def detect_gpu(os_family: OsFamily, probe: PlatformProbe) -> GpuVendor:
    """AMD when the amdgpu kernel module is loaded; Linux only."""
    if os_family != "linux":
        return "other"
    return "amd" if AMD_KERNEL_MODULE in probe.loaded_kernel_modules() else "other"


def detect_platform(probe: PlatformProbe) -> PlatformDescriptor:
    """Build the PlatformDescriptor for this host.

    Raises:
        UnsupportedPlatformError: on an unrecognized OS or architecture.
    """
    os_family = canonical_os(probe.os_identifier())
    arch = canonical_arch(probe.arch_identifier())
    gpu = detect_gpu(os_family, probe)

    descriptor = PlatformDescriptor(os_family=os_family, arch=arch, gpu=gpu)
    logger.info("Detected platform %s", descriptor.label)
    return descriptor
