"""
Platform probes — raw host identifiers for platform detection.

The probe only reports strings; mapping them to canonical labels is
``mlinstall.core.services.platform_detect``'s job. Loaded kernel
modules are host state, so tests substitute ``StaticPlatformProbe``.
"""

from __future__ import annotations

import logging
import platform
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

PROC_MODULES = Path("/proc/modules")


class PlatformProbe(ABC):
    """Read-only view of the host's identity."""

    @abstractmethod
    def os_identifier(self) -> str:
        """Kernel name as ``uname -s`` reports it (e.g. 'Linux', 'Darwin')."""

    @abstractmethod
    def arch_identifier(self) -> str:
        """Machine name as ``uname -m`` reports it (e.g. 'x86_64', 'arm64')."""

    @abstractmethod
    def loaded_kernel_modules(self) -> set[str]:
        """Names of currently loaded kernel modules (empty when unknown)."""


class HostPlatformProbe(PlatformProbe):
    """Probe the machine we are running on."""

    def __init__(self, proc_modules: Path = PROC_MODULES):
        self._proc_modules = proc_modules

    def os_identifier(self) -> str:
        return platform.system()

    def arch_identifier(self) -> str:
        return platform.machine()

    def loaded_kernel_modules(self) -> set[str]:
        try:
            with open(self._proc_modules, encoding="utf-8") as f:
                return {line.split()[0] for line in f if line.strip()}
        except OSError:
            logger.debug("Cannot read %s; assuming no kernel modules", self._proc_modules)
            return set()


class StaticPlatformProbe(PlatformProbe):
    """Fixed answers, for tests and for ``detect`` dry runs."""

    def __init__(self, os_id: str = "Linux", arch_id: str = "x86_64", modules: set[str] | None = None):
        self._os = os_id
        self._arch = arch_id
        self._modules = set(modules or ())
        self.module_queries = 0

    def os_identifier(self) -> str:
        return self._os

    def arch_identifier(self) -> str:
        return self._arch

    def loaded_kernel_modules(self) -> set[str]:
        self.module_queries += 1
        return set(self._modules)
