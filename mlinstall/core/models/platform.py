"""
Platform models — what the host looks like and which interpreter we use.

Both are computed once during preflight and never mutated.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

OsFamily = Literal["linux", "osx"]
Arch = Literal["x86_64", "arm64"]
GpuVendor = Literal["amd", "other"]


class PlatformDescriptor(BaseModel):
    """Canonical description of the host.

    Determines which dependency manifest gets installed.
    """

    model_config = ConfigDict(frozen=True)

    os_family: OsFamily
    arch: Arch
    gpu: GpuVendor = "other"

    @property
    def label(self) -> str:
        return f"{self.os_family}-{self.arch} (gpu: {self.gpu})"


class Interpreter(BaseModel):
    """A Python interpreter that passed the minimum-version gate."""

    model_config = ConfigDict(frozen=True)

    path: str
    version: str
    encoded: int = 0
