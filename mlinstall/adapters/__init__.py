"""Adapters — bindings to the host: processes, terminal, platform.

Public re-exports for convenient access.
"""

from mlinstall.adapters.base import Runner
from mlinstall.adapters.mock import MockRunner
from mlinstall.adapters.platform_probe import HostPlatformProbe, PlatformProbe, StaticPlatformProbe
from mlinstall.adapters.prompt import ClickPrompter, Prompter, ScriptedPrompter
from mlinstall.adapters.shell.command import SubprocessRunner

__all__ = [
    "ClickPrompter",
    "HostPlatformProbe",
    "MockRunner",
    "PlatformProbe",
    "Prompter",
    "Runner",
    "ScriptedPrompter",
    "StaticPlatformProbe",
    "SubprocessRunner",
]
