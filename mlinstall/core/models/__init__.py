"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from mlinstall.core.models import Action, Receipt, InstallState
"""

from mlinstall.core.models.action import Action, Receipt
from mlinstall.core.models.platform import Interpreter, PlatformDescriptor
from mlinstall.core.models.settings import InstallerSettings
from mlinstall.core.models.state import InstallState

__all__ = [
    "Action",
    "InstallState",
    "InstallerSettings",
    "Interpreter",
    "PlatformDescriptor",
    "Receipt",
]
