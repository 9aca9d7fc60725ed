"""
Runner base — the contract between the orchestrator and external programs.

The orchestrator never calls subprocess itself. Every delegated step
(venv creation, pip, the application's configure tool) goes through a
Runner, which makes the whole install flow testable with a mock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mlinstall.core.models.action import Action, Receipt


class Runner(ABC):
    """Abstract base class for command runners.

    Runners perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this runner can execute anything on this host.

        Should be fast and never raise.
        """

    def validate(self, action: Action) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """
        if not action.argv:
            return False, "Missing command: argv is empty"
        return True, ""

    @abstractmethod
    def execute(self, action: Action) -> Receipt:
        """Execute the action and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
