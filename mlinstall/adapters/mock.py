"""
Mock runner — test double for every delegated command.

Records each action it receives and returns success unless told
otherwise. Responses can be keyed by action id (the install step) or
by the executable name, which is how interpreter probes are faked.
"""

from __future__ import annotations

from pathlib import Path

from mlinstall.adapters.base import Runner
from mlinstall.core.models.action import Action, Receipt


class MockRunner(Runner):
    """Universal mock runner for testing.

    By default, returns success for everything. Can be configured
    with custom responses per action ID or per program.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = runner_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._program_outputs: dict[str, Receipt] = {}
        self._call_log: list[Action] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[Action]:
        """All actions this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def called_ids(self) -> list[str]:
        """Action ids in the order they were executed."""
        return [a.id for a in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            runner=self._name,
            action_id=action_id,
            error=error,
            return_code=return_code,
        )

    def set_program_output(self, program: str, output: str, ok: bool = True) -> None:
        """Answer any action whose executable basename is ``program``."""
        if ok:
            receipt = Receipt.success(runner=self._name, action_id=program, output=output, return_code=0)
        else:
            receipt = Receipt.failure(runner=self._name, action_id=program, error=output, return_code=1)
        self._program_outputs[program] = receipt

    def execute(self, action: Action) -> Receipt:
        self._call_log.append(action)

        if action.id in self._responses:
            return self._responses[action.id].model_copy(update={"action_id": action.id})

        program = Path(action.argv[0]).name if action.argv else ""
        if program in self._program_outputs:
            return self._program_outputs[program].model_copy(update={"action_id": action.id})

        return Receipt.success(
            runner=self._name,
            action_id=action.id,
            output=self._default_output,
            return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
        self._program_outputs.clear()
