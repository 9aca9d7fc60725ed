"""
Action and Receipt models — the execution contract.

Actions describe an external command the orchestrator wants run.
Receipts describe what happened. Runners receive Actions and return
Receipts, never exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A delegated command to be executed by a runner.

    The orchestrator only ever looks at the resulting Receipt's status;
    what the command does is the external program's business.
    """

    id: str                         # step identifier, e.g. "install-requirements"
    name: str = ""                  # human-readable name
    argv: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)  # merged over os.environ
    cwd: str | None = None
    capture: bool = False           # capture stdout/stderr instead of streaming
    timeout: int | None = None      # seconds, None = wait forever

    @property
    def command_line(self) -> str:
        """The argv joined for display."""
        return " ".join(self.argv)


class Receipt(BaseModel):
    """Result of a runner execution.

    Runners NEVER raise — failures are captured here.
    """

    runner: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        runner: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            runner=runner,
            action_id=action_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        runner: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            runner=runner,
            action_id=action_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        runner: str,
        action_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            runner=runner,
            action_id=action_id,
            status="skipped",
            output=reason,
            **kwargs,
        )
