"""
Prompters — how the installer talks to the person at the keyboard.

``ClickPrompter`` is the real terminal; ``ScriptedPrompter`` replays a
fixed list of answers so the root-directory loop can be tested without
a TTY.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable

import click


class Prompter(ABC):
    """Interactive question/answer capability."""

    @abstractmethod
    def ask(self, question: str, default: str = "") -> str:
        """Ask a free-form question; an empty reply yields ``default``."""

    def confirm(self, question: str, default: bool = True) -> bool:
        """Ask a yes/no question."""
        hint = "Y/n" if default else "y/N"
        reply = self.ask(f"{question} [{hint}]", "").strip().lower()
        if not reply:
            return default
        return reply in ("y", "yes")

    def pause(self, message: str = "Press any key to continue...") -> None:
        """Hold until the user acknowledges."""
        self.ask(message, "")


class ClickPrompter(Prompter):
    """Prompter backed by click's terminal helpers."""

    def ask(self, question: str, default: str = "") -> str:
        if default:
            return click.prompt(question, default=default, show_default=True)
        return click.prompt(question, default="", show_default=False)

    def confirm(self, question: str, default: bool = True) -> bool:
        return click.confirm(question, default=default)

    def pause(self, message: str = "Press any key to continue...") -> None:
        click.pause(info=message)


class ScriptedPrompter(Prompter):
    """Replays canned answers; ``None`` means "accept the default".

    Every question asked is recorded in ``questions``. Running out of
    answers raises ``click.Abort``, the same thing Ctrl-C does at a
    real prompt.
    """

    def __init__(self, answers: Iterable[str | None] = ()):
        self._answers: deque[str | None] = deque(answers)
        self.questions: list[str] = []
        self.pauses: list[str] = []

    def ask(self, question: str, default: str = "") -> str:
        self.questions.append(question)
        if not self._answers:
            raise click.Abort()
        answer = self._answers.popleft()
        return default if answer is None else answer

    def pause(self, message: str = "Press any key to continue...") -> None:
        self.pauses.append(message)

    @property
    def remaining(self) -> int:
        return len(self._answers)
