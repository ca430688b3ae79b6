"""Interactive terminal input.

Kept behind an interface so credential prompts can be scripted in tests.
"""

from abc import ABC, abstractmethod

import click


class Terminal(ABC):
    """Abstract interface for reading answers from the user."""

    @abstractmethod
    def prompt(self, text: str) -> str:
        """Ask for a visible, non-empty answer."""

    @abstractmethod
    def prompt_secret(self, text: str) -> str:
        """Ask for a hidden, non-empty answer."""


class RealTerminal(Terminal):
    """Prompts on the controlling terminal via click.

    click re-prompts on empty input and raises click.Abort on Ctrl-C/EOF.
    """

    def prompt(self, text: str) -> str:
        return click.prompt(text, type=str, err=True)

    def prompt_secret(self, text: str) -> str:
        return click.prompt(text, type=str, hide_input=True, err=True)


class FakeTerminal(Terminal):
    """Returns scripted answers in order.

    Raises click.Abort once the answers run out, like a user pressing Ctrl-C.
    """

    def __init__(self, answers: list[str] | None = None) -> None:
        self._answers = list(answers or [])
        self._prompts: list[str] = []

    @property
    def prompts(self) -> list[str]:
        return self._prompts.copy()

    def _next(self, text: str) -> str:
        self._prompts.append(text)
        if not self._answers:
            raise click.Abort()
        return self._answers.pop(0)

    def prompt(self, text: str) -> str:
        return self._next(text)

    def prompt_secret(self, text: str) -> str:
        return self._next(text)
