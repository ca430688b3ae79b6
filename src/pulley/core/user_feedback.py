"""User-facing diagnostic output."""

from abc import ABC, abstractmethod

import click

from pulley.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress and diagnostic output.

    Usage:
        ctx.feedback.info("Getting merge request details...")
        merge_request = fetch()
        ctx.feedback.success("✓ Retrieved merge request !42")

        if not valid:
            ctx.feedback.error("Error: Merge Request doesn't exist")
            raise SystemExit(1)
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Colored feedback written to stderr."""

    def info(self, message: str) -> None:
        user_output(click.style(message, fg="blue"))

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class FakeUserFeedback(UserFeedback):
    """Records messages in memory for test assertions."""

    def __init__(self) -> None:
        self._messages: list[tuple[str, str]] = []

    @property
    def messages(self) -> list[tuple[str, str]]:
        """List of (level, message) tuples in emission order."""
        return self._messages.copy()

    def text(self) -> str:
        """All messages joined with newlines."""
        return "\n".join(message for _, message in self._messages)

    def info(self, message: str) -> None:
        self._messages.append(("info", message))

    def success(self, message: str) -> None:
        self._messages.append(("success", message))

    def error(self, message: str) -> None:
        self._messages.append(("error", message))
