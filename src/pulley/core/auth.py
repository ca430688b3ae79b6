"""Access token management.

The token is cached in the repository's local git config so only the first
run (or a run after the token is revoked) asks for credentials.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import click

from pulley.core.git.abc import Git
from pulley.core.gitlab.abc import GitLab
from pulley.core.gitlab.types import LoginRejectedError
from pulley.core.terminal import Terminal
from pulley.core.user_feedback import UserFeedback

logger = logging.getLogger(__name__)

TOKEN_CONFIG_KEY = "pulley-gitlab.token"


class Auth(ABC):
    """Supplies the GitLab access token."""

    @abstractmethod
    def get_cached_token(self) -> str | None:
        """Return the cached token, None if the user never logged in."""

    @abstractmethod
    def login(self) -> str:
        """Obtain a fresh token interactively and cache it.

        Raises:
            click.Abort: the user gave up
            GitLabApiError: the session endpoint could not be reached
        """


class RealAuth(Auth):
    """Token cache in git config plus an email/password exchange."""

    def __init__(
        self,
        *,
        git: Git,
        gitlab: GitLab,
        terminal: Terminal,
        feedback: UserFeedback,
        cwd: Path,
    ) -> None:
        self._git = git
        self._gitlab = gitlab
        self._terminal = terminal
        self._feedback = feedback
        self._cwd = cwd

    def get_cached_token(self) -> str | None:
        token = self._git.get_config_value(self._cwd, TOKEN_CONFIG_KEY)
        logger.debug("Cached token %s", "found" if token else "missing")
        return token

    def login(self) -> str:
        self._feedback.info("Please login with your GitLab credentials.")
        self._feedback.info(
            "Your credentials are only needed this one time to get a token from GitLab."
        )
        while True:
            email = self._terminal.prompt("Email")
            password = self._terminal.prompt_secret("Password")
            try:
                token = self._gitlab.create_session(email, password)
            except LoginRejectedError as e:
                self._feedback.error(f"{e.message}. Try again.")
                continue

            self._git.set_config_value(self._cwd, TOKEN_CONFIG_KEY, token)
            self._feedback.success("Success!")
            return token


class FakeAuth(Auth):
    """Auth with a preset cached token and a queue of tokens handed out by login()."""

    def __init__(self, *, cached_token: str | None = None, login_tokens: list[str] | None = None):
        self._cached_token = cached_token
        self._login_tokens = list(login_tokens or [])
        self._login_calls = 0

    @property
    def login_calls(self) -> int:
        return self._login_calls

    def get_cached_token(self) -> str | None:
        return self._cached_token

    def login(self) -> str:
        self._login_calls += 1
        if not self._login_tokens:
            raise click.Abort()
        token = self._login_tokens.pop(0)
        self._cached_token = token
        return token
