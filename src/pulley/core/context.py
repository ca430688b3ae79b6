"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from pulley.cli.config import PulleyConfig
from pulley.core.auth import Auth, RealAuth
from pulley.core.git.abc import Git
from pulley.core.git.real import RealGit
from pulley.core.gitlab.abc import GitLab
from pulley.core.gitlab.real import RealGitLab
from pulley.core.terminal import RealTerminal
from pulley.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class PulleyContext:
    """Immutable context holding all dependencies for a landing.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    gitlab: GitLab
    auth: Auth
    feedback: UserFeedback
    config: PulleyConfig
    cwd: Path  # Current working directory at CLI invocation

    @staticmethod
    def for_test(
        git: Git | None = None,
        gitlab: GitLab | None = None,
        auth: Auth | None = None,
        feedback: UserFeedback | None = None,
        config: PulleyConfig | None = None,
        cwd: Path | None = None,
    ) -> "PulleyContext":
        """Create test context with optional pre-configured integration classes.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            gitlab: Optional GitLab implementation. If None, creates empty FakeGitLab.
            auth: Optional Auth. If None, creates FakeAuth with cached token "test-token".
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            config: Optional PulleyConfig. If None, points at https://gitlab.test.
            cwd: Optional current working directory. If None, uses Path("/test/default/cwd").

        Returns:
            PulleyContext configured with provided values and test defaults

        Example:
            >>> git = FakeGit(status=WorkingTreeStatus(staged=True, unstaged=False))
            >>> ctx = PulleyContext.for_test(git=git)
        """
        from pulley.core.auth import FakeAuth
        from pulley.core.git.fake import FakeGit
        from pulley.core.gitlab.fake import FakeGitLab
        from pulley.core.user_feedback import FakeUserFeedback

        return PulleyContext(
            git=git if git is not None else FakeGit(),
            gitlab=gitlab if gitlab is not None else FakeGitLab(),
            auth=auth if auth is not None else FakeAuth(cached_token="test-token"),
            feedback=feedback if feedback is not None else FakeUserFeedback(),
            config=config if config is not None else PulleyConfig(server="https://gitlab.test"),
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
        )


def create_context(config: PulleyConfig, *, cwd: Path | None = None) -> PulleyContext:
    """Create production context with real implementations.

    Called at CLI entry point once the config file has been loaded.

    Args:
        config: Loaded configuration
        cwd: Working directory, defaults to Path.cwd()

    Returns:
        PulleyContext with real implementations
    """
    resolved_cwd = cwd if cwd is not None else Path.cwd()
    git: Git = RealGit()
    gitlab: GitLab = RealGitLab(config.server.strip(), timeout=config.timeout)
    feedback: UserFeedback = InteractiveFeedback()
    auth: Auth = RealAuth(
        git=git,
        gitlab=gitlab,
        terminal=RealTerminal(),
        feedback=feedback,
        cwd=resolved_cwd,
    )
    return PulleyContext(
        git=git,
        gitlab=gitlab,
        auth=auth,
        feedback=feedback,
        config=config,
        cwd=resolved_cwd,
    )
