"""Fake GitLab operations for testing.

FakeGitLab is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pulley.core.gitlab.abc import GitLab
from pulley.core.gitlab.types import (
    CommitInfo,
    GitLabAuthenticationError,
    GitLabError,
    GitLabNotFoundError,
    LoginRejectedError,
    MergeRequest,
)


class FakeGitLab(GitLab):
    """In-memory fake implementation of GitLab operations.

    Tokens listed in `rejected_tokens` get a GitLabAuthenticationError from every
    read call, which simulates an expired or revoked token.
    """

    def __init__(
        self,
        *,
        merge_requests: dict[str, MergeRequest] | None = None,
        commits: dict[str, list[CommitInfo]] | None = None,
        rejected_tokens: set[str] | None = None,
        errors: dict[str, GitLabError] | None = None,
        credentials: dict[tuple[str, str], str] | None = None,
    ) -> None:
        """Create FakeGitLab with pre-configured state.

        Args:
            merge_requests: Mapping of mr_id -> MergeRequest
            commits: Mapping of mr_id -> commit list
            rejected_tokens: Tokens that trigger a 401
            errors: Mapping of mr_id -> error raised by get_merge_request
            credentials: Mapping of (email, password) -> token for create_session
        """
        self._merge_requests = merge_requests or {}
        self._commits = commits or {}
        self._rejected_tokens = rejected_tokens or set()
        self._errors = errors or {}
        self._credentials = credentials or {}
        self._requests: list[tuple[str, str, str]] = []
        self._session_attempts: list[str] = []

    @property
    def requests(self) -> list[tuple[str, str, str]]:
        """List of (endpoint, mr_id, token) tuples for read calls."""
        return self._requests.copy()

    @property
    def session_attempts(self) -> list[str]:
        """Emails passed to create_session()."""
        return self._session_attempts.copy()

    def _check_token(self, token: str) -> None:
        if token in self._rejected_tokens:
            raise GitLabAuthenticationError("401 Unauthorized")

    def get_merge_request(self, project: str, mr_id: str, *, token: str) -> MergeRequest:
        self._requests.append(("merge_request", mr_id, token))
        self._check_token(token)
        if mr_id in self._errors:
            raise self._errors[mr_id]
        if mr_id not in self._merge_requests:
            raise GitLabNotFoundError(f"merge request {mr_id} not found")
        return self._merge_requests[mr_id]

    def get_merge_request_commits(
        self, project: str, mr_id: str, *, token: str
    ) -> list[CommitInfo]:
        self._requests.append(("commits", mr_id, token))
        self._check_token(token)
        return list(self._commits.get(mr_id, []))

    def create_session(self, email: str, password: str) -> str:
        self._session_attempts.append(email)
        token = self._credentials.get((email, password))
        if token is None:
            raise LoginRejectedError("401 Unauthorized")
        return token
