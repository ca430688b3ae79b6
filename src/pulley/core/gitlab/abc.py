"""Abstract interface for GitLab operations.

Architecture:
- GitLab: Abstract base class defining the interface
- RealGitLab: Production implementation over the v2 REST API
- FakeGitLab: In-memory implementation for tests
"""

from abc import ABC, abstractmethod

from pulley.core.gitlab.types import CommitInfo, MergeRequest


class GitLab(ABC):
    """Abstract interface for the merge request endpoints pulley uses.

    Implementations raise the GitLabError subclasses from pulley.core.gitlab.types.
    None of the methods retry on their own; re-authentication is the caller's job.
    """

    @abstractmethod
    def get_merge_request(self, project: str, mr_id: str, *, token: str) -> MergeRequest:
        """Fetch merge request metadata.

        Raises:
            GitLabAuthenticationError: token rejected (401)
            GitLabNotFoundError: merge request does not exist (404)
            GitLabApiError: transport failure or unexpected status
            GitLabResponseError: body is not a valid merge request
        """
        ...

    @abstractmethod
    def get_merge_request_commits(
        self, project: str, mr_id: str, *, token: str
    ) -> list[CommitInfo]:
        """Fetch the commits of a merge request in service order."""
        ...

    @abstractmethod
    def create_session(self, email: str, password: str) -> str:
        """Exchange credentials for a private token.

        Raises:
            LoginRejectedError: the service returned a message instead of a token
            GitLabApiError: transport failure
        """
        ...
