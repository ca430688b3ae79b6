"""GitLab API subpackage."""

from pulley.core.gitlab.abc import GitLab
from pulley.core.gitlab.real import RealGitLab
from pulley.core.gitlab.types import (
    AUTO_MERGEABLE_STATE,
    CommitInfo,
    GitLabApiError,
    GitLabAuthenticationError,
    GitLabError,
    GitLabNotFoundError,
    GitLabResponseError,
    LoginRejectedError,
    MergeRequest,
)

__all__ = [
    "AUTO_MERGEABLE_STATE",
    "CommitInfo",
    "GitLab",
    "GitLabApiError",
    "GitLabAuthenticationError",
    "GitLabError",
    "GitLabNotFoundError",
    "GitLabResponseError",
    "LoginRejectedError",
    "MergeRequest",
    "RealGitLab",
]
