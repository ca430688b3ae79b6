"""Types for GitLab v2 API payloads and errors."""

from pydantic import BaseModel, ConfigDict, field_validator

# GitLab v2 reports merge status as an integer; 2 means "can be merged
# automatically". Any other value, including a textual status, is not.
AUTO_MERGEABLE_STATE = 2


class MergeRequest(BaseModel):
    """Merge request metadata from `GET /projects/:id/merge_request/:mr_id`."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_branch: str
    target_branch: str
    title: str
    state: int | str
    closed: bool = False
    merged: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def id_as_str(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_auto_mergeable(self) -> bool:
        return self.state == AUTO_MERGEABLE_STATE


class CommitInfo(BaseModel):
    """One entry of `GET /projects/:id/merge_request/:mr_id/commits`."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    author_name: str | None = None


class SessionResponse(BaseModel):
    """Body of `POST /session`: a token on success, a message otherwise."""

    model_config = ConfigDict(frozen=True)

    private_token: str | None = None
    message: str | None = None


class GitLabError(Exception):
    """Base class for GitLab API failures."""


class GitLabAuthenticationError(GitLabError):
    """The service answered 401 for the current token."""


class GitLabNotFoundError(GitLabError):
    """The service answered 404."""


class GitLabApiError(GitLabError):
    """Transport failure or unexpected HTTP status."""


class GitLabResponseError(GitLabError):
    """The response body could not be parsed."""


class LoginRejectedError(GitLabError):
    """The session endpoint did not return a token."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
