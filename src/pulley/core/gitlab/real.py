"""Production GitLab implementation over the v2 REST API."""

import logging

import requests
from pydantic import TypeAdapter, ValidationError

from pulley.core.gitlab.abc import GitLab
from pulley.core.gitlab.types import (
    CommitInfo,
    GitLabApiError,
    GitLabAuthenticationError,
    GitLabNotFoundError,
    GitLabResponseError,
    LoginRejectedError,
    MergeRequest,
    SessionResponse,
)

logger = logging.getLogger(__name__)

_COMMIT_LIST = TypeAdapter(list[CommitInfo])


def make_headers(token: str) -> dict[str, str]:
    """Build the GitLab private-token header."""
    return {"PRIVATE-TOKEN": token}


class RealGitLab(GitLab):
    """GitLab client using requests.

    Args:
        server: Base URL of the GitLab instance, e.g. "https://gitlab.example.com"
        timeout: Seconds to wait for a response; None waits indefinitely
    """

    def __init__(self, server: str, *, timeout: float | None = None) -> None:
        self._server = server.rstrip("/")
        self._timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self._server}/api/v2/{path}"

    def fetch(self, path: str, *, token: str) -> str:
        """Authenticated GET returning the raw response body.

        Raises:
            GitLabAuthenticationError: on 401
            GitLabNotFoundError: on 404
            GitLabApiError: on transport errors or any other status >= 400
        """
        url = self._url(path)
        logger.debug("GET %s", url)
        try:
            response = requests.get(url, headers=make_headers(token), timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            raise GitLabApiError(str(e)) from e

        logger.debug("GET %s -> %d", url, response.status_code)
        if response.status_code == 401:
            raise GitLabAuthenticationError(f"GitLab rejected the access token for {path}")
        if response.status_code == 404:
            raise GitLabNotFoundError(f"{path} not found")
        if response.status_code >= 400:
            raise GitLabApiError(f"GitLab returned HTTP {response.status_code}: {response.text}")
        return response.text

    def get_merge_request(self, project: str, mr_id: str, *, token: str) -> MergeRequest:
        body = self.fetch(f"projects/{project}/merge_request/{mr_id}", token=token)
        try:
            return MergeRequest.model_validate_json(body)
        except ValidationError as e:
            raise GitLabResponseError(f"Unexpected merge request payload: {e}") from e

    def get_merge_request_commits(
        self, project: str, mr_id: str, *, token: str
    ) -> list[CommitInfo]:
        body = self.fetch(f"projects/{project}/merge_request/{mr_id}/commits", token=token)
        try:
            return _COMMIT_LIST.validate_json(body)
        except ValidationError as e:
            raise GitLabResponseError(f"Unexpected commit list payload: {e}") from e

    def create_session(self, email: str, password: str) -> str:
        url = self._url("session")
        logger.debug("POST %s", url)
        try:
            response = requests.post(
                url,
                json={"email": email, "password": password},
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            raise GitLabApiError(str(e)) from e

        try:
            session = SessionResponse.model_validate_json(response.text)
        except ValidationError:
            session = SessionResponse(message=f"HTTP {response.status_code}")

        if not session.private_token:
            raise LoginRejectedError(session.message or "Login failed")
        return session.private_token
