"""Tests for RealGitLab with requests patched out."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from pulley.core.gitlab.real import RealGitLab, make_headers
from pulley.core.gitlab.types import (
    GitLabApiError,
    GitLabAuthenticationError,
    GitLabNotFoundError,
    GitLabResponseError,
    LoginRejectedError,
)

MERGE_REQUEST_BODY = {
    "id": 42,
    "source_branch": "feature",
    "target_branch": "main",
    "title": "Add feature #7",
    "state": 2,
    "closed": False,
    "merged": False,
    "description": "ignored",
}


def _response(status_code: int, body: object | str) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = body if isinstance(body, str) else json.dumps(body)
    return response


def test_make_headers() -> None:
    assert make_headers("abc") == {"PRIVATE-TOKEN": "abc"}


@patch("pulley.core.gitlab.real.requests.get")
def test_get_merge_request(mock_get: Mock) -> None:
    mock_get.return_value = _response(200, MERGE_REQUEST_BODY)
    client = RealGitLab("https://gitlab.test/", timeout=5.0)

    merge_request = client.get_merge_request("shop", "42", token="abc")

    assert merge_request.id == "42"
    assert merge_request.source_branch == "feature"
    assert merge_request.target_branch == "main"
    assert merge_request.is_auto_mergeable
    mock_get.assert_called_once_with(
        "https://gitlab.test/api/v2/projects/shop/merge_request/42",
        headers={"PRIVATE-TOKEN": "abc"},
        timeout=5.0,
    )


@patch("pulley.core.gitlab.real.requests.get")
def test_get_merge_request_commits(mock_get: Mock) -> None:
    mock_get.return_value = _response(
        200,
        [
            {"id": "a1", "title": "Fix thing #12", "author_name": "Jane Doe"},
            {"id": "b2", "title": "cleanup", "author_name": "John Roe"},
        ],
    )
    client = RealGitLab("https://gitlab.test")

    commits = client.get_merge_request_commits("shop", "42", token="abc")

    assert [commit.title for commit in commits] == ["Fix thing #12", "cleanup"]
    assert commits[0].author_name == "Jane Doe"
    assert mock_get.call_args.args[0] == (
        "https://gitlab.test/api/v2/projects/shop/merge_request/42/commits"
    )


@pytest.mark.parametrize(
    ("status_code", "error"),
    [
        (401, GitLabAuthenticationError),
        (404, GitLabNotFoundError),
        (500, GitLabApiError),
    ],
)
@patch("pulley.core.gitlab.real.requests.get")
def test_http_errors(mock_get: Mock, status_code: int, error: type[Exception]) -> None:
    mock_get.return_value = _response(status_code, '{"message": "nope"}')

    with pytest.raises(error):
        RealGitLab("https://gitlab.test").get_merge_request("shop", "42", token="abc")


@patch("pulley.core.gitlab.real.requests.get")
def test_unexpected_status_message_includes_body(mock_get: Mock) -> None:
    mock_get.return_value = _response(502, "Bad Gateway")

    with pytest.raises(GitLabApiError, match="GitLab returned HTTP 502: Bad Gateway"):
        RealGitLab("https://gitlab.test").get_merge_request("shop", "42", token="abc")


@patch("pulley.core.gitlab.real.requests.get")
def test_transport_error(mock_get: Mock) -> None:
    mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

    with pytest.raises(GitLabApiError, match="connection refused"):
        RealGitLab("https://gitlab.test").get_merge_request("shop", "42", token="abc")


@pytest.mark.parametrize(
    "body",
    [
        "<html>maintenance</html>",
        {"id": 42, "title": "missing branches", "state": 2},
        {**MERGE_REQUEST_BODY, "state": None},
    ],
)
@patch("pulley.core.gitlab.real.requests.get")
def test_malformed_merge_request(mock_get: Mock, body: object) -> None:
    mock_get.return_value = _response(200, body)

    with pytest.raises(GitLabResponseError):
        RealGitLab("https://gitlab.test").get_merge_request("shop", "42", token="abc")


@patch("pulley.core.gitlab.real.requests.get")
def test_malformed_commit_list(mock_get: Mock) -> None:
    mock_get.return_value = _response(200, {"not": "a list"})

    with pytest.raises(GitLabResponseError):
        RealGitLab("https://gitlab.test").get_merge_request_commits("shop", "42", token="abc")


@patch("pulley.core.gitlab.real.requests.post")
def test_create_session(mock_post: Mock) -> None:
    mock_post.return_value = _response(201, {"private_token": "tok123", "email": "a@b.c"})

    token = RealGitLab("https://gitlab.test").create_session("a@b.c", "secret")

    assert token == "tok123"
    mock_post.assert_called_once_with(
        "https://gitlab.test/api/v2/session",
        json={"email": "a@b.c", "password": "secret"},
        timeout=None,
    )


@patch("pulley.core.gitlab.real.requests.post")
def test_create_session_rejected_with_message(mock_post: Mock) -> None:
    mock_post.return_value = _response(401, {"message": "401 Unauthorized"})

    with pytest.raises(LoginRejectedError) as exc_info:
        RealGitLab("https://gitlab.test").create_session("a@b.c", "wrong")

    assert exc_info.value.message == "401 Unauthorized"


@patch("pulley.core.gitlab.real.requests.post")
def test_create_session_rejected_without_json(mock_post: Mock) -> None:
    mock_post.return_value = _response(503, "Service Unavailable")

    with pytest.raises(LoginRejectedError) as exc_info:
        RealGitLab("https://gitlab.test").create_session("a@b.c", "secret")

    assert exc_info.value.message == "HTTP 503"


@patch("pulley.core.gitlab.real.requests.post")
def test_create_session_transport_error(mock_post: Mock) -> None:
    mock_post.side_effect = requests.exceptions.Timeout("timed out")

    with pytest.raises(GitLabApiError):
        RealGitLab("https://gitlab.test").create_session("a@b.c", "secret")


@patch("pulley.core.gitlab.real.requests.get")
def test_textual_state_parses_as_not_mergeable(mock_get: Mock) -> None:
    mock_get.return_value = _response(200, {**MERGE_REQUEST_BODY, "state": "opened"})

    merge_request = RealGitLab("https://gitlab.test").get_merge_request("shop", "42", token="abc")

    assert merge_request.state == "opened"
    assert not merge_request.is_auto_mergeable
