"""CLI tests using CliRunner with an injected test context."""

import json
from pathlib import Path

from click.testing import CliRunner

from pulley.cli.cli import cli
from pulley.cli.config import PulleyConfig
from pulley.core.context import PulleyContext
from pulley.core.git.abc import GitCommandResult, WorkingTreeStatus
from pulley.core.git.fake import FakeGit
from pulley.core.gitlab.fake import FakeGitLab
from pulley.core.gitlab.types import AUTO_MERGEABLE_STATE, CommitInfo, MergeRequest

REMOTE_DESCRIPTION = "  Fetch URL: git@gitlab.test:web/shop.git\n"

CONFLICT = GitCommandResult(
    args=("git", "pull", "origin", "feature"),
    returncode=1,
    stdout="CONFLICT (content): Merge conflict in app.py\n",
)


def _context(git: FakeGit, *, state: int = AUTO_MERGEABLE_STATE) -> PulleyContext:
    gitlab = FakeGitLab(
        merge_requests={
            "42": MergeRequest(
                id="42",
                source_branch="feature",
                target_branch="main",
                title="Add feature #7",
                state=state,
            )
        },
        commits={"42": [CommitInfo(title="Fix thing #12", author_name="Jane Doe")]},
    )
    return PulleyContext.for_test(
        git=git,
        gitlab=gitlab,
        config=PulleyConfig(server="https://gitlab.test"),
    )


def test_land_success_exit_zero() -> None:
    git = FakeGit(
        remote_descriptions={"origin": REMOTE_DESCRIPTION},
        commit_creates_sha="abcdef0123456789",
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["42"], obj=_context(git))

    assert result.exit_code == 0, result.output
    assert "Landed merge request !42 on main" in result.output
    assert "abcdef01" in result.output
    assert git.commands[-1] == "push origin main"


def test_merge_request_id_is_trimmed() -> None:
    git = FakeGit(remote_descriptions={"origin": REMOTE_DESCRIPTION})
    runner = CliRunner()

    result = runner.invoke(cli, [" 42 "], obj=_context(git))

    assert result.exit_code == 0, result.output
    assert "checkout -b pull-42" in git.commands


def test_missing_merge_request_id_exits_one() -> None:
    git = FakeGit(remote_descriptions={"origin": REMOTE_DESCRIPTION})
    runner = CliRunner()

    result = runner.invoke(cli, [], obj=_context(git))

    assert result.exit_code == 1
    assert "Error: No merge request ID specified, please provide one." in result.output
    assert git.commands == []


def test_unmergeable_request_exits_one() -> None:
    git = FakeGit(remote_descriptions={"origin": REMOTE_DESCRIPTION})
    runner = CliRunner()

    result = runner.invoke(cli, ["42"], obj=_context(git, state=1))

    assert result.exit_code == 1
    assert "This Merge Request is not automatically mergeable." in result.output


def test_conflict_pause_prints_rerun_command() -> None:
    git = FakeGit(
        remote_descriptions={"origin": REMOTE_DESCRIPTION},
        command_results={"pull origin feature": CONFLICT},
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["42"], obj=_context(git))

    assert result.exit_code == 0, result.output
    assert "Merge conflict. Please resolve then run: pulley 42 done" in result.output
    assert git.commits == []


def test_resume_marker_skips_merge() -> None:
    git = FakeGit(
        remote_descriptions={"origin": REMOTE_DESCRIPTION},
        status=WorkingTreeStatus(staged=True, unstaged=False),
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["42", "done"], obj=_context(git))

    assert result.exit_code == 0, result.output
    assert git.commands == ["status --porcelain", "commit -a", "push origin main"]


def test_git_failure_exits_one_with_stderr() -> None:
    git = FakeGit(
        remote_descriptions={"origin": REMOTE_DESCRIPTION},
        command_results={
            "push origin main": GitCommandResult(
                args=("git", "push", "origin", "main"),
                returncode=1,
                stderr="fatal: unable to access remote\n",
            )
        },
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["42"], obj=_context(git))

    assert result.exit_code == 1
    assert "Error: fatal: unable to access remote" in result.output


def test_missing_config_file_exits_one(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["42", "--config", str(tmp_path / "pulley-gitlab.json")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_invalid_config_file_exits_one(tmp_path: Path) -> None:
    config_path = tmp_path / "pulley-gitlab.json"
    config_path.write_text("{broken", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["42", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "is not valid JSON" in result.output


def test_empty_server_in_config_exits_one(tmp_path: Path) -> None:
    config_path = tmp_path / "pulley-gitlab.json"
    config_path.write_text(json.dumps({"server": ""}), encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["42", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "Please set gitlab server in ./pulley-gitlab.json" in result.output


def test_help() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["-h"])

    assert result.exit_code == 0
    assert "Land GitLab merge request MR_ID" in result.output
