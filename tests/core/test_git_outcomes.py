from pulley.core.git.abc import GitCommandResult
from pulley.core.git.outcomes import GitOutcome, classify_git_result


def _result(returncode: int, stdout: str = "", stderr: str = "") -> GitCommandResult:
    return GitCommandResult(args=("git",), returncode=returncode, stdout=stdout, stderr=stderr)


def test_success_is_ok() -> None:
    assert classify_git_result(_result(0, stdout="Already up to date.\n")) is GitOutcome.OK


def test_pull_conflict_on_stdout() -> None:
    result = _result(
        1,
        stdout=(
            "Auto-merging app.py\n"
            "CONFLICT (content): Merge conflict in app.py\n"
            "Automatic merge failed; fix conflicts and then commit the result.\n"
        ),
    )

    assert classify_git_result(result) is GitOutcome.CONFLICT


def test_conflict_with_zero_exit_is_still_conflict() -> None:
    result = _result(0, stdout="CONFLICT (modify/delete): a.py deleted in HEAD\n")

    assert classify_git_result(result) is GitOutcome.CONFLICT


def test_toplevel_message() -> None:
    result = _result(
        1, stderr="You need to run this command from the toplevel of the working tree.\n"
    )

    assert classify_git_result(result) is GitOutcome.NOT_TOPLEVEL


def test_branch_exists() -> None:
    result = _result(128, stderr="fatal: a branch named 'pull-42' already exists\n")

    assert classify_git_result(result) is GitOutcome.BRANCH_EXISTS


def test_other_failure() -> None:
    result = _result(1, stderr="error: pathspec 'nope' did not match any file(s) known to git\n")

    assert classify_git_result(result) is GitOutcome.FAILED
