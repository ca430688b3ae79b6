"""Classification of git command results.

Git reports some outcomes only as human-readable text (a merge conflict during
`git pull`, a command run outside the toplevel directory). All matching against
that text lives here so the landing workflow only ever sees a GitOutcome.
Exit codes are consulted first wherever they carry the signal.
"""

import re
from enum import Enum

from pulley.core.git.abc import GitCommandResult

_CONFLICT_PATTERN = re.compile(r"^CONFLICT \(|Merge conflict|Automatic merge failed", re.MULTILINE)
_TOPLEVEL_PATTERN = re.compile(r"top-?level", re.IGNORECASE)
_BRANCH_EXISTS_PATTERN = re.compile(r"already exists", re.IGNORECASE)


class GitOutcome(Enum):
    OK = "ok"
    CONFLICT = "conflict"
    NOT_TOPLEVEL = "not_toplevel"
    BRANCH_EXISTS = "branch_exists"
    FAILED = "failed"


def classify_git_result(result: GitCommandResult) -> GitOutcome:
    """Map a captured git command result to a GitOutcome.

    A conflict is reported even when the exit code is zero; git prints the
    conflict summary on stdout and some versions exit 0 for `--no-commit` merges.
    """
    if _CONFLICT_PATTERN.search(result.stdout) or _CONFLICT_PATTERN.search(result.stderr):
        return GitOutcome.CONFLICT
    if _TOPLEVEL_PATTERN.search(result.stderr):
        return GitOutcome.NOT_TOPLEVEL
    if result.succeeded:
        return GitOutcome.OK
    if _BRANCH_EXISTS_PATTERN.search(result.stderr):
        return GitOutcome.BRANCH_EXISTS
    return GitOutcome.FAILED
