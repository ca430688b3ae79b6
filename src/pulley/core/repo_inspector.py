"""Repository state checks that run before anything is changed."""

import re

from pulley.core.git.abc import WorkingTreeStatus

# The last path segment before ".git" on a "URL:" line. The separator before it
# is "/" for https/ssh:// remotes and ":" for scp-style "git@host:proj.git".
_PROJECT_PATTERN = re.compile(r"URL:\s*\S*[/:]([\w.\-]+?)\.git/?\s*$", re.MULTILINE)


def resolve_project_code(remote_description: str) -> str | None:
    """Extract the GitLab project code from `git remote -v show` output.

    >>> resolve_project_code("  Fetch URL: git@gitlab.example.com:web/shop.git")
    'shop'
    """
    match = _PROJECT_PATTERN.search(remote_description)
    if match is None:
        return None
    return match.group(1)


def evaluate_status(status: WorkingTreeStatus, *, resume: bool) -> str | None:
    """Decide whether landing may continue from the current working tree.

    A fresh landing needs a clean tree. A resumed landing needs something
    staged. Staged changes are checked first, so a resumed tree that also has
    unstaged or still-conflicted paths proceeds; the later `git commit -a`
    then either picks them up or fails, and a failed commit stops the push.

    Returns:
        None when landing may continue, otherwise the guidance message
    """
    if status.staged:
        if resume:
            return None
        return "Please commit changed files before attempting a pull/merge."

    if status.unstaged:
        if resume:
            return "Please add files that you wish to commit."
        return "Please stash files before attempting a pull/merge."

    if resume:
        return "It looks like you've broken your merge attempt."
    return None
