"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes.
"""

from pulley.core.git.abc import Git, GitCommandResult, WorkingTreeStatus
from pulley.core.git.outcomes import GitOutcome, classify_git_result
from pulley.core.git.real import RealGit

__all__ = [
    "Git",
    "GitCommandResult",
    "GitOutcome",
    "RealGit",
    "WorkingTreeStatus",
    "classify_git_result",
]
