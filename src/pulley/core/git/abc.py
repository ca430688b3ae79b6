"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
landing workflow testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class GitCommandResult:
    """Captured result of a git command whose outcome drives control flow.

    These results are never inspected directly by the landing workflow; they are
    handed to pulley.core.git.outcomes.classify_git_result().
    """

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Summary of `git status --porcelain`.

    Untracked files are ignored. Unmerged (conflicted) paths count as unstaged.
    """

    staged: bool
    unstaged: bool

    @property
    def is_clean(self) -> bool:
        return not self.staged and not self.unstaged


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_remote_description(self, cwd: Path, remote: str) -> str:
        """Return the output of `git remote -v show -n <remote>`.

        Empty when the remote is not configured.
        """
        ...

    @abstractmethod
    def get_status(self, cwd: Path) -> WorkingTreeStatus:
        """Return staged/unstaged state of the working tree."""
        ...

    @abstractmethod
    def get_config_value(self, cwd: Path, key: str) -> str | None:
        """Read a key from the repository's git config, None if unset."""
        ...

    @abstractmethod
    def set_config_value(self, cwd: Path, key: str, value: str) -> None:
        """Write a key to the repository's local git config."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        """Run `git checkout <branch>`."""
        ...

    @abstractmethod
    def create_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        """Run `git checkout -b <branch>`."""
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        """Run `git branch -D <branch>`."""
        ...

    @abstractmethod
    def pull_branch(self, cwd: Path, remote: str, branch: str) -> GitCommandResult:
        """Run `git pull <remote> <branch>`."""
        ...

    @abstractmethod
    def update_submodules(self, cwd: Path) -> GitCommandResult:
        """Run `git submodule update --init`."""
        ...

    @abstractmethod
    def merge_squash(self, cwd: Path, branch: str) -> GitCommandResult:
        """Run `git merge --no-commit --squash <branch>`."""
        ...

    @abstractmethod
    def reset_hard_orig_head(self, cwd: Path) -> GitCommandResult:
        """Run `git reset --hard ORIG_HEAD`."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Return the checked out branch name, None on a detached HEAD."""
        ...

    @abstractmethod
    def get_head(self, cwd: Path) -> str | None:
        """Return the commit sha at HEAD, None if the repository has no commits."""
        ...

    @abstractmethod
    def commit_all(self, cwd: Path, message: str, *, author: str | None, edit: bool) -> int:
        """Run `git commit -a` attached to the user's terminal.

        Args:
            cwd: Working directory
            message: Commit message
            author: Value for --author, omitted when None
            edit: Open the editor on the message before committing

        Returns:
            Exit status of git commit
        """
        ...

    @abstractmethod
    def push_branch(self, cwd: Path, remote: str, branch: str) -> GitCommandResult:
        """Run `git push <remote> <branch>`."""
        ...
