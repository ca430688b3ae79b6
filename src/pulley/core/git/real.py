"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import logging
import subprocess
from pathlib import Path

from pulley.core.git.abc import Git, GitCommandResult, WorkingTreeStatus
from pulley.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


def parse_porcelain_status(output: str) -> WorkingTreeStatus:
    """Parse `git status --porcelain` (v1) output.

    Each line is `XY path` where X is the index state and Y the worktree state.
    Untracked (`??`) and ignored (`!!`) entries are skipped.
    """
    staged = False
    unstaged = False
    for line in output.splitlines():
        if len(line) < 2:
            continue
        index_state, worktree_state = line[0], line[1]
        if line.startswith(("??", "!!")):
            continue
        if "U" in (index_state, worktree_state) or line[:2] in ("AA", "DD"):
            unstaged = True
            continue
        if index_state != " ":
            staged = True
        if worktree_state != " ":
            unstaged = True
    return WorkingTreeStatus(staged=staged, unstaged=unstaged)


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def _run(self, cwd: Path, *args: str) -> GitCommandResult:
        cmd = ("git", *args)
        logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
        logger.debug("Exit code %d for: %s", result.returncode, " ".join(cmd))
        return GitCommandResult(
            args=cmd,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    def get_remote_description(self, cwd: Path, remote: str) -> str:
        # `remote show -n` echoes unknown names back as URLs and exits 0
        if self.get_config_value(cwd, f"remote.{remote}.url") is None:
            return ""
        # -n skips contacting the remote; the URL lines are all we need
        result = self._run(cwd, "remote", "-v", "show", "-n", remote)
        if not result.succeeded:
            return ""
        return result.stdout

    def get_status(self, cwd: Path) -> WorkingTreeStatus:
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain"],
            operation_context="read working tree status",
            cwd=cwd,
        )
        return parse_porcelain_status(result.stdout)

    def get_config_value(self, cwd: Path, key: str) -> str | None:
        result = self._run(cwd, "config", "--get", key)
        if not result.succeeded:
            return None
        value = result.stdout.strip()
        return value or None

    def set_config_value(self, cwd: Path, key: str, value: str) -> None:
        run_subprocess_with_context(
            ["git", "config", "--local", key, value],
            operation_context=f"store '{key}' in git config",
            cwd=cwd,
        )

    def checkout_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._run(cwd, "checkout", branch)

    def create_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._run(cwd, "checkout", "-b", branch)

    def delete_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._run(cwd, "branch", "-D", branch)

    def pull_branch(self, cwd: Path, remote: str, branch: str) -> GitCommandResult:
        return self._run(cwd, "pull", remote, branch)

    def update_submodules(self, cwd: Path) -> GitCommandResult:
        return self._run(cwd, "submodule", "update", "--init")

    def merge_squash(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._run(cwd, "merge", "--no-commit", "--squash", branch)

    def reset_hard_orig_head(self, cwd: Path) -> GitCommandResult:
        return self._run(cwd, "reset", "--hard", "ORIG_HEAD")

    def get_current_branch(self, cwd: Path) -> str | None:
        result = self._run(cwd, "rev-parse", "--abbrev-ref", "HEAD")
        if not result.succeeded:
            return None
        branch = result.stdout.strip()
        if not branch or branch == "HEAD":
            return None
        return branch

    def get_head(self, cwd: Path) -> str | None:
        result = self._run(cwd, "log", "-1", "--format=%H")
        if not result.succeeded:
            return None
        sha = result.stdout.strip()
        return sha or None

    def commit_all(self, cwd: Path, message: str, *, author: str | None, edit: bool) -> int:
        cmd = ["git", "commit", "-a", f"--message={message}"]
        if edit:
            cmd.append("-e")
        if author:
            cmd.append(f"--author={author}")

        # Inherit stdio so the user's editor works in interactive mode
        logger.debug("Running: git commit -a (edit=%s, author=%s)", edit, author)
        result = subprocess.run(cmd, cwd=cwd, check=False)
        return result.returncode

    def push_branch(self, cwd: Path, remote: str, branch: str) -> GitCommandResult:
        return self._run(cwd, "push", remote, branch)
