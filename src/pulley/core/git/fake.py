"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from pulley.core.git.abc import Git, GitCommandResult, WorkingTreeStatus


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.

    Command results are looked up by the git subcommand string (for example
    "pull origin feature" or "merge --no-commit --squash pull-42"); anything not
    configured succeeds with empty output.
    """

    def __init__(
        self,
        *,
        remote_descriptions: dict[str, str] | None = None,
        status: WorkingTreeStatus | None = None,
        config: dict[str, str] | None = None,
        command_results: dict[str, GitCommandResult | list[GitCommandResult]] | None = None,
        current_branch: str | None = "main",
        head: str | None = "0000000",
        commit_creates_sha: str | None = "1111111",
        commit_returncode: int = 0,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            remote_descriptions: Mapping of remote name -> `git remote -v show` output
            status: Working tree status returned by get_status (defaults to clean)
            config: Initial git config key/values
            command_results: Mapping of subcommand string -> result to return. A list
                is consumed one result per call; once exhausted the command succeeds
            current_branch: Branch checked out initially; successful checkouts move it
            head: HEAD sha before any commit
            commit_creates_sha: New HEAD after commit_all (None leaves HEAD unchanged)
            commit_returncode: Exit status returned by commit_all
        """
        self._remote_descriptions = remote_descriptions or {}
        self._status = status or WorkingTreeStatus(staged=False, unstaged=False)
        self._config = dict(config or {})
        self._command_results = {
            command: list(results) if isinstance(results, list) else results
            for command, results in (command_results or {}).items()
        }
        self._current_branch = current_branch
        self._head = head
        self._commit_creates_sha = commit_creates_sha
        self._commit_returncode = commit_returncode
        self._commands: list[str] = []
        self._commits: list[tuple[str, str | None, bool]] = []
        self._config_writes: list[tuple[str, str]] = []

    @property
    def commands(self) -> list[str]:
        """Subcommands run through result-returning methods, in order."""
        return self._commands.copy()

    @property
    def commits(self) -> list[tuple[str, str | None, bool]]:
        """List of (message, author, edit) tuples passed to commit_all()."""
        return self._commits.copy()

    @property
    def config_writes(self) -> list[tuple[str, str]]:
        """List of (key, value) tuples written via set_config_value()."""
        return self._config_writes.copy()

    @property
    def config(self) -> dict[str, str]:
        return dict(self._config)

    def _record(self, *args: str) -> GitCommandResult:
        command = " ".join(args)
        self._commands.append(command)
        configured = self._command_results.get(command)
        if isinstance(configured, list):
            configured = configured.pop(0) if configured else None
        if configured is not None:
            return configured
        return GitCommandResult(args=("git", *args), returncode=0)

    def get_remote_description(self, cwd: Path, remote: str) -> str:
        return self._remote_descriptions.get(remote, "")

    def get_status(self, cwd: Path) -> WorkingTreeStatus:
        self._commands.append("status --porcelain")
        return self._status

    def get_config_value(self, cwd: Path, key: str) -> str | None:
        return self._config.get(key)

    def set_config_value(self, cwd: Path, key: str, value: str) -> None:
        self._config[key] = value
        self._config_writes.append((key, value))

    def checkout_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._switch(branch, self._record("checkout", branch))

    def create_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._switch(branch, self._record("checkout", "-b", branch))

    def _switch(self, branch: str, result: GitCommandResult) -> GitCommandResult:
        if result.succeeded:
            self._current_branch = branch
        return result

    def delete_branch(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._record("branch", "-D", branch)

    def pull_branch(self, cwd: Path, remote: str, branch: str) -> GitCommandResult:
        return self._record("pull", remote, branch)

    def update_submodules(self, cwd: Path) -> GitCommandResult:
        return self._record("submodule", "update", "--init")

    def merge_squash(self, cwd: Path, branch: str) -> GitCommandResult:
        return self._record("merge", "--no-commit", "--squash", branch)

    def reset_hard_orig_head(self, cwd: Path) -> GitCommandResult:
        return self._record("reset", "--hard", "ORIG_HEAD")

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def get_head(self, cwd: Path) -> str | None:
        return self._head

    def commit_all(self, cwd: Path, message: str, *, author: str | None, edit: bool) -> int:
        self._commands.append("commit -a")
        self._commits.append((message, author, edit))
        if self._commit_creates_sha is not None:
            self._head = self._commit_creates_sha
        return self._commit_returncode

    def push_branch(self, cwd: Path, remote: str, branch: str) -> GitCommandResult:
        return self._record("push", remote, branch)
