"""Configuration data structures and loading.

Provides immutable config data loaded from ./pulley-gitlab.json, for example:

    {
      "server": "https://gitlab.example.com",
      "remote": "origin",
      "repos": {"shop": "https://tracker.example.com/issues/"},
      "interactive": false
    }
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

CONFIG_FILENAME = "pulley-gitlab.json"


class ConfigError(Exception):
    """The config file is missing or malformed."""


class PulleyConfig(BaseModel):
    """Immutable configuration.

    Loaded once at CLI entry point and stored in PulleyContext.
    All fields are read-only after construction.

    Attributes:
        server: Base URL of the GitLab instance
        remote: Git remote that points at the GitLab project
        repos: Mapping of project code -> issue tracker URL prefix
        interactive: Open the editor on the commit message before committing
        timeout: HTTP timeout in seconds, None to wait indefinitely
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    server: str = ""
    remote: str = "origin"
    repos: dict[str, str] = {}
    interactive: bool = False
    timeout: float | None = None

    def tracker_for(self, project_code: str) -> str | None:
        """Tracker URL prefix configured for a project, None if absent or empty."""
        return self.repos.get(project_code) or None


def default_config_path(cwd: Path) -> Path:
    return cwd / CONFIG_FILENAME


def load_config(path: Path) -> PulleyConfig:
    """Load config from a JSON file.

    Args:
        path: Config file path

    Returns:
        PulleyConfig instance with loaded values

    Raises:
        ConfigError: If the file doesn't exist, isn't JSON, or has the wrong shape
    """
    if not path.exists():
        raise ConfigError(f"Config file not found at {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    try:
        return PulleyConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e
