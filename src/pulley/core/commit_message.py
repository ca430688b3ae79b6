"""Commit message synthesis for a landed merge request."""

import re
from collections.abc import Sequence

_ISSUE_PATTERN = re.compile(r"#(\d+)")

PLATFORM_PREFIX = "GL"


def find_issue_numbers(text: str) -> list[str]:
    """Return every `#N` reference in order of appearance, duplicates included."""
    return _ISSUE_PATTERN.findall(text)


def build_commit_message(
    mr_id: str,
    mr_title: str,
    commit_titles: Sequence[str],
    tracker: str | None,
) -> str:
    """Build the squash commit message for a merge request.

    Issue references in the merge request title and commit titles become
    tracker links under "More Details:" when a tracker prefix is configured.
    References in commit titles alone also become "Fixes #N" on the subject line.

    Example:
        >>> print(build_commit_message("42", "Add feature #7", ["Fix thing #12"], "https://t/"))
        Close GL-42: Add feature #7. Fixes #12
        <BLANKLINE>
        More Details:
         - https://t/7
         - https://t/12
    """
    titles = " ".join(commit_titles)

    urls: list[str] = []
    if tracker:
        urls = [tracker + number for number in find_issue_numbers(f"{mr_title} {titles}")]

    fixes = [f" Fixes #{number}" for number in find_issue_numbers(titles)]

    message = f"Close {PLATFORM_PREFIX}-{mr_id}: {mr_title}." + ",".join(fixes)
    if urls:
        message += "\n\nMore Details:" + "".join(f"\n - {url}" for url in urls)
    return message
