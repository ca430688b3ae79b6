"""Merge request landing workflow.

## Module Overview

Purpose: Squash-merges a GitLab merge request into its target branch in the
local checkout, commits it with a message that links the referenced issues,
and pushes the target branch.

## Stages

    Init -> CheckAuth -> [Login] -> ResolveProject -> CheckStatus
         -> FetchMergeRequest -> Merge -> Commit -> Push

- Init: server configured and merge request id given (before any subprocess
  or network call)
- CheckAuth / Login: cached token from git config, otherwise interactive login
- ResolveProject: project code from the configured remote's URL
- CheckStatus: working tree must be clean (fresh run) or have the conflict
  resolution staged (resumed run)
- FetchMergeRequest: metadata for the merge request
- Merge: skipped when resuming. Rejects closed, merged and not automatically
  mergeable requests, then builds `pull-<id>` from the target branch, pulls
  the source branch into it and squash-merges it into the target branch.
  A resumed run must be on the target branch, where the squash lands
- Commit: builds the message from the merge request's commits and commits
  with the first commit's author; HEAD must move
- Push: pushes the target branch to the configured remote

## Outcomes

- LandingSuccess: pushed
- LandingPaused: the merge hit conflicts. The user resolves them, stages the
  result and reruns with a resume marker; the rerun starts at Commit
- LandingError: raised for every fatal condition with a single message

A 401 from GitLab triggers one login and one retry of that request. A second
401 is fatal.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TypeVar

from pulley.core.commit_message import build_commit_message
from pulley.core.context import PulleyContext
from pulley.core.git.abc import GitCommandResult
from pulley.core.git.outcomes import GitOutcome, classify_git_result
from pulley.core.gitlab.types import (
    GitLabApiError,
    GitLabAuthenticationError,
    GitLabNotFoundError,
    GitLabResponseError,
    MergeRequest,
)
from pulley.core.repo_inspector import evaluate_status, resolve_project_code

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LandingError(Exception):
    """Fatal landing condition. The message is shown to the user as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class LandingSession:
    """State of one landing, replaced (never mutated) as stages complete.

    Attributes:
        mr_id: Merge request id from the command line
        resume: True when continuing after a manual conflict resolution
        project_code: GitLab project code, set by ResolveProject
        token: Access token, empty until CheckAuth/Login
        tracker: Issue tracker URL prefix for the project, if configured
    """

    mr_id: str
    resume: bool = False
    project_code: str = ""
    token: str = ""
    tracker: str | None = None


@dataclass(frozen=True)
class LandingSuccess:
    mr_id: str
    target_branch: str
    commit_sha: str


@dataclass(frozen=True)
class LandingPaused:
    """The squash merge stopped on conflicts; rerun with the resume marker."""

    mr_id: str
    branch: str
    message: str


LandingResult = LandingSuccess | LandingPaused


def landing_branch_name(mr_id: str) -> str:
    return f"pull-{mr_id}"


def land_merge_request(
    ctx: PulleyContext, session: LandingSession, *, rerun_command: str
) -> LandingResult:
    """Run the landing workflow for one merge request.

    Args:
        ctx: PulleyContext with git, GitLab, auth and feedback
        session: Initial session (mr_id and resume flag)
        rerun_command: Command shown to the user when a conflict pauses the landing

    Returns:
        LandingSuccess or LandingPaused

    Raises:
        LandingError: On any fatal condition
    """
    logger.debug("Landing: mr_id=%s resume=%s", session.mr_id, session.resume)
    _check_config(ctx, session)

    ctx.feedback.info("Initializing...")
    session = _ensure_token(ctx, session)
    session = _resolve_project(ctx, session)
    _check_status(ctx, session)

    session, merge_request = _fetch_merge_request(ctx, session)

    if session.resume:
        _check_resume_branch(ctx, session, merge_request, rerun_command=rerun_command)
    else:
        paused = _merge(ctx, session, merge_request, rerun_command=rerun_command)
        if paused is not None:
            return paused

    session, commit_sha = _commit(ctx, session, merge_request)
    _push(ctx, merge_request)

    return LandingSuccess(
        mr_id=session.mr_id,
        target_branch=merge_request.target_branch,
        commit_sha=commit_sha,
    )


def _check_config(ctx: PulleyContext, session: LandingSession) -> None:
    if not ctx.config.server.strip():
        raise LandingError("Please set gitlab server in ./pulley-gitlab.json")
    if not session.mr_id:
        raise LandingError("No merge request ID specified, please provide one.")


def _ensure_token(ctx: PulleyContext, session: LandingSession) -> LandingSession:
    token = ctx.auth.get_cached_token()
    if not token:
        logger.debug("No cached token, logging in")
        token = _login(ctx)
    return replace(session, token=token)


def _login(ctx: PulleyContext) -> str:
    try:
        return ctx.auth.login()
    except GitLabApiError as e:
        raise LandingError(f"Unable to reach GitLab to log in: {e}") from e


def _resolve_project(ctx: PulleyContext, session: LandingSession) -> LandingSession:
    description = ctx.git.get_remote_description(ctx.cwd, ctx.config.remote)
    project_code = resolve_project_code(description)
    if project_code is None:
        raise LandingError("External repository not found.")

    logger.debug("Project resolved: %s", project_code)
    return replace(
        session,
        project_code=project_code,
        tracker=ctx.config.tracker_for(project_code),
    )


def _check_status(ctx: PulleyContext, session: LandingSession) -> None:
    status = ctx.git.get_status(ctx.cwd)
    logger.debug("Working tree: staged=%s unstaged=%s", status.staged, status.unstaged)

    message = evaluate_status(status, resume=session.resume)
    if message is not None:
        raise LandingError(message)
    ctx.feedback.success("done.")


def _call_with_reauth(
    ctx: PulleyContext, session: LandingSession, call: Callable[[str], T]
) -> tuple[LandingSession, T]:
    """Run a GitLab call, logging in again once if the token is rejected."""
    try:
        return session, call(session.token)
    except GitLabAuthenticationError:
        logger.debug("Token rejected, logging in again")
        ctx.feedback.error("GitLab rejected the access token, please login again.")

    session = replace(session, token=_login(ctx))
    try:
        return session, call(session.token)
    except GitLabAuthenticationError as e:
        raise LandingError(
            "GitLab rejected the new access token as well. "
            "Check that the account can access this project."
        ) from e


def _fetch_merge_request(
    ctx: PulleyContext, session: LandingSession
) -> tuple[LandingSession, MergeRequest]:
    ctx.feedback.info("Getting merge request details...")
    project_code = session.project_code
    mr_id = session.mr_id

    try:
        session, merge_request = _call_with_reauth(
            ctx,
            session,
            lambda token: ctx.gitlab.get_merge_request(project_code, mr_id, token=token),
        )
    except GitLabNotFoundError as e:
        raise LandingError("Merge Request doesn't exist") from e
    except GitLabResponseError as e:
        logger.debug("Malformed merge request: %s", e)
        raise LandingError("Error retrieving merge request from GitLab.") from e
    except GitLabApiError as e:
        raise LandingError(str(e)) from e

    logger.debug(
        "Merge request: source=%s target=%s state=%s closed=%s merged=%s",
        merge_request.source_branch,
        merge_request.target_branch,
        merge_request.state,
        merge_request.closed,
        merge_request.merged,
    )
    ctx.feedback.success("done.")
    return session, merge_request


def check_mergeable(merge_request: MergeRequest) -> None:
    """Reject merge requests that cannot be landed automatically.

    Raises:
        LandingError: closed, already merged, or not automatically mergeable
    """
    if merge_request.closed:
        raise LandingError("Can not merge closed Merge Requests.")
    if merge_request.merged:
        raise LandingError("This Merge Request has already been merged.")
    # TODO: offer a manual-resolution path for requests GitLab can't merge itself
    if not merge_request.is_auto_mergeable:
        raise LandingError("This Merge Request is not automatically mergeable.")


def _raise_unless_ok(result: GitCommandResult) -> None:
    outcome = classify_git_result(result)
    if outcome is GitOutcome.OK:
        return
    if outcome is GitOutcome.NOT_TOPLEVEL:
        raise LandingError("Please call pulley from the toplevel directory of this repo.")
    raise LandingError("Unable to merge.  Please resolve then retry:\n" + result.stderr.strip())


def _prepare_landing_branch(ctx: PulleyContext, target_branch: str, branch: str) -> None:
    """Check out an up to date target branch and create `branch` from it."""
    remote = ctx.config.remote
    _raise_unless_ok(ctx.git.checkout_branch(ctx.cwd, target_branch))
    _raise_unless_ok(ctx.git.pull_branch(ctx.cwd, remote, target_branch))
    _raise_unless_ok(ctx.git.update_submodules(ctx.cwd))

    created = ctx.git.create_branch(ctx.cwd, branch)
    if classify_git_result(created) is GitOutcome.BRANCH_EXISTS:
        # Left over from an earlier attempt at the same merge request
        logger.debug("Branch %s exists, recreating it", branch)
        _raise_unless_ok(ctx.git.delete_branch(ctx.cwd, branch))
        _raise_unless_ok(ctx.git.checkout_branch(ctx.cwd, target_branch))
        created = ctx.git.create_branch(ctx.cwd, branch)
    _raise_unless_ok(created)


def _check_resume_branch(
    ctx: PulleyContext,
    session: LandingSession,
    merge_request: MergeRequest,
    *,
    rerun_command: str,
) -> None:
    """Make sure a resumed landing commits onto the branch that gets pushed.

    A conflict in the squash merge leaves the resolution staged on the target
    branch. A conflict while pulling the source branch leaves it on the landing
    branch instead, and committing there would push an unchanged target.
    """
    target = merge_request.target_branch
    current = ctx.git.get_current_branch(ctx.cwd)
    logger.debug("Resuming on branch %s", current)
    if current == target:
        return

    branch = landing_branch_name(session.mr_id)
    if current == branch:
        raise LandingError(
            f"The conflict was resolved on {branch}, not {target}. Finish it with:\n"
            "  git commit --no-edit\n"
            f"  git checkout {target}\n"
            f"  git merge --no-commit --squash {branch}\n"
            f"then run: {rerun_command}"
        )
    raise LandingError(
        f"Resuming needs {target} checked out, but "
        f"{current if current else 'a detached HEAD'} is. "
        f"Check out {target} with the resolved merge staged, then run: {rerun_command}"
    )


def _merge(
    ctx: PulleyContext,
    session: LandingSession,
    merge_request: MergeRequest,
    *,
    rerun_command: str,
) -> LandingPaused | None:
    check_mergeable(merge_request)

    ctx.feedback.info("Pulling and merging results...")
    branch = landing_branch_name(session.mr_id)
    _prepare_landing_branch(ctx, merge_request.target_branch, branch)

    pulled = ctx.git.pull_branch(ctx.cwd, ctx.config.remote, merge_request.source_branch)
    if classify_git_result(pulled) is GitOutcome.CONFLICT:
        return _pause(session, branch, rerun_command)
    _raise_unless_ok(pulled)

    _raise_unless_ok(ctx.git.checkout_branch(ctx.cwd, merge_request.target_branch))

    merged = ctx.git.merge_squash(ctx.cwd, branch)
    outcome = classify_git_result(merged)
    if outcome is GitOutcome.CONFLICT:
        return _pause(session, branch, rerun_command)
    if outcome is not GitOutcome.OK:
        ctx.feedback.error("Resetting files...")
        ctx.git.reset_hard_orig_head(ctx.cwd)
        _raise_unless_ok(merged)

    ctx.feedback.success("done.")
    return None


def _pause(session: LandingSession, branch: str, rerun_command: str) -> LandingPaused:
    logger.debug("Conflict while merging %s, pausing", branch)
    return LandingPaused(
        mr_id=session.mr_id,
        branch=branch,
        message=f"Merge conflict. Please resolve then run: {rerun_command}",
    )


def _commit(
    ctx: PulleyContext, session: LandingSession, merge_request: MergeRequest
) -> tuple[LandingSession, str]:
    ctx.feedback.info("Getting author and committing changes...")
    project_code = session.project_code
    mr_id = session.mr_id

    try:
        session, commits = _call_with_reauth(
            ctx,
            session,
            lambda token: ctx.gitlab.get_merge_request_commits(project_code, mr_id, token=token),
        )
    except GitLabNotFoundError as e:
        raise LandingError("Merge Request doesn't exist") from e
    except GitLabResponseError as e:
        logger.debug("Malformed commit list: %s", e)
        raise LandingError("Error retrieving merge request commits from GitLab.") from e
    except GitLabApiError as e:
        raise LandingError(str(e)) from e

    message = build_commit_message(
        session.mr_id,
        merge_request.title,
        [commit.title for commit in commits],
        session.tracker,
    )
    author = commits[0].author_name if commits else None

    head_before = ctx.git.get_head(ctx.cwd)
    returncode = ctx.git.commit_all(
        ctx.cwd, message, author=author, edit=ctx.config.interactive
    )
    head_after = ctx.git.get_head(ctx.cwd)
    logger.debug("git commit exit=%d head %s -> %s", returncode, head_before, head_after)

    if head_after is None or head_after == head_before:
        raise LandingError("No commit, aborting push.")
    return session, head_after


def _push(ctx: PulleyContext, merge_request: MergeRequest) -> None:
    remote = ctx.config.remote
    result = ctx.git.push_branch(ctx.cwd, remote, merge_request.target_branch)
    if not result.succeeded:
        raise LandingError(
            result.stderr.strip() or f"git push {remote} {merge_request.target_branch} failed"
        )
    ctx.feedback.success("done.")
