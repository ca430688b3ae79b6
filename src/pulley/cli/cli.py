import logging
import os
from pathlib import Path
from typing import NoReturn

import click

from pulley.cli.config import ConfigError, default_config_path, load_config
from pulley.cli.output import user_output
from pulley.core.context import PulleyContext, create_context
from pulley.core.landing import (
    LandingError,
    LandingPaused,
    LandingSession,
    land_merge_request,
)

logger = logging.getLogger(__name__)

# Enable debug logging if PULLEY_DEBUG environment variable is set
if os.getenv("PULLEY_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def _fail(message: str) -> NoReturn:
    user_output(click.style("Error: ", fg="red") + message)
    raise SystemExit(1)


@click.command("pulley", context_settings=CONTEXT_SETTINGS)
@click.argument("mr_id", required=False, default="")
@click.argument("resume_marker", required=False)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of ./pulley-gitlab.json.",
)
@click.version_option(package_name="pulley-gitlab")
@click.pass_context
def cli(click_ctx: click.Context, mr_id: str, resume_marker: str | None, config_path: Path | None):
    """Land GitLab merge request MR_ID into the current repository and push it.

    The merge request is squash-merged into its target branch, committed with
    a message that links referenced issues, and pushed to the configured remote.

    If the merge stops on conflicts, resolve them, stage the result and run
    the same command again with any second argument:

        pulley 42 done
    """
    # Only create context if not already provided (e.g., by tests)
    if click_ctx.obj is None:
        cwd = Path.cwd()
        try:
            config = load_config(config_path if config_path else default_config_path(cwd))
        except ConfigError as e:
            _fail(str(e))
        click_ctx.obj = create_context(config, cwd=cwd)

    ctx: PulleyContext = click_ctx.obj
    session = LandingSession(mr_id=mr_id.strip(), resume=resume_marker is not None)

    rerun_command = f"{click_ctx.command_path} {session.mr_id} done"
    if config_path:
        rerun_command += f" --config {config_path}"

    try:
        result = land_merge_request(ctx, session, rerun_command=rerun_command)
    except LandingError as e:
        logger.debug("Landing failed", exc_info=True)
        _fail(e.message)
    except FileNotFoundError as e:
        _fail(f"Command not found: {e.filename}\n\nInstall git and make sure it is on PATH.")
    except RuntimeError as e:
        # git commands that must succeed raise RuntimeError with full context
        _fail(str(e))

    if isinstance(result, LandingPaused):
        user_output(click.style(result.message, fg="yellow"))
        return

    user_output(
        click.style("✓", fg="green")
        + f" Landed merge request !{result.mr_id} on {result.target_branch}"
        + click.style(f" ({result.commit_sha[:8]})", dim=True)
    )


def main() -> None:
    """CLI entry point used by the `pulley` console script."""
    cli()
