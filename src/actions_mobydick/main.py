"""CLI entrypoint for actions-mobydick."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import rich_click as click

from actions_mobydick import __version__
from actions_mobydick.action.controllers import (
    ActionCliController,
    DistributeCommand,
    ListCommand,
)
from actions_mobydick.config import LOG_LEVELS
from actions_mobydick.errors import MobydickError

click.rich_click.USE_MARKDOWN = True
CommandT = TypeVar("CommandT", DistributeCommand, ListCommand)
ACTION_CONTROLLER = ActionCliController()


@dataclass(slots=True)
class GlobalOptions:
    """Options shared by every subcommand."""

    organisation: str
    token: str


@click.group()
@click.version_option(version=__version__, prog_name="action")
@click.option(
    "--organisation",
    required=True,
    envvar="MOBYDICK_ORGANISATION",
    help="Name of organisation in GitHub.",
)
@click.option(
    "--token",
    required=True,
    envvar="MOBYDICK_TOKEN",
    help="Token used for authenticating with GitHub.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar="MOBYDICK_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    help="Logging level for per-repository progress lines.",
)
@click.pass_context
def action(ctx: click.Context, organisation: str, token: str, log_level: str) -> None:
    """Command-line interface to manage this GitHub Action."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = GlobalOptions(organisation=organisation, token=token)


@action.command("distribute")
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="Number of repositories processed in parallel.",
)
@click.option(
    "--file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("mobydick.yaml"),
    show_default=True,
    help="Workflow template committed to .github/workflows/<basename>.",
)
@click.option(
    "--version",
    default="v1.0.0",
    show_default=True,
    help="Version rendered into the workflow template.",
)
@click.option(
    "--private/--all",
    "private",
    default=False,
    show_default=True,
    help="Only distribute GitHub Action to private repositories.",
)
@click.option(
    "--dry-run/--no-dry-run",
    default=False,
    show_default=True,
    help="Report target repositories without committing anything.",
)
@click.pass_obj
def distribute(  # noqa: PLR0913
    options: GlobalOptions,
    concurrency: int,
    file: Path,
    version: str,
    private: bool,
    dry_run: bool,
) -> None:
    """Distribute this GitHub Action to all repositories in the organisation."""

    _emit_lines(
        _run(
            ACTION_CONTROLLER.distribute,
            DistributeCommand(
                organisation=options.organisation,
                token=options.token,
                concurrency=concurrency,
                file=file,
                version=version,
                private=private,
                dry_run=dry_run,
            ),
        ),
    )


@action.command("list")
@click.option(
    "--private/--all",
    "private",
    default=False,
    show_default=True,
    help="Only list private repositories.",
)
@click.pass_obj
def list_repositories(options: GlobalOptions, private: bool) -> None:
    """List repositories the action would be distributed to."""

    _emit_lines(
        _run(
            ACTION_CONTROLLER.list_repositories,
            ListCommand(
                organisation=options.organisation,
                token=options.token,
                private=private,
            ),
        ),
    )


def _run(handler: Callable[[CommandT], list[str]], command: CommandT) -> list[str]:
    try:
        return handler(command)
    except MobydickError as error:
        raise click.ClickException(str(error)) from error


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    action()
