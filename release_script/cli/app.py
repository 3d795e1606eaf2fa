from __future__ import annotations

import os

import typer

from release_script import __version__
from release_script.cli.context import build_context
from release_script.cli.helpers import exit_on_error, exit_with_code
from release_script.core.config import ReleaseOptions
from release_script.core.errors import ErrorCode
from release_script.git.repository import Repository
from release_script.platform.http import RealHttpClient
from release_script.release.model import DOCS_PREID, ReleaseConfig
from release_script.services.changelog import detect_changelog_capability
from release_script.services.gateway import ExecutionGateway
from release_script.services.host import TOKEN_ENV
from release_script.services.orchestrator import ReleaseOrchestrator

EPILOG = """\
Examples:

  release-script minor --preid beta   Release with minor version bump with pre-release tag

  release-script major                Release with major version bump

  release-script major --dry-run      Release dry run with major version bump

  release-script --preid beta         Release same version with pre-release bump
"""

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


def make_config(
    *,
    options: ReleaseOptions,
    bump: str | None,
    preid: str | None,
    tag: str | None,
    only_docs: bool,
    dry_run: bool,
    run: bool,
    verbose: bool,
    notes: str | None,
    skip_tests: bool,
    skip_version_bumping: bool,
) -> ReleaseConfig:
    """Combine command-line flags with the project's release options."""
    return ReleaseConfig(
        bump=bump,
        preid=DOCS_PREID if only_docs else preid,
        tag=tag,
        dry_run=dry_run or (options.default_dry_run and not run),
        verbose=verbose,
        only_docs=only_docs,
        skip_tests=skip_tests,
        skip_build=options.skip_build_step,
        skip_version_bump=skip_version_bumping,
        notes=notes,
    )


@app.command(epilog=EPILOG)
def release(
    ctx: typer.Context,
    bump: str | None = typer.Argument(
        None,
        help="patch, minor, major, or an explicit version (e.g. 2.0.0)",
        show_default=False,
    ),
    preid: str | None = typer.Option(None, "--preid", help="Pre-release identifier (e.g. beta)."),
    tag: str | None = typer.Option(None, "--tag", help="npm dist-tag to publish under."),
    only_docs: bool = typer.Option(
        False, "--only-docs", "--docs", help="Release and publish documentation only."
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Do not commit, tag, push, or publish anything; print the plan instead.",
    ),
    run: bool = typer.Option(
        False, "--run", help="Execute for real when the project sets defaultDryRun."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Echo commands and their output."),
    notes: str | None = typer.Option(None, "--notes", help="Release notes for the tag."),
    skip_tests: bool = typer.Option(False, "--skip-tests", help="Do not run the test script."),
    skip_version_bumping: bool = typer.Option(
        False, "--skip-version-bumping", help="Release the current version as is."
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Bump the version, tag, and publish a release of the package in the current directory."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    if preid is not None and not preid.strip():
        preid = None

    if bump is None and preid is None and not only_docs and not skip_version_bumping:
        typer.echo("error: must provide either a version bump type, preid (or both)", err=True)
        typer.echo(ctx.get_help(), err=True)
        exit_with_code(int(ErrorCode.FAILURE))

    cli = build_context()
    console = cli.console

    config = make_config(
        options=cli.options,
        bump=bump,
        preid=preid,
        tag=tag,
        only_docs=only_docs,
        dry_run=dry_run,
        run=run,
        verbose=verbose,
        notes=notes,
        skip_tests=skip_tests,
        skip_version_bumping=skip_version_bumping,
    )
    changelog_enabled = exit_on_error(detect_changelog_capability(cli.manifest), console)

    gateway = ExecutionGateway(
        root=cli.repo_root,
        mode=config.mode,
        console=console,
        verbose=config.verbose,
    )
    orchestrator = ReleaseOrchestrator(
        repo_root=cli.repo_root,
        config=config,
        options=cli.options,
        manifest=cli.manifest,
        console=console,
        gateway=gateway,
        repository=Repository(cli.repo_root),
        http_client=RealHttpClient(user_agent=f"release-script/{__version__}"),
        changelog_enabled=changelog_enabled,
        github_token=os.environ.get(TOKEN_ENV) or None,
    )
    exit_on_error(orchestrator.run(), console)


def main() -> None:
    app()
