"""CLI entry point for gitpr."""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import load_session_context
from .config.schema import SessionContext
from .errors import GitPRError
from .git import Git
from .github import GitHubClient
from .models import OperationResult, PullRequestCreationRequest
from .orchestrator import PullRequestOrchestrator
from .ui import TerminalUI


class AppState:
    """Per-invocation objects shared by the subcommands."""

    def __init__(self, config_path: Optional[str], overrides: dict, path: str):
        self.config_path = Path(config_path).expanduser() if config_path else None
        self.overrides = overrides
        self.git = Git(path)
        self.ui = TerminalUI(Console())
        self._context: Optional[SessionContext] = None

    def context(self) -> SessionContext:
        if self._context is None:
            self._context = load_session_context(
                config_path=self.config_path,
                cli_options=self.overrides,
                repo_info=self.git.get_repo_info,
                lookup_username=lambda token: GitHubClient(token).get_authenticated_login(),
            )
        return self._context

    def orchestrator(self) -> PullRequestOrchestrator:
        context = self.context()
        return PullRequestOrchestrator(
            context=context,
            hosting=GitHubClient(context.token),
            git=self.git,
            ui=self.ui,
        )


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str) -> None:
    click.echo(click.style("Error: ", fg="red", bold=True) + message, err=True)
    sys.exit(1)


def _run(state: AppState, operation: Callable[[PullRequestOrchestrator], OperationResult]) -> OperationResult:
    """Build the orchestrator, run one operation, and exit 1 if it failed."""
    try:
        orchestrator = state.orchestrator()
    except GitPRError as e:
        _fail(str(e))

    result = operation(orchestrator)
    if not result.success:
        sys.exit(1)
    return result


@click.group()
@click.version_option(version=__version__, prog_name="gitpr")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="GITPR_CONFIG",
    help="Path to the YAML config file (default: ~/.config/gitpr/config.yaml)",
)
@click.option("--owner", "-o", help="Repository owner (overrides config)")
@click.option("--repo", "-r", help="Repository name (overrides config)")
@click.option(
    "--ssh/--https",
    default=None,
    help="Fetch review branches over SSH or HTTPS (overrides config)",
)
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Path to the local git checkout",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(ctx, config_path: Optional[str], owner: Optional[str], repo: Optional[str],
        ssh: Optional[bool], path: str, verbose: bool):
    """gitpr - Manage GitHub pull requests from your local checkout.

    \b
    Example:
        gitpr list
        gitpr fetch 42
        gitpr create --title "Fix the thing"
    """
    _setup_logging(verbose)
    ctx.obj = AppState(
        config_path=config_path,
        overrides={"owner": owner, "repo": repo, "ssh": ssh},
        path=path,
    )


@cli.command("list")
@click.option(
    "--table/--no-table",
    default=True,
    help="Print the pull requests as a table",
)
@click.pass_obj
def list_command(state: AppState, table: bool):
    """List open pull requests on the repository."""
    _run(state, lambda o: o.list_open_pull_requests(table))


@cli.command()
@click.argument("pull_number", type=click.IntRange(min=0))
@click.pass_obj
def fetch(state: AppState, pull_number: int):
    """Fetch a pull request into a local branch and start reviewing it.

    The branch is named after the configured prefix and the pull request
    number, a review comment is posted, and the branch is checked out.

    \b
    Example:
        gitpr fetch 42          # creates and checks out pr-42
        gitpr --ssh fetch 42
    """
    _run(state, lambda o: o.fetch_pull_request_for_review(pull_number))


@cli.command()
@click.argument("issue_number", type=click.IntRange(min=1))
@click.pass_obj
def comment(state: AppState, issue_number: int):
    """Post the review signature on a pull request."""
    _run(state, lambda o: o.create_comment(issue_number))


@cli.command("open")
@click.option("--title", "-t", required=True, help="Pull request title")
@click.option("--head", "head_branch", required=True, help="Branch with your changes")
@click.option("--base", "base_branch", required=True, help="Branch to merge into")
@click.pass_obj
def open_command(state: AppState, title: str, head_branch: str, base_branch: str):
    """Open a pull request from one of your branches."""
    _run(state, lambda o: o.open_pull_request_direct(title, head_branch, base_branch))


@cli.command()
@click.option("--title", "-t", help="Pull request title (default: last commit message)")
@click.option("--base", "-b", help="Branch to merge into (default: repository default branch)")
@click.option("--owner", "-o", help="Owner of the target repository")
@click.option("--repo", "-r", help="Name of the target repository")
@click.pass_obj
def create(state: AppState, title: Optional[str], base: Optional[str],
           owner: Optional[str], repo: Optional[str]):
    """Push the current branch and open a pull request for it.

    \b
    Example:
        gitpr create
        gitpr create --title "Add retries" --base develop
        gitpr create --owner upstream-org --repo widgets
    """
    request = PullRequestCreationRequest(title=title, base=base, owner=owner, repo=repo)
    _run(state, lambda o: o.create_pull_request_from_current_branch(request))


@cli.command("config")
@click.pass_obj
def config_command(state: AppState):
    """Show the resolved settings (token redacted)."""
    try:
        context = state.context()
    except GitPRError as e:
        _fail(str(e))

    for key, value in context.redacted().items():
        click.echo(f"{click.style(key, fg='cyan')}: {value}")


main = cli


if __name__ == "__main__":
    cli()
