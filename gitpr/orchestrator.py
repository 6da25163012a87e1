"""Pull request workflows: list, fetch for review, comment, and open.

Each public operation catches GitPRError itself, reports it on the terminal
and returns a failed OperationResult; none of them raises for an expected
failure.
"""

import logging
from typing import List

from rich.markup import escape

from .config.schema import SessionContext
from .errors import GitError, GitPRError, MissingRemoteError
from .git import Git
from .github import GitHubClient, pull_request_url
from .models import (
    OperationResult,
    PullRequestCreationRequest,
    PullRequestDetail,
    PullRequestSummary,
    ResolvedPullRequest,
)
from .ui import TerminalUI

logger = logging.getLogger(__name__)


def head_reference(username: str, branch: str) -> str:
    """Build the "user:branch" head a pull request is opened from.

    Raises:
        ValueError: If the branch name itself contains a colon
    """
    if ":" in branch:
        raise ValueError(f"Branch name may not contain ':': {branch}")
    return f"{username}:{branch}"


def review_branch_name(prefix: str, pull_number: int) -> str:
    return f"{prefix}{pull_number}"


def select_remote_url(detail: PullRequestDetail, ssh: bool) -> str:
    """Pick the URL to fetch a pull request's head branch from.

    Raises:
        MissingRemoteError: If the head repository no longer exists
    """
    url = detail.ssh_url if ssh and detail.ssh_url else detail.clone_url
    if not url:
        raise MissingRemoteError(
            f"Pull request #{detail.number} has no head repository to fetch from "
            "(it may have been deleted)"
        )
    return url


def resolve_creation_request(
    request: PullRequestCreationRequest,
    context: SessionContext,
    git: Git,
) -> ResolvedPullRequest:
    """Fill every missing field of a creation request.

    The head is always the current branch. Only fields left as None are
    looked up, in this order: title, repo, owner, base.

    Raises:
        GitError: If any of the git lookups fails or HEAD is detached
    """
    head = git.get_current_branch()
    if head == "HEAD":
        raise GitError(["rev-parse", "--abbrev-ref", "HEAD"], "HEAD is detached; check out a branch first")
    title = request.title or git.get_last_commit_message()
    repo = request.repo or context.repo
    owner = request.owner or context.owner
    base = request.base or git.get_default_branch()
    return ResolvedPullRequest(head=head, title=title, base=base, owner=owner, repo=repo)


class PullRequestOrchestrator:
    """Runs the pull request workflows against GitHub and the local checkout."""

    def __init__(
        self,
        context: SessionContext,
        hosting: GitHubClient,
        git: Git,
        ui: TerminalUI,
    ):
        """Initialize the orchestrator.

        Args:
            context: Read-only session settings
            hosting: GitHub API client
            git: Local checkout
            ui: Terminal output
        """
        self.context = context
        self.hosting = hosting
        self.git = git
        self.ui = ui

    def list_open_pull_requests(self, render_table: bool = True) -> OperationResult:
        """List open pull requests on the configured repository.

        Args:
            render_table: Print the pull requests as a table

        Returns:
            OperationResult whose data is the list of PullRequestSummary
        """
        ctx = self.context
        with self.ui.spinner(f"Listing open pull requests on [green]{ctx.full_name}[/green]") as spin:
            try:
                pulls: List[PullRequestSummary] = self.hosting.list_pull_requests(ctx.owner, ctx.repo)
            except GitPRError as e:
                spin.warn(str(e))
                return OperationResult.failed(str(e))

            if not pulls:
                spin.warn("No pull requests found")
                return OperationResult.ok("No pull requests found", data=[])

            spin.succeed()

        if render_table:
            self.ui.render_pull_requests(pulls)
        return OperationResult.ok(f"{len(pulls)} open pull request(s)", data=pulls)

    def fetch_pull_request_for_review(self, pull_number: int) -> OperationResult:
        """Fetch a pull request into a local branch, announce the review, and check it out.

        Returns:
            OperationResult whose data is the local branch name
        """
        ctx = self.context
        with self.ui.spinner(f"Fetching pull request #{pull_number} on [green]{ctx.full_name}[/green]") as spin:
            try:
                detail = self.hosting.get_pull_request(ctx.owner, ctx.repo, pull_number)
                local_branch = review_branch_name(ctx.branch_prefix, detail.number)
                remote_url = select_remote_url(detail, ctx.ssh)

                spin.update(f"Fetching {detail.head_ref} into {local_branch}")
                self.git.fetch(remote_url, detail.head_ref, local_branch)
                self._post_review_comment(detail.number)
                self.git.checkout(local_branch)
            except GitPRError as e:
                spin.warn(str(e))
                return OperationResult.failed(str(e))

            message = f"Checked out #{detail.number} as {local_branch}"
            spin.succeed(message)
        return OperationResult.ok(message, data=local_branch)

    def _post_review_comment(self, issue_number: int) -> str:
        ctx = self.context
        body = ctx.comment_body
        self.hosting.create_comment(ctx.owner, ctx.repo, issue_number, body)
        self.ui.info(f"Added comment: [blue]{escape(body)}[/blue]")
        return body

    def create_comment(self, issue_number: int) -> OperationResult:
        """Post the review signature on a pull request.

        Returns:
            OperationResult whose data is the comment body
        """
        try:
            body = self._post_review_comment(issue_number)
        except GitPRError as e:
            self.ui.error(str(e))
            return OperationResult.failed(str(e))
        return OperationResult.ok(f"Added comment: {body}", data=body)

    def open_pull_request_direct(self, title: str, head_branch: str, base_branch: str) -> OperationResult:
        """Open a pull request from an explicit branch and open it in the browser.

        Returns:
            OperationResult whose data is the new pull request number
        """
        ctx = self.context
        try:
            head = head_reference(ctx.username, head_branch)
            number = self.hosting.create_pull_request(
                ctx.owner, ctx.repo, head=head, base=base_branch, title=title
            )
        except (GitPRError, ValueError) as e:
            message = f"Error sending pull request: {e}"
            self.ui.error(message)
            return OperationResult.failed(message)

        self.ui.info(f"Pull request sent to: [green]{ctx.full_name}[/green]")
        self.ui.open_browser(pull_request_url(ctx.owner, ctx.repo, number))
        return OperationResult.ok(f"Pull request sent to: {ctx.full_name}", data=number)

    def create_pull_request_from_current_branch(self, request: PullRequestCreationRequest) -> OperationResult:
        """Push the current branch and open a pull request for it.

        Missing fields in the request are filled by resolve_creation_request.

        Returns:
            OperationResult whose data is the new pull request number
        """
        try:
            resolved = resolve_creation_request(request, self.context, self.git)
            head = head_reference(self.context.username, resolved.head)
        except (GitPRError, ValueError) as e:
            self.ui.error(str(e))
            return OperationResult.failed(str(e))

        logger.debug("Resolved pull request: %s", resolved)
        with self.ui.spinner(f"Creating pull request on [green]{resolved.full_name}[/green]") as spin:
            try:
                self.git.push(resolved.head)
                number = self.hosting.create_pull_request(
                    resolved.owner,
                    resolved.repo,
                    head=head,
                    base=resolved.base,
                    title=resolved.title,
                )
            except GitPRError as e:
                message = f"Error sending pull request: {e}"
                spin.warn(message)
                return OperationResult.failed(message)

            spin.succeed(f"Pull request sent to: [green]{resolved.full_name}[/green]")
        self.ui.open_browser(pull_request_url(resolved.owner, resolved.repo, number))
        return OperationResult.ok(f"Pull request sent to: {resolved.full_name}", data=number)
