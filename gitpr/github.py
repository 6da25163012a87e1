"""GitHub API access for gitpr, built on PyGithub."""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import requests
from github import Auth, Github, GithubException

from .errors import HostingError
from .models import PullRequestDetail, PullRequestSummary

logger = logging.getLogger(__name__)

GITHUB_WEB_URL = "https://github.com"


def pull_request_url(owner: str, repo: str, number: int) -> str:
    """Web page of a pull request."""
    return f"{GITHUB_WEB_URL}/{owner}/{repo}/pull/{number}"


def _error_message(e: GithubException) -> str:
    data = e.data if isinstance(e.data, dict) else {}
    message = data.get("message") or str(e)
    # 422 responses carry the actual reason in "errors"
    details = [
        err.get("message") for err in data.get("errors", [])
        if isinstance(err, dict) and err.get("message")
    ]
    if details:
        message = f"{message}: {'; '.join(details)}"
    return message


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    """Re-raise PyGithub and transport failures as HostingError."""
    try:
        yield
    except GithubException as e:
        logger.warning("GitHub API error while %s: %s", action, e.status)
        raise HostingError(f"Failed {action}: {_error_message(e)}", status=e.status)
    except requests.RequestException as e:
        logger.warning("Connection error while %s: %s", action, e)
        raise HostingError(f"Failed {action}: connection error: {e}")


class GitHubClient:
    """Pull request and comment operations against the GitHub REST API."""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None, github: Optional[Github] = None):
        """Initialize the client.

        Args:
            token: GitHub personal access token (anonymous access if None)
            base_url: API root for GitHub Enterprise installations
            github: Preconfigured Github instance, mainly for tests
        """
        if github is None:
            kwargs = {}
            if token:
                kwargs["auth"] = Auth.Token(token)
            if base_url:
                kwargs["base_url"] = base_url
            github = Github(**kwargs)
        self.github = github

    def _repo(self, owner: str, repo: str):
        return self.github.get_repo(f"{owner}/{repo}")

    def get_authenticated_login(self) -> str:
        with _translate_errors("reading the authenticated user"):
            return self.github.get_user().login

    def list_pull_requests(self, owner: str, repo: str) -> List[PullRequestSummary]:
        """List open pull requests, newest first."""
        logger.debug("Listing open pull requests on %s/%s", owner, repo)
        with _translate_errors(f"listing pull requests on {owner}/{repo}"):
            return [
                PullRequestSummary(
                    number=pr.number,
                    author=pr.user.login if pr.user else "ghost",
                    created_at=pr.created_at,
                    state=pr.state,
                    title=pr.title,
                    html_url=pr.html_url,
                )
                for pr in self._repo(owner, repo).get_pulls(state="open")
            ]

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestDetail:
        logger.debug("Getting pull request %s/%s#%d", owner, repo, number)
        with _translate_errors(f"getting pull request #{number}"):
            pr = self._repo(owner, repo).get_pull(number)
            head_repo = pr.head.repo
            return PullRequestDetail(
                number=pr.number,
                head_ref=pr.head.ref,
                ssh_url=head_repo.ssh_url if head_repo else None,
                clone_url=head_repo.clone_url if head_repo else None,
                html_url=pr.html_url,
            )

    def create_comment(self, owner: str, repo: str, issue_number: int, body: str) -> None:
        """Post a comment on an issue or pull request conversation."""
        logger.debug("Commenting on %s/%s#%d", owner, repo, issue_number)
        with _translate_errors(f"commenting on #{issue_number}"):
            self._repo(owner, repo).get_issue(issue_number).create_comment(body)

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        head: str,
        base: str,
        title: str,
        body: str = "",
        draft: bool = False,
    ) -> int:
        """Open a pull request and return its number.

        Args:
            owner: Owner of the target repository
            repo: Name of the target repository
            head: Source branch as "user:branch"
            base: Branch to merge into
            title: Pull request title
            body: Pull request description
            draft: Open as a draft

        Returns:
            Number of the new pull request
        """
        logger.debug("Creating pull request %s -> %s/%s:%s", head, owner, repo, base)
        with _translate_errors(f"creating pull request on {owner}/{repo}"):
            pr = self._repo(owner, repo).create_pull(
                title=title,
                body=body,
                head=head,
                base=base,
                draft=draft,
            )
            return pr.number
