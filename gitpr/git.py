"""Local git operations used by gitpr.

Every call shells out to the git executable in the configured checkout.
Failures are raised as GitError carrying git's stderr.
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import GitError

logger = logging.getLogger(__name__)

ORIGIN_HEAD_PREFIX = "refs/remotes/origin/"


class Git:
    """Thin wrapper around the git command line for one checkout."""

    def __init__(self, repo_path: str = ".", executable: str = "git"):
        """Initialize the wrapper.

        Args:
            repo_path: Path to the local git checkout
            executable: git binary to run
        """
        self.repo_path = Path(repo_path).resolve()
        self.executable = executable

    def _run(self, args: List[str], timeout: Optional[int] = None) -> str:
        """Run git with the given arguments and return its stripped stdout.

        Raises:
            GitError: If git is missing, times out, or exits non-zero
        """
        logger.debug("Running git %s in %s", " ".join(args), self.repo_path)
        try:
            result = subprocess.run(
                [self.executable] + args,
                cwd=str(self.repo_path),
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            raise GitError(args, f"{self.executable} executable not found")
        except subprocess.TimeoutExpired:
            raise GitError(args, f"timed out after {timeout} seconds")

        if result.returncode != 0:
            logger.warning("git %s exited with %d", " ".join(args), result.returncode)
            raise GitError(args, result.stderr)

        return result.stdout.strip()

    def fetch(self, remote_url: str, remote_branch: str, local_branch: str) -> None:
        """Fetch a branch from any remote URL into a new local branch."""
        self._run(["fetch", remote_url, f"{remote_branch}:{local_branch}"])

    def checkout(self, branch: str) -> None:
        self._run(["checkout", branch])

    def push(self, branch: str, remote: str = "origin") -> None:
        """Push a branch and set its upstream."""
        self._run(["push", "--set-upstream", remote, branch])

    def get_current_branch(self) -> str:
        return self._run(["rev-parse", "--abbrev-ref", "HEAD"])

    def get_last_commit_message(self) -> str:
        """Subject line of the last commit on the current branch."""
        return self._run(["log", "-1", "--pretty=%s"])

    def get_default_branch(self) -> str:
        """Name of the branch origin/HEAD points at (e.g. 'main').

        Raises:
            GitError: If origin/HEAD is not set (run 'git remote set-head origin -a')
        """
        ref = self._run(["symbolic-ref", "refs/remotes/origin/HEAD"])
        if ref.startswith(ORIGIN_HEAD_PREFIX):
            return ref[len(ORIGIN_HEAD_PREFIX):]
        return ref.rsplit("/", 1)[-1]

    def get_remote_url(self, remote: str = "origin") -> str:
        return self._run(["remote", "get-url", remote], timeout=10)

    def get_repo_info(self, remote: str = "origin") -> Tuple[str, str]:
        """Get GitHub repository owner and name from a remote URL.

        Returns:
            Tuple of (owner, repo_name)

        Raises:
            GitError: If the remote is missing or is not a GitHub URL
        """
        url = self.get_remote_url(remote)
        try:
            return parse_github_url(url)
        except ValueError as e:
            raise GitError(["remote", "get-url", remote], str(e))


def parse_github_url(url: str) -> Tuple[str, str]:
    """Parse a GitHub URL to extract owner and repo name.

    Handles both HTTPS and SSH formats:
    - https://github.com/owner/repo.git
    - https://github.com/owner/repo
    - git@github.com:owner/repo.git
    - ssh://git@github.com/owner/repo.git

    Args:
        url: GitHub remote URL

    Returns:
        Tuple of (owner, repo_name)

    Raises:
        ValueError: If URL cannot be parsed
    """
    url = url.strip().rstrip("/")
    if url.endswith(".git"):
        url = url[:-4]

    patterns = [
        r"git@github\.com:([^/]+)/(.+)",
        r"ssh://git@github\.com/([^/]+)/(.+)",
        r"https?://github\.com/([^/]+)/(.+)",
        # HTTPS with token: https://token@github.com/owner/repo
        r"https?://[^@]+@github\.com/([^/]+)/(.+)",
    ]
    for pattern in patterns:
        match = re.match(pattern, url)
        if match:
            return match.group(1), match.group(2)

    raise ValueError(f"Could not parse GitHub URL: {url}")
