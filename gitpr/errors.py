"""Exceptions raised by gitpr collaborators."""

from typing import Optional


class GitPRError(Exception):
    """Base class for every error gitpr reports to the user."""
    pass


class ConfigError(GitPRError):
    """Configuration could not be loaded or is invalid."""
    pass


class HostingError(GitPRError):
    """GitHub API call failed.

    Attributes:
        status: HTTP status returned by the API, if any
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class GitError(GitPRError):
    """A git command exited with an error.

    Attributes:
        command: The git arguments that were run
        stderr: Whatever git wrote to stderr
    """

    def __init__(self, command: list, stderr: str = ""):
        self.command = list(command)
        self.stderr = stderr.strip()
        detail = self.stderr or "command failed"
        super().__init__(f"git {' '.join(self.command)}: {detail}")


class MissingRemoteError(GitPRError):
    """The pull request's head repository has no usable clone URL."""
    pass
