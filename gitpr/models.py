"""Value objects passed between the orchestrator and its collaborators."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class PullRequestSummary:
    """One open pull request as shown in a listing."""
    number: int
    author: str
    created_at: datetime
    state: str
    title: str
    html_url: str = ""


@dataclass
class PullRequestDetail:
    """The parts of a single pull request needed to check it out locally.

    Attributes:
        number: Pull request number
        head_ref: Branch name on the head repository
        ssh_url: SSH clone URL of the head repository (None if it was deleted)
        clone_url: HTTPS clone URL of the head repository
        html_url: Web page of the pull request
    """
    number: int
    head_ref: str
    ssh_url: Optional[str] = None
    clone_url: Optional[str] = None
    html_url: str = ""


@dataclass
class PullRequestCreationRequest:
    """Fields a caller may supply when opening a pull request from the current branch.

    Anything left as None is filled in before the request is submitted.
    """
    title: Optional[str] = None
    base: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None


@dataclass(frozen=True)
class ResolvedPullRequest:
    """A creation request with every field filled in."""
    head: str
    title: str
    base: str
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class OperationResult:
    """Outcome of one orchestrator operation.

    Attributes:
        success: Whether the operation completed
        message: Text that was reported to the user
        data: Operation payload (listing, created PR number, ...)
        error: Error message if the operation failed
    """
    success: bool
    message: str = ""
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str = "", data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failed(cls, error: str) -> "OperationResult":
        return cls(success=False, message=error, error=error)

