"""Shared fixtures for gitpr tests."""

from datetime import datetime, timezone
from io import StringIO
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from gitpr.config.schema import SessionContext
from gitpr.git import Git
from gitpr.github import GitHubClient
from gitpr.models import PullRequestDetail, PullRequestSummary
from gitpr.orchestrator import PullRequestOrchestrator
from gitpr.ui import TerminalUI


@pytest.fixture
def context():
    return SessionContext(
        username="alice",
        token="ghp_test",
        owner="acme",
        repo="widgets",
        branch_prefix="pr-",
    )


@pytest.fixture
def console():
    return Console(file=StringIO(), width=160, force_terminal=False, color_system=None)


@pytest.fixture
def ui(console):
    terminal = TerminalUI(console)
    terminal.open_browser = MagicMock(return_value=True)
    return terminal


@pytest.fixture
def hosting():
    return MagicMock(spec=GitHubClient)


@pytest.fixture
def git():
    mock = MagicMock(spec=Git)
    mock.get_current_branch.return_value = "feature-x"
    mock.get_last_commit_message.return_value = "Add the x feature"
    mock.get_default_branch.return_value = "main"
    return mock


@pytest.fixture
def orchestrator(context, hosting, git, ui):
    return PullRequestOrchestrator(context=context, hosting=hosting, git=git, ui=ui)


@pytest.fixture
def detail():
    return PullRequestDetail(
        number=42,
        head_ref="feature-x",
        ssh_url="git@github.com:acme/widgets.git",
        clone_url="https://github.com/acme/widgets.git",
    )


@pytest.fixture
def make_summary():
    def _make(number: int, title: str = "A change", author: str = "bob") -> PullRequestSummary:
        return PullRequestSummary(
            number=number,
            author=author,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            state="open",
            title=title,
        )
    return _make
