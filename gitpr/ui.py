"""Terminal output: spinners, the pull request table, and the browser."""

import webbrowser
from datetime import datetime, timezone
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import PullRequestSummary

TABLE_COLUMNS = ["#", "Author", "Opened", "Status", "Title"]


def format_duration(seconds: int) -> str:
    """Format seconds as human-readable duration."""
    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    elif seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''}"
    elif seconds < 86400 * 30:
        days = seconds // 86400
        return f"{days} day{'s' if days != 1 else ''}"
    elif seconds < 86400 * 365:
        months = seconds // (86400 * 30)
        return f"{months} month{'s' if months != 1 else ''}"
    else:
        years = seconds // (86400 * 365)
        return f"{years} year{'s' if years != 1 else ''}"


def time_from_now(moment: datetime, now: Optional[datetime] = None) -> str:
    """Describe a past moment relative to now, e.g. '3 days ago'.

    Naive datetimes are taken to be UTC, as PyGithub returned them before 2.0.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - moment).total_seconds())
    if seconds < 0:
        return "in the future"
    if seconds < 45:
        return "just now"
    return f"{format_duration(seconds)} ago"


class Spinner:
    """Progress indicator that ends in a success or warning line.

    Use it as a context manager so the live display is stopped even when
    the wrapped call raises something unexpected.
    """

    def __init__(self, console: Console, text: str):
        self.console = console
        self.text = text
        self._status = console.status(text, spinner="dots", spinner_style="green")
        self._running = False

    def start(self) -> "Spinner":
        self._status.start()
        self._running = True
        return self

    def update(self, text: str) -> None:
        self.text = text
        self._status.update(text)

    def _stop(self, text: Optional[str]) -> str:
        if self._running:
            self._status.stop()
            self._running = False
        if text is not None:
            self.text = text
        return self.text

    def __enter__(self) -> "Spinner":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._stop(None)
        return False

    def succeed(self, text: Optional[str] = None) -> None:
        self.console.print(f"[green]✔[/green] {self._stop(text)}")

    def warn(self, text: Optional[str] = None) -> None:
        """Stop with a warning; the text is printed literally, not as markup."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(self._stop(text))}")


class TerminalUI:
    """Everything gitpr prints goes through here."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def spinner(self, text: str) -> Spinner:
        """Create and start a spinner."""
        return Spinner(self.console, text).start()

    def build_pull_request_table(self, pulls: List[PullRequestSummary], now: Optional[datetime] = None) -> Table:
        """One row per pull request: number, author, age, state, title."""
        table = Table(header_style="cyan")
        for column in TABLE_COLUMNS:
            table.add_column(column)
        for pr in pulls:
            table.add_row(
                f"#{pr.number}",
                f"@{pr.author}",
                time_from_now(pr.created_at, now),
                pr.state.upper(),
                escape(pr.title),
            )
        return table

    def render_pull_requests(self, pulls: List[PullRequestSummary]) -> None:
        self.console.print(self.build_pull_request_table(pulls))

    def open_browser(self, url: str) -> bool:
        """Open a URL in the default browser, printing it if that fails."""
        opened = webbrowser.open(url)
        if not opened:
            self.info(f"Open in your browser: {url}")
        return opened

    def info(self, message: str) -> None:
        self.console.print(message)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
