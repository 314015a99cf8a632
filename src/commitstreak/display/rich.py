"""Rich-based rendering for commit check results."""

from __future__ import annotations

from datetime import UTC
from datetime import datetime

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from commitstreak.models import CheckResult
from commitstreak.models import DetectionReport
from commitstreak.models import RateLimitStatus


def streak_color(streak: int) -> str:
    """Color for a streak length."""
    if streak >= 30:
        return "magenta"
    if streak >= 7:
        return "green"
    if streak >= 1:
        return "yellow"
    return "dim"


def format_streak(streak: int) -> Text:
    """Render a streak as ``🔥 N days``."""
    text = Text()
    unit = "day" if streak == 1 else "days"
    text.append("🔥 " if streak else "", style="bold")
    text.append(f"{streak} {unit}", style=f"bold {streak_color(streak)}")
    return text


def format_status_line(result: CheckResult) -> Text:
    """One-line summary used in quiet and watch modes."""
    text = Text()
    if not result.success:
        text.append("✗ ", style="red")
        text.append(result.message or "Check failed", style="red")
        return text

    if result.has_committed:
        text.append("✓ ", style="green")
        count = result.commit_count
        text.append(f"{count} commit{'s' if count != 1 else ''} today", style="bold")
        if result.inferred:
            text.append(" (inferred)", style="dim")
    else:
        text.append("○ ", style="yellow")
        text.append("No commits yet today", style="bold yellow")

    text.append(" • ", style="dim")
    text.append_text(format_streak(result.streak))
    return text


def format_reset(reset: datetime | None, now: datetime | None = None) -> str:
    """Human countdown to a rate limit reset, e.g. ``12m``."""
    if reset is None:
        return "unknown"
    now = now or datetime.now(UTC)
    seconds = max(0, int((reset - now).total_seconds()))
    minutes, seconds = divmod(seconds, 60)
    if minutes >= 60:
        hours, minutes = divmod(minutes, 60)
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m"
    return f"{seconds}s"


def render_check_result(result: CheckResult, verbose: bool = False) -> Panel:
    """Panel with the full outcome of a check."""
    if not result.success:
        body = Text()
        body.append(result.message or "Check failed", style="bold red")
        for solution in result.solutions:
            body.append(f"\n  • {solution}", style="dim")
        return Panel(body, title="Commit Check Failed", border_style="red")

    body = format_status_line(result)
    if result.last_commit_date:
        body.append(f"\nLast push: {result.last_commit_date.isoformat()}", style="dim")
    if verbose:
        details = [f"method: {result.method or 'none'}"]
        if result.cached:
            details.append("cached")
        if result.rate_limit_remaining is not None:
            details.append(f"rate limit remaining: {result.rate_limit_remaining}")
        body.append("\n" + " • ".join(details), style="dim")

    title = f"Commits for {result.day.isoformat()}" if result.day else "Commits"
    border = "green" if result.has_committed else "yellow"
    return Panel(body, title=title, border_style=border)


def render_methods_table(report: DetectionReport) -> Table:
    """Per-method breakdown of a detection run."""
    table = Table(title="Detection Methods", show_header=True, header_style="bold")
    table.add_column("Method", style="cyan")
    table.add_column("Status")
    table.add_column("Commits", justify="right")
    table.add_column("Error", style="dim")

    for method, result in report.methods.items():
        status = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        count = str(result.commit_count) if result.success else "-"
        table.add_row(str(method), status, count, result.error or "")

    return table


def render_rate_limit(status: RateLimitStatus) -> Table:
    """Rate limit headroom as a two-column table."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold")

    if status.remaining is None:
        remaining = "unknown"
    elif status.limit is not None:
        remaining = f"{status.remaining} / {status.limit}"
    else:
        remaining = str(status.remaining)
    table.add_row("Remaining", remaining)
    table.add_row("Resets in", format_reset(status.reset))
    if status.last_request:
        last = status.last_request.astimezone().strftime("%H:%M:%S")
        table.add_row("Last request", last)
    return table
