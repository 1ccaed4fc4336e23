"""show command: print a pull request snapshot in the terminal."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prstamp_core.gh.pull_request import PullRequestGateway
from prstamp_core.gh.reference import extract_reference
from prstamp_core.models import PullRequestSnapshot

console = Console()

_MERGEABLE = {None: "[dim]checking...[/dim]", True: "[green]yes[/green]", False: "[red]no[/red]"}
_REVIEW_STYLE = {"APPROVED": "green", "CHANGES_REQUESTED": "yellow"}


def _print_snapshot(snapshot: PullRequestSnapshot) -> None:
    draft = " [dim](Draft)[/dim]" if snapshot.draft else ""
    console.print(f"\n[bold]{escape(snapshot.title)}[/bold]")
    console.print(f"  Author:    @{snapshot.author}")
    console.print(f"  State:     {snapshot.state}{draft}")
    console.print(f"  Mergeable: {_MERGEABLE[snapshot.mergeable]}")
    console.print(f"  URL:       {snapshot.html_url}")

    if not snapshot.reviews:
        console.print("\n[yellow]No reviews yet.[/yellow]")
        return

    table = Table(title="Reviews", show_lines=False)
    table.add_column("Reviewer")
    table.add_column("State")
    for review in snapshot.reviews:
        style = _REVIEW_STYLE.get(review.state, "white")
        table.add_row(f"@{review.reviewer}", f"[{style}]{review.state}[/{style}]")
    console.print()
    console.print(table)


@click.command("show")
@click.argument("reference")
@click.pass_context
def show_cmd(ctx, reference: str):
    """Show the status of REFERENCE without approving it.

    REFERENCE is a GitHub PR URL, owner/repo#123, or #123 with a default repo.
    """
    config = ctx.obj["config"]

    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    ref = extract_reference(reference, config.get("default_repo"))
    if ref is None:
        raise click.UsageError(f"Not a PR reference: {reference!r}. Use a PR URL or owner/repo#123.")

    snapshot = PullRequestGateway(token=token).fetch_snapshot(ref)
    if snapshot is None:
        raise click.ClickException(f"Could not fetch PR details for {ref}.")

    _print_snapshot(snapshot)
