"""AuditBot CLI — Typer-based command-line interface."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from auditbot.config import settings
from auditbot.errors import InvalidTargetError, DuplicateTargetError

app = typer.Typer(
    name="auditbot",
    help="🕒 AuditBot — npm audit + audit fix across a fleet of repositories.",
    no_args_is_help=True,
)
console = Console()


@app.command()
def run(
    repos: Optional[List[str]] = typer.Argument(
        None,
        help="Repository URLs to audit. Defaults to the configured REPOS.",
    ),
    workspace: Optional[str] = typer.Option(
        None,
        "--workspace", "-w",
        help="Directory where repositories are cloned while audited.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output", "-o",
        help="Report file to append to.",
    ),
    no_push: bool = typer.Option(
        False,
        "--no-push",
        help="Commit remediations locally but do not push them.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output.",
    ),
):
    """Audit, fix and publish every repository, appending to the report file."""
    from auditbot.fleet import ReportSink, build_targets, run_fleet
    from auditbot.utils.logging import setup_logging

    setup_logging(verbose=verbose or settings.VERBOSE)

    if no_push:
        settings.PUSH_CHANGES = False

    try:
        targets = build_targets(repos or settings.REPOS)
    except (InvalidTargetError, DuplicateTargetError) as e:
        console.print(f"[bold red]❌ Invalid repository list:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)

    sink = ReportSink(output or settings.OUTPUT_FILE)

    console.print(Panel.fit(
        "🕒 [bold cyan]AuditBot[/bold cyan] — npm audit fleet run\n"
        f"📚 Repositories: {len(targets)}\n"
        f"📝 Report: {sink.path}",
        border_style="cyan",
    ))

    report = run_fleet(targets, workspace_root=workspace, sink=sink)

    table = Table(title="Resultado")
    table.add_column("Repositorio")
    table.add_column("Antes")
    table.add_column("Después")
    table.add_column("Publicación")

    for entry in report.entries:
        outcome = entry.outcome
        if outcome is None or not outcome.completed:
            reason = entry.error or (outcome.failure if outcome else "")
            table.add_row(entry.url, "-", "-", f"❌ {escape(reason or '')}")
            continue
        table.add_row(
            outcome.target.name,
            outcome.before.counts.summary if outcome.before else "-",
            outcome.after.counts.summary if outcome.after else "-",
            _publish_label(outcome.publish),
        )

    console.print(table)


@app.command()
def audit(
    repo_url: str = typer.Argument(..., help="Repository URL to audit."),
    workspace: Optional[str] = typer.Option(
        None,
        "--workspace", "-w",
        help="Directory where the repository is cloned while audited.",
    ),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push the remediation commit."),
):
    """Run the workflow for a single repository without writing the report file."""
    from auditbot.graph.workflow import run_workflow
    from auditbot.models.reports import RepositoryTarget
    from auditbot.tools.workspace_tools import ensure_workspace_root
    from auditbot.utils.logging import setup_logging

    setup_logging()

    if no_push:
        settings.PUSH_CHANGES = False

    try:
        target = RepositoryTarget.from_url(repo_url)
    except InvalidTargetError as e:
        console.print(f"[bold red]❌[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)

    root = ensure_workspace_root(workspace or settings.WORKSPACE_ROOT)
    outcome = run_workflow(target, root)

    console.print()
    for entry in outcome.report_entries():
        console.print(entry, end="", markup=False, highlight=False)

    if not outcome.completed:
        raise typer.Exit(code=1)


@app.command()
def status():
    """Show AuditBot configuration."""
    repos = "\n".join(f"  - {url}" for url in settings.REPOS) or "  (none)"

    console.print(Panel.fit(
        f"[bold]Repositories:[/bold]\n{repos}\n"
        f"[bold]Workspace Root:[/bold] {settings.WORKSPACE_ROOT}\n"
        f"[bold]Report File:[/bold] {settings.OUTPUT_FILE}\n"
        f"[bold]Git Identity:[/bold] {settings.GIT_USER_NAME} <{settings.GIT_USER_EMAIL}>\n"
        f"[bold]Commit Message:[/bold] {settings.COMMIT_MESSAGE}\n"
        f"[bold]Manifest Files:[/bold] {', '.join(settings.MANIFEST_FILES)}\n"
        f"[bold]Push Changes:[/bold] {settings.PUSH_CHANGES}\n"
        f"[bold]npm Binary:[/bold] {settings.NPM_BINARY}\n"
        f"[bold]Command Timeout:[/bold] {settings.COMMAND_TIMEOUT_SECONDS}s\n"
        f"[bold]Verbose:[/bold] {settings.VERBOSE}",
        title="🕒 AuditBot Config",
        border_style="cyan",
    ))


def _publish_label(publish) -> str:
    if publish is None:
        return "-"
    if publish.status == "published":
        suffix = "" if publish.pushed else " (local)"
        return f"📤 {publish.commit_sha[:8]}{suffix}"
    if publish.status == "failed":
        return f"⚠️  {escape(publish.reason or '')}"
    return "✅ sin cambios"


if __name__ == "__main__":
    app()
