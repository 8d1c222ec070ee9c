"""Fleet driver — runs the audit workflow over every configured repository."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from loguru import logger

from auditbot.config import settings
from auditbot.errors import DuplicateTargetError, describe_error
from auditbot.fleet.sink import ReportSink
from auditbot.graph.workflow import run_workflow
from auditbot.models.reports import (
    FleetEntry,
    FleetReport,
    RepositoryTarget,
    format_failure_line,
    format_run_header,
)
from auditbot.tools.workspace_tools import ensure_workspace_root


def build_targets(urls: Iterable[str]) -> List[RepositoryTarget]:
    """
    Turn repository URLs into targets, keeping their order.

    Raises:
        InvalidTargetError: a URL does not yield a usable name.
        DuplicateTargetError: two URLs derive the same workspace name.
    """
    targets = [RepositoryTarget.from_url(url) for url in urls if url.strip()]
    validate_targets(targets)
    return targets


def validate_targets(targets: List[RepositoryTarget]) -> None:
    """Reject fleets where two targets would share a workspace directory."""
    seen: Dict[str, str] = {}
    for target in targets:
        if target.name in seen:
            raise DuplicateTargetError(
                f"'{target.url}' and '{seen[target.name]}' both map to workspace '{target.name}'"
            )
        seen[target.name] = target.url


def run_fleet(
    targets: List[RepositoryTarget],
    workspace_root: Optional[str | Path] = None,
    sink: Optional[ReportSink] = None,
) -> FleetReport:
    """
    Audit every target in order and append the results to the report sink.

    Each repository is isolated: whatever escapes its workflow is recorded
    as a failure line and the loop moves on to the next one. The run is
    complete once the end of the list is reached.

    Args:
        targets: Repositories to audit, in report order.
        workspace_root: Shared clone directory (default: WORKSPACE_ROOT).
        sink: Report sink (default: OUTPUT_FILE).

    Returns:
        FleetReport with one entry per target, in input order.
    """
    validate_targets(targets)

    root = ensure_workspace_root(workspace_root or settings.WORKSPACE_ROOT)
    sink = sink or ReportSink(settings.OUTPUT_FILE)

    report = FleetReport(started_at=datetime.now(timezone.utc))
    sink.append(format_run_header(report.started_at))
    logger.info("🕒 Auditing {} repositories into {}", len(targets), sink.path)

    for target in targets:
        try:
            outcome = run_workflow(target, root)
        except Exception as e:
            message = describe_error(e)
            sink.append(format_failure_line(target.url, message))
            logger.opt(exception=e).error("❌ Fallo procesando {}", target.url)
            report.entries.append(FleetEntry(url=target.url, error=message))
            continue

        for entry in outcome.report_entries():
            sink.append(entry)
        if not outcome.completed:
            logger.error("❌ Fallo procesando {}: {}", target.url, outcome.failure)

        report.entries.append(FleetEntry(url=target.url, outcome=outcome))

    report.finished_at = datetime.now(timezone.utc)
    logger.info(
        "🏁 Audit complete: {} repositories, {} failed, {} published",
        len(report.entries),
        report.failed_count,
        report.published_count,
    )
    return report


def run_fleet_from_settings() -> FleetReport:
    """Run the fleet over the configured REPOS, WORKSPACE_ROOT and OUTPUT_FILE."""
    return run_fleet(build_targets(settings.REPOS))
