"""Data models package."""

from .reports import (
    ERROR_SENTINEL,
    AuditOutcome,
    FleetEntry,
    FleetReport,
    Measurement,
    PublishResult,
    RepositoryTarget,
    VulnerabilityCount,
    derive_repo_name,
    format_failure_line,
    format_run_header,
)

__all__ = [
    "ERROR_SENTINEL",
    "AuditOutcome",
    "FleetEntry",
    "FleetReport",
    "Measurement",
    "PublishResult",
    "RepositoryTarget",
    "VulnerabilityCount",
    "derive_repo_name",
    "format_failure_line",
    "format_run_header",
]
