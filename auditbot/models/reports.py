"""Data models for AuditBot measurements, outcomes and fleet reports."""

import re
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from auditbot.errors import InvalidTargetError


ERROR_SENTINEL = "err"
"""Value a severity field takes when the audit could not be measured."""

SEPARATOR_WIDTH = 50

Count = Union[Annotated[StrictInt, Field(ge=0)], Literal["err"]]


class VulnerabilityCount(BaseModel):
    """Immutable per-severity vulnerability snapshot from one `npm audit` run."""

    model_config = ConfigDict(frozen=True)

    critical: Count = 0
    high: Count = 0
    moderate: Count = 0
    low: Count = 0

    @classmethod
    def errored(cls) -> "VulnerabilityCount":
        return cls(
            critical=ERROR_SENTINEL,
            high=ERROR_SENTINEL,
            moderate=ERROR_SENTINEL,
            low=ERROR_SENTINEL,
        )

    @property
    def is_error(self) -> bool:
        return ERROR_SENTINEL in (self.critical, self.high, self.moderate, self.low)

    @property
    def total(self) -> Optional[int]:
        if self.is_error:
            return None
        return self.critical + self.high + self.moderate + self.low

    @property
    def summary(self) -> str:
        return (
            f"Critical: {self.critical}, High: {self.high}, "
            f"Moderate: {self.moderate}, Low: {self.low}"
        )

    def format_line(self, label: str = "   ") -> str:
        return f"{label}: {self.summary}"


class Measurement(BaseModel):
    """Tagged result of an audit step: ok(counts) or failed(reason)."""

    model_config = ConfigDict(frozen=True)

    status: Literal["ok", "failed"]
    counts: VulnerabilityCount
    reason: Optional[str] = None

    @classmethod
    def ok(cls, counts: VulnerabilityCount) -> "Measurement":
        return cls(status="ok", counts=counts)

    @classmethod
    def failed(cls, reason: str) -> "Measurement":
        return cls(status="failed", counts=VulnerabilityCount.errored(), reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.status == "ok"


def derive_repo_name(url: str) -> str:
    """
    Derive the short repository name from a clone URL.

    Takes the last path segment (``/`` or scp-style ``:``) and strips a
    trailing ``.git``. Raises InvalidTargetError when the result is not a
    safe directory name.
    """
    tail = re.split(r"[/:]", url.strip().rstrip("/"))[-1]
    name = tail[: -len(".git")] if tail.endswith(".git") else tail

    if not name or name in {".", ".."} or "\\" in name or "\x00" in name:
        raise InvalidTargetError(f"Cannot derive a repository name from '{url}'")
    return name


class RepositoryTarget(BaseModel):
    """One unit of work: a remote URL and its derived workspace name."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Clone URL, usually https://.../<name>.git")
    name: str = Field(description="Last URL path segment without the .git suffix")

    @classmethod
    def from_url(cls, url: str) -> "RepositoryTarget":
        return cls(url=url.strip(), name=derive_repo_name(url))


class PublishResult(BaseModel):
    """What happened when trying to push the remediation back to the remote."""

    model_config = ConfigDict(frozen=True)

    status: Literal["no_changes", "published", "failed"]
    files: List[str] = Field(default_factory=list, description="Manifest/lock files that were committed")
    commit_sha: Optional[str] = None
    pushed: bool = False
    reason: Optional[str] = None

    @classmethod
    def no_changes(cls) -> "PublishResult":
        return cls(status="no_changes")

    @classmethod
    def published(cls, files: List[str], commit_sha: str, pushed: bool = True) -> "PublishResult":
        return cls(status="published", files=files, commit_sha=commit_sha, pushed=pushed)

    @classmethod
    def failed(cls, reason: str, files: Optional[List[str]] = None) -> "PublishResult":
        return cls(status="failed", files=files or [], reason=reason)


class AuditOutcome(BaseModel):
    """Result of one repository workflow invocation."""

    target: RepositoryTarget
    before: Optional[Measurement] = None
    after: Optional[Measurement] = None
    publish: Optional[PublishResult] = None
    failure: Optional[str] = Field(
        default=None,
        description="Terminal failure reason when clone or install failed",
    )
    errors: List[str] = Field(default_factory=list, description="Non-fatal errors collected along the way")
    remediated: bool = Field(default=False, description="Whether `npm audit fix` exited cleanly")
    workspace_removed: bool = Field(default=False, description="Whether the private clone directory is gone")

    @property
    def completed(self) -> bool:
        return self.failure is None

    def to_report_block(self) -> str:
        """Render the standard before/after summary block."""
        before = self.before.counts if self.before else VulnerabilityCount.errored()
        after = self.after.counts if self.after else VulnerabilityCount.errored()
        return (
            f"📁 {self.target.name}\n"
            f"➡️ Antes del fix\n"
            f"{before.format_line()}\n"
            f"➡️ Después del fix\n"
            f"{after.format_line()}\n"
            f"{'-' * SEPARATOR_WIDTH}\n"
        )

    def report_entries(self) -> List[str]:
        """Lines appended to the sink for this outcome, in write order."""
        if self.failure is not None:
            return [format_failure_line(self.target.url, self.failure)]

        entries = []
        if self.publish and self.publish.status == "failed":
            entries.append(
                f"⚠️  No se pudo hacer push en {self.target.name}: {self.publish.reason}\n"
            )
        entries.append(self.to_report_block())
        return entries


def format_failure_line(url: str, message: str) -> str:
    return f"❌ Error en {url}: {message}\n"


def format_run_header(started_at: datetime) -> str:
    """Run-start marker, e.g. ``🕒 Auditoría - 2024-05-01T10:00:00.000Z``."""
    timestamp = started_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"\n\n🕒 Auditoría - {timestamp}\n{'=' * SEPARATOR_WIDTH}\n"


class FleetEntry(BaseModel):
    """One line-group in a fleet run: an outcome, or an error that escaped the workflow."""

    url: str
    outcome: Optional[AuditOutcome] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not None and self.outcome.completed


class FleetReport(BaseModel):
    """Ordered entries of one fleet run, prefixed by its start timestamp."""

    started_at: datetime
    entries: List[FleetEntry] = Field(default_factory=list)
    finished_at: Optional[datetime] = None

    @property
    def failed_count(self) -> int:
        return sum(1 for e in self.entries if not e.succeeded)

    @property
    def published_count(self) -> int:
        return sum(
            1 for e in self.entries
            if e.outcome and e.outcome.publish and e.outcome.publish.status == "published"
        )
