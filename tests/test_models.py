"""Tests for the report models and their text rendering."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from auditbot.errors import InvalidTargetError
from auditbot.models.reports import (
    AuditOutcome,
    Measurement,
    PublishResult,
    RepositoryTarget,
    VulnerabilityCount,
    derive_repo_name,
    format_failure_line,
    format_run_header,
)


# ============================================================================
# VulnerabilityCount
# ============================================================================

class TestVulnerabilityCount:

    def test_defaults_to_zero(self):
        counts = VulnerabilityCount()
        assert (counts.critical, counts.high, counts.moderate, counts.low) == (0, 0, 0, 0)
        assert counts.total == 0

    def test_errored_sets_every_field_to_sentinel(self):
        counts = VulnerabilityCount.errored()
        assert counts.is_error
        assert counts.total is None
        assert counts.format_line() == "   : Critical: err, High: err, Moderate: err, Low: err"

    def test_is_immutable(self):
        counts = VulnerabilityCount(critical=1)
        with pytest.raises(ValidationError):
            counts.critical = 2

    def test_rejects_negative_and_unknown_values(self):
        with pytest.raises(ValidationError):
            VulnerabilityCount(high=-1)
        with pytest.raises(ValidationError):
            VulnerabilityCount(low="lots")

    @pytest.mark.parametrize("value", ["5", 5.0, True, "ERR"])
    def test_rejects_values_that_only_look_like_counts(self, value):
        with pytest.raises(ValidationError):
            VulnerabilityCount(critical=value)

    def test_format_line(self):
        counts = VulnerabilityCount(critical=2, high=0, moderate=1, low=7)
        assert counts.format_line() == "   : Critical: 2, High: 0, Moderate: 1, Low: 7"


class TestMeasurement:

    def test_failed_carries_sentinel_counts(self):
        measurement = Measurement.failed("boom")
        assert not measurement.succeeded
        assert measurement.reason == "boom"
        assert measurement.counts == VulnerabilityCount.errored()

    def test_round_trips_through_state_dict(self):
        measurement = Measurement.ok(VulnerabilityCount(high=3))
        assert Measurement(**measurement.model_dump()) == measurement


# ============================================================================
# RepositoryTarget
# ============================================================================

class TestRepositoryTarget:

    @pytest.mark.parametrize("url, name", [
        ("https://github.com/GonzaloCarmenado/common-connectors.git", "common-connectors"),
        ("https://github.com/org/generalHttpCore", "generalHttpCore"),
        ("https://github.com/org/repo.git/", "repo"),
        ("git@github.com:org/Arquitectura-Front.git", "Arquitectura-Front"),
        ("git@host:solo.git", "solo"),
        ("https://example.com/org/my.gitlab-tools.git", "my.gitlab-tools"),
    ])
    def test_derives_name_from_url_tail(self, url, name):
        assert derive_repo_name(url) == name
        assert RepositoryTarget.from_url(url).name == name

    @pytest.mark.parametrize("url", ["", "https://github.com/org/.git", "https://host/org/..", "https://host/a\\b.git"])
    def test_rejects_unusable_names(self, url):
        with pytest.raises(InvalidTargetError):
            RepositoryTarget.from_url(url)

    def test_strips_surrounding_whitespace(self):
        target = RepositoryTarget.from_url("  https://github.com/org/repo.git \n")
        assert target.url == "https://github.com/org/repo.git"


# ============================================================================
# Report rendering
# ============================================================================

def _outcome(publish=None, failure=None):
    target = RepositoryTarget.from_url("https://github.com/org/common-connectors.git")
    if failure:
        return AuditOutcome(target=target, failure=failure)
    return AuditOutcome(
        target=target,
        before=Measurement.ok(VulnerabilityCount(critical=2, moderate=1)),
        after=Measurement.failed("bad json"),
        publish=publish or PublishResult.no_changes(),
    )


class TestReportRendering:

    def test_run_header_uses_utc_iso_timestamp(self):
        started = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_run_header(started) == (
            "\n\n🕒 Auditoría - 2024-05-01T10:00:00.123Z\n"
            + "=" * 50 + "\n"
        )

    def test_summary_block(self):
        assert _outcome().to_report_block() == (
            "📁 common-connectors\n"
            "➡️ Antes del fix\n"
            "   : Critical: 2, High: 0, Moderate: 1, Low: 0\n"
            "➡️ Después del fix\n"
            "   : Critical: err, High: err, Moderate: err, Low: err\n"
            + "-" * 50 + "\n"
        )

    def test_completed_outcome_yields_only_the_block(self):
        outcome = _outcome()
        assert outcome.completed
        assert outcome.report_entries() == [outcome.to_report_block()]

    def test_publish_failure_warning_precedes_block(self):
        outcome = _outcome(publish=PublishResult.failed("rejected"))
        entries = outcome.report_entries()
        assert entries[0] == "⚠️  No se pudo hacer push en common-connectors: rejected\n"
        assert entries[1] == outcome.to_report_block()

    def test_terminal_failure_yields_error_line(self):
        outcome = _outcome(failure="git clone failed: not found")
        assert not outcome.completed
        assert outcome.report_entries() == [
            "❌ Error en https://github.com/org/common-connectors.git: git clone failed: not found\n"
        ]

    def test_failure_line(self):
        assert format_failure_line("https://x/y.git", "boom") == "❌ Error en https://x/y.git: boom\n"
