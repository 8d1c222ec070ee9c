"""Fleet package — runs the audit workflow across every repository."""

from .driver import build_targets, validate_targets, run_fleet, run_fleet_from_settings
from .sink import ReportSink

__all__ = ["build_targets", "validate_targets", "run_fleet", "run_fleet_from_settings", "ReportSink"]
