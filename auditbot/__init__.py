"""AuditBot — batch npm vulnerability auditor and fixer for a fleet of repositories."""

__version__ = "0.1.0"
