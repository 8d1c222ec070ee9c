"""Exception hierarchy for AuditBot."""


class AuditBotError(Exception):
    """Base class for every error raised by AuditBot."""


class InvalidTargetError(AuditBotError):
    """A repository URL does not yield a usable, filesystem-safe name."""


class DuplicateTargetError(AuditBotError):
    """Two repository URLs in one fleet derive the same workspace name."""


class AcquireError(AuditBotError):
    """Cloning the repository failed."""


class InstallError(AuditBotError):
    """Installing the dependency set failed."""


class PublishError(AuditBotError):
    """Staging, committing or pushing the remediation failed."""


def describe_error(exc: BaseException) -> str:
    """Single-line, human-readable description of an exception for the report."""
    message = " ".join(str(exc).split())
    return message or type(exc).__name__
