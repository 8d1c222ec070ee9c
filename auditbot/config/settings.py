"""AuditBot settings — Pydantic BaseSettings driven by environment variables."""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuditBotSettings(BaseSettings):
    """
    All AuditBot configuration.
    Values are loaded from environment variables prefixed with AUDITBOT_,
    falling back to a .env file in the project root.
    """

    # ===== Fleet =====
    REPOS: List[str] = [
        "https://github.com/GonzaloCarmenado/common-connectors.git",
        "https://github.com/GonzaloCarmenado/generalHttpCore.git",
        "https://github.com/GonzaloCarmenado/Arquitectura-Front.git",
        "https://github.com/GonzaloCarmenado/automated-projects-audit.git",
    ]
    """Repositories to audit, in report order. The bot account needs push rights on each."""

    WORKSPACE_ROOT: str = "temp"
    """Shared directory where each repository is cloned while it is audited."""

    OUTPUT_FILE: str = "audit-summary.txt"
    """Append-only report file."""

    # ===== Git =====
    GIT_USER_NAME: str = "AuditBot"
    GIT_USER_EMAIL: str = "autoaudit@gonzalo.com"

    COMMIT_MESSAGE: str = "Fix: updated library versions"

    MANIFEST_FILES: List[str] = ["package.json", "package-lock.json"]
    """Files whose modification makes a repository worth publishing."""

    PUSH_CHANGES: bool = True
    """Push the remediation commit. False commits locally only (dry run)."""

    # ===== npm =====
    NPM_BINARY: str = "npm"

    COMMAND_TIMEOUT_SECONDS: int = 600
    """Maximum time (seconds) for a single clone, npm or push invocation."""

    # ===== Logging =====
    VERBOSE: bool = False
    """Enable verbose logging output."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AUDITBOT_",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton instance, import this everywhere
settings = AuditBotSettings()
