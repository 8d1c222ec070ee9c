"""Configuration package."""

from .settings import AuditBotSettings, settings

__all__ = ["AuditBotSettings", "settings"]
