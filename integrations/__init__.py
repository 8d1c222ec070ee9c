"""Entry points that trigger AuditBot: the Typer CLI and the MCP stdio server."""
