"""AuditBot MCP Server — Model Context Protocol stdio server for IDE agents."""

import asyncio
import threading

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from loguru import logger


# Create MCP server instance
server = Server("auditbot")


# ──────────────────────────── Tool Definitions ────────────────────────────


@server.list_tools()
async def list_tools() -> list[Tool]:
    """Return the list of tools exposed by AuditBot."""
    return [
        Tool(
            name="run_fleet",
            description=(
                "Audit every repository: clone → npm install → npm audit → npm audit fix → "
                "npm audit → commit + push manifest changes. Appends to the report file "
                "and returns the section written by this run."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "repos": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Repository URLs. Defaults to the configured list.",
                    },
                },
            },
        ),
        Tool(
            name="audit_repository",
            description="Run the audit workflow for one repository without writing the report file.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo_url": {
                        "type": "string",
                        "description": "Repository URL to audit.",
                    },
                },
                "required": ["repo_url"],
            },
        ),
        Tool(
            name="get_status",
            description="Show current AuditBot configuration.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


# ──────────────────────────── Tool Handlers ────────────────────────────


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool invocations from the MCP client."""
    try:
        if name == "run_fleet":
            result = await _run_fleet(arguments.get("repos"))

        elif name == "audit_repository":
            result = await _audit_repository(arguments["repo_url"])

        elif name == "get_status":
            result = _get_status()

        else:
            result = f"Unknown tool: {name}"

        return [TextContent(type="text", text=str(result))]

    except Exception as e:
        logger.error("Tool '{}' failed: {}", name, str(e))
        return [TextContent(type="text", text=f"Error: {str(e)}")]


# ──────────────────────────── Tool Implementations ────────────────────────────


# One audit at a time across tool calls; workspaces and the report are shared.
_run_lock = threading.Lock()


def _fleet_section(targets, sink) -> str:
    """Run the fleet under the run lock and return the text it appended."""
    from auditbot.fleet import run_fleet

    with _run_lock:
        offset = len(sink.read())
        run_fleet(targets, sink=sink)
        return sink.read()[offset:]


def _audit_locked(target, root):
    from auditbot.graph.workflow import run_workflow

    with _run_lock:
        return run_workflow(target, root)


async def _run_fleet(repos: list | None = None) -> str:
    """Run the fleet and return the report section it appended."""
    from auditbot.config import settings
    from auditbot.fleet import ReportSink, build_targets
    from auditbot.utils.logging import setup_logging

    setup_logging()

    targets = build_targets(repos or settings.REPOS)
    sink = ReportSink(settings.OUTPUT_FILE)

    # Run synchronously in executor to avoid blocking
    loop = asyncio.get_running_loop()
    section = await loop.run_in_executor(None, _fleet_section, targets, sink)

    return section.strip()


async def _audit_repository(repo_url: str) -> str:
    """Audit a single repository and return its report lines."""
    from auditbot.config import settings
    from auditbot.models.reports import RepositoryTarget
    from auditbot.tools.workspace_tools import ensure_workspace_root
    from auditbot.utils.logging import setup_logging

    setup_logging()

    target = RepositoryTarget.from_url(repo_url)
    root = ensure_workspace_root(settings.WORKSPACE_ROOT)

    loop = asyncio.get_running_loop()
    outcome = await loop.run_in_executor(None, _audit_locked, target, root)

    return "".join(outcome.report_entries()).strip()


def _get_status() -> str:
    """Return current configuration as formatted string."""
    from auditbot.config import settings

    return (
        "🕒 AuditBot Configuration\n"
        f"- Repositories: {len(settings.REPOS)}\n"
        f"- Workspace: {settings.WORKSPACE_ROOT}\n"
        f"- Report: {settings.OUTPUT_FILE}\n"
        f"- Identity: {settings.GIT_USER_NAME} <{settings.GIT_USER_EMAIL}>\n"
        f"- Push changes: {settings.PUSH_CHANGES}\n"
    )


# ──────────────────────────── Server Entry Point ────────────────────────────


async def main():
    """Run the MCP stdio server."""
    logger.info("Starting AuditBot MCP server...")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
