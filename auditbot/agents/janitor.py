"""Janitor — removes the repository workspace at the end of every run."""

from loguru import logger

from auditbot.graph.state import AuditState
from auditbot.tools.workspace_tools import remove_workspace


def cleanup_node(state: AuditState) -> dict:
    """
    LangGraph node: delete the workspace directory.

    Reached from every path through the graph, including the terminal
    acquire and install failures.

    Returns state updates for:
        - workspace_removed
        - current_stage
    """
    logger.info("🧹 Borrando carpeta {}...", state["repo_name"])
    removed = remove_workspace(state["workspace_path"])

    return {
        "workspace_removed": removed,
        "current_stage": "failed" if state.get("failure") else "complete",
    }
