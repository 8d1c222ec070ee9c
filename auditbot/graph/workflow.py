"""AuditBot LangGraph workflow — one repository through acquire → … → cleanup."""

from pathlib import Path
from typing import Literal

from langgraph.graph import StateGraph, END
from loguru import logger

from auditbot.graph.state import AuditState
from auditbot.agents.repo_fetcher import acquire_node, install_node
from auditbot.agents.vulnerability_auditor import (
    measure_before_node,
    remediate_node,
    measure_after_node,
)
from auditbot.agents.publisher import publish_node
from auditbot.agents.janitor import cleanup_node
from auditbot.models.reports import AuditOutcome, Measurement, PublishResult, RepositoryTarget
from auditbot.tools.workspace_tools import remove_workspace, workspace_path_for


# ──────────────────────────── Gate Functions ────────────────────────────


def acquire_gate(state: AuditState) -> Literal["install", "cleanup"]:
    """Conditional edge after clone: nothing can follow a failed clone."""
    if state.get("acquired", False):
        return "install"

    logger.error("Acquire gate: ABORT {}", state["repo_name"])
    return "cleanup"


def install_gate(state: AuditState) -> Literal["measure_before", "cleanup"]:
    """Conditional edge after install: auditing needs installed dependencies."""
    if state.get("installed", False):
        return "measure_before"

    logger.error("Install gate: ABORT {}", state["repo_name"])
    return "cleanup"


# ──────────────────────────── Workflow Builder ────────────────────────────


def create_audit_workflow(checkpointer=None):
    """
    Create the per-repository audit LangGraph workflow.

    Pipeline:
        acquire → [acquire_gate] → install → [install_gate]
                       ↓ fail                    ↓ fail
                       └──────────→ cleanup ←────┘
        measure_before → remediate → measure_after → publish → cleanup → END

    Args:
        checkpointer: Optional LangGraph checkpointer for persistence.

    Returns:
        Compiled LangGraph workflow.
    """
    workflow = StateGraph(AuditState)

    # ── Add Nodes ──
    workflow.add_node("acquire", acquire_node)
    workflow.add_node("install", install_node)
    workflow.add_node("measure_before", measure_before_node)
    workflow.add_node("remediate", remediate_node)
    workflow.add_node("measure_after", measure_after_node)
    workflow.add_node("publish", publish_node)
    workflow.add_node("cleanup", cleanup_node)

    # ── Define Edges ──

    workflow.set_entry_point("acquire")

    workflow.add_conditional_edges(
        "acquire",
        acquire_gate,
        {
            "install": "install",
            "cleanup": "cleanup",
        },
    )

    workflow.add_conditional_edges(
        "install",
        install_gate,
        {
            "measure_before": "measure_before",
            "cleanup": "cleanup",
        },
    )

    # Linear edges: measure_before → remediate → measure_after → publish → cleanup → END
    workflow.add_edge("measure_before", "remediate")
    workflow.add_edge("remediate", "measure_after")
    workflow.add_edge("measure_after", "publish")
    workflow.add_edge("publish", "cleanup")
    workflow.add_edge("cleanup", END)

    logger.debug("Audit workflow compiled")
    return workflow.compile(checkpointer=checkpointer)


def run_workflow(target: RepositoryTarget, workspace_root: str | Path) -> AuditOutcome:
    """
    Run the full audit lifecycle for one repository.

    Clone and install failures come back as an outcome with ``failure`` set.
    Anything a node did not handle propagates to the caller, but only after
    the workspace has been removed.

    Args:
        target: Repository to audit.
        workspace_root: Shared directory under which the private clone lives.

    Returns:
        The AuditOutcome for this repository.
    """
    workspace = workspace_path_for(workspace_root, target.name)
    workflow = create_audit_workflow()

    initial_state = {
        "repo_url": target.url,
        "repo_name": target.name,
        "workspace_path": str(workspace),
        "acquired": False,
        "installed": False,
        "failure": None,
        "before": None,
        "after": None,
        "remediated": False,
        "publish_result": None,
        "current_stage": "starting",
        "workspace_removed": False,
        "errors": [],
    }

    with logger.contextualize(repo=target.name):
        logger.debug("Auditing {} in {}", target.url, workspace)
        try:
            result = workflow.invoke(initial_state)
        finally:
            if workspace.exists():
                remove_workspace(workspace)

    result["workspace_removed"] = not workspace.exists()
    return build_outcome(target, result)


def build_outcome(target: RepositoryTarget, state: dict) -> AuditOutcome:
    """Rebuild the typed AuditOutcome from the final graph state."""
    before = state.get("before")
    after = state.get("after")
    publish = state.get("publish_result")

    return AuditOutcome(
        target=target,
        before=Measurement(**before) if before else None,
        after=Measurement(**after) if after else None,
        publish=PublishResult(**publish) if publish else None,
        failure=state.get("failure"),
        errors=state.get("errors", []),
        remediated=state.get("remediated", False),
        workspace_removed=state.get("workspace_removed", False),
    )
