"""Vulnerability Auditor — measures npm audit exposure and attempts `npm audit fix`."""

from loguru import logger

from auditbot.graph.state import AuditState
from auditbot.models.reports import Measurement
from auditbot.tools.npm_tools import run_npm_audit, run_npm_audit_fix


def _measure(state: AuditState, label: str) -> Measurement:
    measurement = run_npm_audit(state["workspace_path"])
    if measurement.succeeded:
        logger.info("{} {}: {}", label, state["repo_name"], measurement.counts.summary)
    else:
        logger.warning("{} {}: audit failed ({})", label, state["repo_name"], measurement.reason)
    return measurement


def measure_before_node(state: AuditState) -> dict:
    """
    LangGraph node: audit the freshly installed dependency set.

    Measurement failure is non-fatal; the error sentinel is recorded and
    the workflow carries on.

    Returns state updates for:
        - before
        - errors
        - current_stage
    """
    measurement = _measure(state, "Antes del fix")
    update = {
        "before": measurement.model_dump(),
        "current_stage": "measure_before_complete",
    }
    if not measurement.succeeded:
        update["errors"] = [f"Audit before fix failed: {measurement.reason}"]
    return update


def remediate_node(state: AuditState) -> dict:
    """
    LangGraph node: run `npm audit fix`.

    Failure is logged and recorded but never stops the workflow; whatever
    the fix left behind is measured next.

    Returns state updates for:
        - remediated
        - errors
        - current_stage
    """
    logger.info("🔧 Ejecutando npm audit fix...")

    reason = run_npm_audit_fix(state["workspace_path"])
    if reason is not None:
        logger.warning("npm audit fix failed in {}: {}", state["repo_name"], reason)
        return {
            "remediated": False,
            "errors": [f"Audit fix failed: {reason}"],
            "current_stage": "remediate_complete",
        }

    return {
        "remediated": True,
        "current_stage": "remediate_complete",
    }


def measure_after_node(state: AuditState) -> dict:
    """
    LangGraph node: audit again after the fix attempt.

    Returns state updates for:
        - after
        - errors
        - current_stage
    """
    measurement = _measure(state, "Después del fix")
    update = {
        "after": measurement.model_dump(),
        "current_stage": "measure_after_complete",
    }
    if not measurement.succeeded:
        update["errors"] = [f"Audit after fix failed: {measurement.reason}"]
    return update
