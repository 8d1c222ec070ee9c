"""AuditState — shared state flowing through the per-repository LangGraph workflow."""

from typing import TypedDict, List, Optional, Annotated, Dict, Any


# ──────────────────────────── Custom Reducers ────────────────────────────


def merge_errors(existing: List[str] | None, new: List[str] | None) -> List[str]:
    """Concatenate non-fatal error messages reported by successive steps."""
    if existing is None:
        existing = []
    if new is None:
        new = []
    return existing + new


# ──────────────────────────── State Schema ────────────────────────────


class AuditState(TypedDict):
    """
    State that flows through every node of one repository's audit.

    Pydantic models are stored in dict form, the same way they are
    reported, and rebuilt into an AuditOutcome when the graph finishes.
    """

    # ===== Input =====
    repo_url: str
    repo_name: str

    workspace_path: str
    """Absolute path of this repository's private clone directory."""

    # ===== Lifecycle =====
    acquired: bool
    installed: bool

    failure: Optional[str]
    """Terminal failure reason; set by acquire or install, routes to cleanup."""

    # ===== Measurements =====
    before: Optional[Dict[str, Any]]
    """Serialised Measurement taken before `npm audit fix`."""

    after: Optional[Dict[str, Any]]
    """Serialised Measurement taken after `npm audit fix`."""

    remediated: bool
    """Whether `npm audit fix` completed without error."""

    # ===== Publish =====
    publish_result: Optional[Dict[str, Any]]
    """Serialised PublishResult."""

    # ===== Workflow Control =====
    current_stage: str
    workspace_removed: bool

    # ===== Error Handling =====
    errors: Annotated[List[str], merge_errors]
    """Non-fatal error messages from measure, remediate and publish."""
