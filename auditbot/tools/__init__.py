"""Tools package — wrappers for the git and npm CLIs and the local workspace."""

from .git_tools import (
    clone_repository,
    get_changed_paths,
    parse_porcelain_status,
    find_manifest_changes,
    configure_identity,
    commit,
    push,
)
from .npm_tools import run_npm_install, run_npm_audit, parse_audit_output, run_npm_audit_fix
from .workspace_tools import ensure_workspace_root, workspace_path_for, prepare_workspace, remove_workspace

__all__ = [
    "clone_repository", "get_changed_paths", "parse_porcelain_status",
    "find_manifest_changes", "configure_identity", "commit", "push",
    "run_npm_install", "run_npm_audit", "parse_audit_output", "run_npm_audit_fix",
    "ensure_workspace_root", "workspace_path_for", "prepare_workspace", "remove_workspace",
]
