"""Workspace tools — per-repository scratch directories under a shared root."""

import shutil
from pathlib import Path

from loguru import logger


def ensure_workspace_root(root: str | Path) -> Path:
    """Create the shared workspace root if it does not exist yet."""
    root_path = Path(root).resolve()
    root_path.mkdir(parents=True, exist_ok=True)
    return root_path


def workspace_path_for(root: str | Path, repo_name: str) -> Path:
    return Path(root).resolve() / repo_name


def prepare_workspace(path: str | Path) -> Path:
    """
    Make sure the workspace directory is free for a fresh clone.

    A directory left behind by an interrupted run is removed first.
    """
    workspace = Path(path)
    if workspace.exists():
        logger.warning("Stale workspace found at {}, removing it", workspace)
        remove_workspace(workspace)
    workspace.parent.mkdir(parents=True, exist_ok=True)
    return workspace


def remove_workspace(path: str | Path) -> bool:
    """
    Remove a workspace directory and everything in it.

    Returns:
        True if nothing remains at ``path`` afterwards.
    """
    workspace = Path(path)
    if not workspace.exists():
        return True

    try:
        try:
            shutil.rmtree(workspace)
        except PermissionError:
            _make_tree_writable(workspace)
            shutil.rmtree(workspace)
    except OSError as e:
        logger.error("Could not remove workspace {}: {}", workspace, str(e))
        return False
    return not workspace.exists()


def _make_tree_writable(root: Path) -> None:
    # git marks pack files read-only, which blocks deletion on Windows
    for entry in root.rglob("*"):
        entry.chmod(0o700)
