"""Repo Fetcher — clones the repository and installs its dependency set."""

from loguru import logger

from auditbot.errors import AcquireError, InstallError
from auditbot.graph.state import AuditState
from auditbot.tools.git_tools import clone_repository
from auditbot.tools.npm_tools import run_npm_install
from auditbot.tools.workspace_tools import prepare_workspace


def acquire_node(state: AuditState) -> dict:
    """
    LangGraph node: clone the remote repository into a fresh workspace.

    A clone failure is terminal for the repository: ``failure`` is set and
    the acquire gate routes straight to cleanup, which removes any partial
    directory.

    Returns state updates for:
        - acquired
        - failure
        - current_stage
    """
    repo_name = state["repo_name"]
    workspace_path = state["workspace_path"]

    logger.info("📥 Clonando {}...", repo_name)

    try:
        prepare_workspace(workspace_path)
        clone_repository(state["repo_url"], workspace_path)
    except (AcquireError, OSError) as e:
        logger.error("Clone of {} failed: {}", repo_name, str(e))
        return {
            "acquired": False,
            "failure": str(e),
            "current_stage": "acquire_failed",
        }

    return {
        "acquired": True,
        "current_stage": "acquire_complete",
    }


def install_node(state: AuditState) -> dict:
    """
    LangGraph node: run `npm install` inside the workspace.

    Same terminal contract as acquire.

    Returns state updates for:
        - installed
        - failure
        - current_stage
    """
    logger.info("📦 Instalando dependencias...")

    try:
        run_npm_install(state["workspace_path"])
    except InstallError as e:
        logger.error("Install in {} failed: {}", state["repo_name"], str(e))
        return {
            "installed": False,
            "failure": str(e),
            "current_stage": "install_failed",
        }

    return {
        "installed": True,
        "current_stage": "install_complete",
    }
