"""Publisher — commits and pushes manifest/lock changes left by `npm audit fix`."""

from loguru import logger

from auditbot.config import settings
from auditbot.errors import describe_error
from auditbot.graph.state import AuditState
from auditbot.models.reports import PublishResult
from auditbot.tools.git_tools import (
    get_changed_paths,
    find_manifest_changes,
    configure_identity,
    commit,
    push,
)


def publish_node(state: AuditState) -> dict:
    """
    LangGraph node: publish the remediation back to the remote's default branch.

    Only manifest/lock files count as publishable changes. When at least one
    changed, the bot identity is configured, exactly those files are staged,
    one commit is created with the fixed message and the branch is pushed.
    Any failure in that sequence becomes ``publish-failed``; it never aborts
    the workflow.

    Returns state updates for:
        - publish_result
        - errors
        - current_stage
    """
    repo_path = state["workspace_path"]
    repo_name = state["repo_name"]
    files: list = []

    try:
        changed = get_changed_paths(repo_path)
        files = find_manifest_changes(changed, settings.MANIFEST_FILES)

        if not files:
            logger.info("✅ No hay cambios que commitear en {}.", repo_name)
            return {
                "publish_result": PublishResult.no_changes().model_dump(),
                "current_stage": "publish_complete",
            }

        logger.info("📤 Cambios detectados en {}. Haciendo commit y push...", repo_name)
        configure_identity(repo_path, settings.GIT_USER_NAME, settings.GIT_USER_EMAIL)
        sha = commit(repo_path, files, settings.COMMIT_MESSAGE)

        if settings.PUSH_CHANGES:
            push(repo_path)
        else:
            logger.info("Push disabled — commit {} kept local", sha[:8])

        result = PublishResult.published(files, sha, pushed=settings.PUSH_CHANGES)

    except Exception as e:
        reason = describe_error(e)
        logger.error("⚠️  Error al hacer push en {}: {}", repo_name, reason)
        return {
            "publish_result": PublishResult.failed(reason, files).model_dump(),
            "errors": [f"Publish failed: {reason}"],
            "current_stage": "publish_complete",
        }

    return {
        "publish_result": result.model_dump(),
        "current_stage": "publish_complete",
    }
