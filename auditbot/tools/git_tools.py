"""Git tools — GitPython wrappers for clone, status, identity, commit, push operations."""

from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Set

import git
from loguru import logger

from auditbot.config import settings
from auditbot.errors import AcquireError, PublishError


def clone_repository(url: str, destination: str | Path, timeout: Optional[int] = None) -> git.Repo:
    """
    Clone ``url`` into ``destination``.

    Args:
        url: Remote repository URL.
        destination: Directory to clone into; must not exist yet.
        timeout: Seconds before the clone process is killed.

    Returns:
        The cloned repository.

    Raises:
        AcquireError: git is missing or the clone failed.
    """
    destination = str(destination)
    try:
        git.Git().clone(
            url,
            destination,
            kill_after_timeout=timeout or settings.COMMAND_TIMEOUT_SECONDS,
        )
    except git.exc.GitError as e:
        raise AcquireError(f"git clone failed: {_git_error_message(e)}") from e

    logger.debug("Cloned {} into {}", url, destination)
    return git.Repo(destination)


def get_changed_paths(repo_path: str) -> Set[str]:
    """
    Get the set of paths git reports as modified, staged or untracked.

    Args:
        repo_path: Absolute path to the git repository.

    Returns:
        Repository-relative paths, POSIX separators.
    """
    repo = git.Repo(repo_path)
    output = repo.git.status("--porcelain", "-z", "--untracked-files=all")
    paths = parse_porcelain_status(output)
    logger.debug("git status reports {} changed paths", len(paths))
    return paths


def parse_porcelain_status(output: str) -> Set[str]:
    """
    Parse `git status --porcelain -z` output into changed paths.

    Entries are ``XY <path>`` separated by NUL. Renames and copies carry the
    original path as an extra NUL-separated field, which is skipped; the new
    path is the one reported.
    """
    paths: Set[str] = set()
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        entry = fields[i]
        i += 1
        if len(entry) < 4:
            continue
        status, path = entry[:2], entry[3:]
        paths.add(path)
        if "R" in status or "C" in status:
            i += 1
    return paths


def find_manifest_changes(changed_paths: Iterable[str], manifest_files: Iterable[str]) -> List[str]:
    """
    Intersect changed paths with the manifest/lock file names.

    A path matches when its file name is one of ``manifest_files``.

    Returns:
        Sorted list of matching paths.
    """
    names = set(manifest_files)
    return sorted(p for p in changed_paths if PurePosixPath(p).name in names)


def configure_identity(repo_path: str, name: str, email: str) -> None:
    """Set the committer identity in the repository's local config."""
    repo = git.Repo(repo_path)
    with repo.config_writer() as config:
        config.set_value("user", "name", name)
        config.set_value("user", "email", email)
    logger.debug("Configured git identity {} <{}>", name, email)


def commit(
    repo_path: str,
    files: List[str],
    message: str,
) -> str:
    """
    Stage specific files and commit with a message.

    Args:
        repo_path: Absolute path to the git repository.
        files: List of file paths to stage (relative to repo root).
        message: Commit message.

    Returns:
        The commit SHA.
    """
    repo = git.Repo(repo_path)

    # Stage only the specified files
    repo.index.add(files)
    logger.debug("Staged {} files", len(files))

    new_commit = repo.index.commit(message)
    sha = new_commit.hexsha
    logger.info("Committed: {} ({})", message.split("\n")[0], sha[:8])
    return sha


def push(repo_path: str, branch: Optional[str] = None, timeout: Optional[int] = None) -> str:
    """
    Push a branch to origin.

    Args:
        repo_path: Absolute path to the git repository.
        branch: Branch name to push (default: current branch, i.e. the
            remote's default branch right after a clone).
        timeout: Seconds before the push process is killed.

    Returns:
        The pushed branch name.

    Raises:
        PublishError: the repository is on a detached HEAD or the push failed.
    """
    repo = git.Repo(repo_path)

    if branch is None:
        if repo.head.is_detached:
            raise PublishError("cannot push from a detached HEAD")
        branch = repo.active_branch.name

    try:
        repo.git.push(
            "origin",
            branch,
            kill_after_timeout=timeout or settings.COMMAND_TIMEOUT_SECONDS,
        )
    except git.exc.GitError as e:
        raise PublishError(f"git push failed: {_git_error_message(e)}") from e

    logger.info("Pushed branch '{}' to origin", branch)
    return branch


def _git_error_message(error: git.exc.GitError) -> str:
    """Prefer git's own stderr over GitPython's multi-line command dump."""
    stderr = getattr(error, "stderr", "") or ""
    stderr = stderr.strip().removeprefix("stderr:").strip().strip("'")
    lines = [line.strip() for line in stderr.splitlines() if line.strip()]
    if lines:
        return lines[-1]
    return " ".join(str(error).split())
