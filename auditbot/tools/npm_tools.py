"""npm tools — subprocess wrappers for install, audit and audit fix."""

import json
import subprocess
from typing import List, Optional

from loguru import logger

from auditbot.config import settings
from auditbot.errors import InstallError
from auditbot.models.reports import Measurement, VulnerabilityCount


SEVERITIES = ("critical", "high", "moderate", "low")


def _run_npm(args: List[str], repo_path: str, timeout: Optional[int] = None) -> subprocess.CompletedProcess:
    """Run an npm subcommand inside ``repo_path`` and capture its output."""
    cmd = [settings.NPM_BINARY, *args]
    logger.debug("Running {} in {}", " ".join(cmd), repo_path)
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout or settings.COMMAND_TIMEOUT_SECONDS,
        cwd=repo_path,
    )


def _tail(output: str, lines: int = 5) -> str:
    """Last few non-empty lines of a process output, joined on one line."""
    kept = [line.strip() for line in output.strip().splitlines() if line.strip()]
    return " | ".join(kept[-lines:])


def run_npm_install(repo_path: str, timeout: Optional[int] = None) -> None:
    """
    Install the dependency set of the repository.

    Raises:
        InstallError: npm is missing, timed out, or exited non-zero.
    """
    try:
        result = _run_npm(["install"], repo_path, timeout)
    except FileNotFoundError as e:
        raise InstallError(f"npm not installed: {e}") from e
    except OSError as e:
        raise InstallError(f"npm could not be started: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise InstallError(f"npm install timed out after {e.timeout}s") from e

    if result.returncode != 0:
        detail = _tail(result.stderr) or _tail(result.stdout) or "no output"
        raise InstallError(f"npm install exited with code {result.returncode}: {detail}")

    logger.debug("npm install finished in {}", repo_path)


def run_npm_audit(repo_path: str, timeout: Optional[int] = None) -> Measurement:
    """
    Run `npm audit --json` and parse the vulnerability counts.

    npm exits non-zero whenever vulnerabilities exist, so the exit code is
    ignored and only the JSON document decides the result.

    Returns:
        Measurement.ok with the counts, or Measurement.failed when the audit
        could not run or its output is not valid JSON.
    """
    try:
        result = _run_npm(["audit", "--json"], repo_path, timeout)
    except FileNotFoundError:
        logger.warning("npm not installed, cannot audit {}", repo_path)
        return Measurement.failed("npm not installed")
    except OSError as e:
        logger.error("npm audit could not be started: {}", e)
        return Measurement.failed(f"npm audit could not be started: {e}")
    except subprocess.TimeoutExpired as e:
        logger.error("npm audit timed out after {}s", e.timeout)
        return Measurement.failed(f"npm audit timed out after {e.timeout}s")

    measurement = parse_audit_output(result.stdout)
    if not measurement.succeeded:
        logger.debug("npm audit stderr: {}", _tail(result.stderr))
    return measurement


def parse_audit_output(raw_json: str) -> Measurement:
    """
    Parse `npm audit --json` output into a Measurement.

    Counts are read from ``metadata.vulnerabilities``; a missing object or
    field counts as zero.
    """
    try:
        data = json.loads(raw_json)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Failed to parse npm audit JSON output")
        return Measurement.failed("npm audit output is not valid JSON")

    if not isinstance(data, dict):
        return Measurement.failed("npm audit output is not a JSON object")

    if "error" in data:
        logger.warning("npm audit reported an error: {}", data.get("error"))

    metadata = data.get("metadata") or {}
    vulnerabilities = metadata.get("vulnerabilities") if isinstance(metadata, dict) else None
    if not isinstance(vulnerabilities, dict):
        vulnerabilities = {}

    counts = {}
    for severity in SEVERITIES:
        value = vulnerabilities.get(severity) or 0
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return Measurement.failed(f"invalid '{severity}' count in npm audit output: {value!r}")
        counts[severity] = value

    return Measurement.ok(VulnerabilityCount(**counts))


def run_npm_audit_fix(repo_path: str, timeout: Optional[int] = None) -> Optional[str]:
    """
    Run `npm audit fix`.

    Returns:
        None on success, otherwise a short reason. Never raises for npm
        failures; partial fixes are still worth measuring.
    """
    try:
        result = _run_npm(["audit", "fix"], repo_path, timeout)
    except FileNotFoundError:
        return "npm not installed"
    except OSError as e:
        return f"npm audit fix could not be started: {e}"
    except subprocess.TimeoutExpired as e:
        return f"npm audit fix timed out after {e.timeout}s"

    if result.returncode != 0:
        detail = _tail(result.stderr) or _tail(result.stdout) or "no output"
        return f"npm audit fix exited with code {result.returncode}: {detail}"
    return None
