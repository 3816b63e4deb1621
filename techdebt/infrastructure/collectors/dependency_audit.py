"""Dependency audit via package-manager tooling (npm audit, pip-audit).

Runs each tool in the project directory, retries on timeout and parses the
JSON report into severity counts. Never raises: a missing tool, a timeout or
unparseable output becomes DependencyAuditResult.error.
"""

import json
import logging
import subprocess
from pathlib import Path

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from techdebt.domain.entities.audit import DependencyAuditResult
from techdebt.domain.ports.config import AuditConfig

logger = logging.getLogger(__name__)

NPM_SEVERITIES = ("critical", "high", "moderate", "low", "info")
PYTHON_MANIFESTS = ("requirements.txt", "pyproject.toml", "setup.py")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(subprocess.TimeoutExpired),
    reraise=True,
)
def _run_tool(args: list[str], cwd: Path, timeout: int) -> subprocess.CompletedProcess:
    """Run an audit command. Non-zero exit is normal when vulnerabilities exist."""
    return subprocess.run(
        args,
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def parse_npm_audit(stdout: str) -> dict[str, int]:
    """Severity counts from `npm audit --json` (metadata block or per-package entries)."""
    data = json.loads(stdout)
    metadata = (data.get("metadata") or {}).get("vulnerabilities")
    if isinstance(metadata, dict):
        return {sev: int(metadata.get(sev, 0)) for sev in NPM_SEVERITIES}

    counts = dict.fromkeys(NPM_SEVERITIES, 0)
    for vuln in (data.get("vulnerabilities") or {}).values():
        severity = str(vuln.get("severity", "info")).lower()
        counts[severity] = counts.get(severity, 0) + 1
    return counts


def parse_pip_audit(stdout: str) -> dict[str, int]:
    """Vulnerability counts from `pip-audit -f json`.

    pip-audit reports no severity, so every vulnerability is counted as
    "unknown" unless the entry carries one.
    """
    data = json.loads(stdout)
    dependencies = data.get("dependencies", []) if isinstance(data, dict) else data
    counts: dict[str, int] = {}
    for dep in dependencies:
        for vuln in dep.get("vulns") or []:
            severity = str(vuln.get("severity") or "unknown").lower()
            counts[severity] = counts.get(severity, 0) + 1
    return counts


def _audit(tool: str, args: list[str], root: Path, timeout: int, parser) -> DependencyAuditResult:
    try:
        completed = _run_tool(args, root, timeout)
    except FileNotFoundError:
        logger.info("%s is not installed, skipping", tool)
        return DependencyAuditResult(tool=tool, error=f"{tool} not available")
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after retries in %s", tool, root)
        return DependencyAuditResult(tool=tool, error=f"{tool} timed out after {timeout}s")
    except OSError as e:
        logger.warning("%s failed to start: %s", tool, e)
        return DependencyAuditResult(tool=tool, error=str(e))

    stdout = (completed.stdout or "").strip()
    if not stdout:
        error = (completed.stderr or "").strip() or f"{tool} produced no output"
        return DependencyAuditResult(tool=tool, error=error[:500])
    try:
        return DependencyAuditResult(tool=tool, vulnerabilities=parser(stdout))
    except (json.JSONDecodeError, AttributeError, TypeError) as e:
        logger.warning("Failed to parse %s output: %s", tool, e)
        return DependencyAuditResult(tool=tool, error=f"unparseable {tool} output: {e}")


def run_dependency_audit(root: Path, config: AuditConfig | None = None) -> list[DependencyAuditResult]:
    """Аудит зависимостей проекта.

    npm audit runs when package.json exists, pip-audit when a Python manifest
    exists; each behind its toggle. Returns one result per tool that ran.
    """
    config = config or AuditConfig()
    results: list[DependencyAuditResult] = []

    if config.npm and (root / "package.json").is_file():
        results.append(_audit("npm", ["npm", "audit", "--json"], root, config.timeout, parse_npm_audit))

    if config.pip and any((root / name).is_file() for name in PYTHON_MANIFESTS):
        if (root / "requirements.txt").is_file():
            args = ["pip-audit", "-r", "requirements.txt", "-f", "json"]
        else:
            args = ["pip-audit", "-f", "json", "."]
        results.append(_audit("pip-audit", args, root, config.timeout, parse_pip_audit))

    return results
