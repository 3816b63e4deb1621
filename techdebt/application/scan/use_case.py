"""Scan use case - orchestrates per-file analysis and aggregation."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from techdebt.application.scan.dto import AuditReport, ProjectScan, ScanOutcome
from techdebt.domain.entities.metrics import FileFailure, FileReport, SourceUnit
from techdebt.domain.ports.config import ScanConfig
from techdebt.infrastructure.analyzer.authorship import summarize_authorship
from techdebt.infrastructure.analyzer.file_analyzer import analyze_unit
from techdebt.infrastructure.collectors.dependency_audit import run_dependency_audit
from techdebt.infrastructure.collectors.file_collector import collect_source_units, estimate_test_coverage
from techdebt.infrastructure.scoring.aggregator import aggregate

logger = logging.getLogger(__name__)


def resolve_project_path(project_path: str) -> Path:
    """Проверяет путь проекта.

    Raises:
        ValueError: If path is empty, missing, not a directory or unreadable.
    """
    if not project_path or not project_path.strip():
        raise ValueError("Project path cannot be empty")

    path = Path(project_path).resolve()
    if not path.exists():
        raise ValueError(f"Project path does not exist: {project_path}")
    if not path.is_dir():
        raise ValueError(f"Project path is not a directory: {project_path}")
    if not os.access(path, os.R_OK):
        raise ValueError(f"No read permission for: {project_path}")
    return path


class ScanUseCase:
    """Runs the analysis pipeline: units -> FileReports (worker pool) -> ScanResult."""

    def __init__(self, config: ScanConfig | None = None) -> None:
        self._config = config or ScanConfig()

    @property
    def config(self) -> ScanConfig:
        return self._config

    def scan(self, units: list[SourceUnit], test_coverage: float = 0.0) -> ScanOutcome:
        """Analyze units in parallel and reduce them in input order.

        A unit whose analysis raises is logged and reported as FileFailure;
        the rest of the scan continues.
        """
        reports: dict[int, FileReport] = {}
        failures: dict[int, FileFailure] = {}

        if units:
            workers = min(self._config.max_workers, len(units))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_to_index = {
                    executor.submit(analyze_unit, unit, self._config): index
                    for index, unit in enumerate(units)
                }
                for future in as_completed(future_to_index):
                    index = future_to_index[future]
                    try:
                        reports[index] = future.result()
                    except Exception as e:
                        logger.warning("Failed to analyze %s: %s", units[index].path, e)
                        failures[index] = FileFailure(path=units[index].path, error=str(e))

        ordered = [reports[i] for i in sorted(reports)]
        result = aggregate(ordered, test_coverage, self._config)

        ai_summary = None
        if self._config.ai_detection.enabled:
            ai_summary = summarize_authorship(
                [r.authorship for r in ordered if r.authorship is not None],
                threshold=self._config.ai_detection.threshold,
                human_threshold=self._config.ai_detection.human_threshold,
            )

        logger.info(
            "Scan complete: %d files, %d issues, %d failures",
            result.summary.total_files,
            result.summary.total_issues,
            len(failures),
        )
        return ScanOutcome(
            result=result,
            ai_summary=ai_summary,
            file_reports=tuple(ordered),
            failures=tuple(failures[i] for i in sorted(failures)),
        )

    def scan_project(self, project_path: str, test_coverage: float | None = None) -> ProjectScan:
        """Collect files under project_path and scan them.

        test_coverage defaults to the test-file ratio estimate.

        Raises:
            ValueError: If path is invalid or inaccessible.
        """
        path = resolve_project_path(project_path)
        logger.info("Scanning project: %s", path)

        units, read_failures = collect_source_units(path, self._config)
        if test_coverage is None:
            test_coverage = estimate_test_coverage([u.path for u in units])

        outcome = self.scan(units, test_coverage)
        if read_failures:
            outcome = ScanOutcome(
                result=outcome.result,
                ai_summary=outcome.ai_summary,
                file_reports=outcome.file_reports,
                failures=tuple(read_failures) + outcome.failures,
            )
        return ProjectScan(project_path=str(path), outcome=outcome, test_coverage=test_coverage)

    def audit_project(self, project_path: str) -> AuditReport:
        """Run package-manager audits for the project (never raises on tool errors)."""
        path = resolve_project_path(project_path)
        return AuditReport(project_path=str(path), results=run_dependency_audit(path, self._config.audit))
