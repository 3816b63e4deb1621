"""DTOs for the scan use case."""

from dataclasses import dataclass, field

from techdebt.domain.entities.audit import DependencyAuditResult
from techdebt.domain.entities.authorship import AICodeSummary
from techdebt.domain.entities.metrics import FileFailure, FileReport
from techdebt.domain.entities.scan_result import ScanResult


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one scan: aggregate, authorship summary, per-file detail, failures."""

    result: ScanResult
    ai_summary: AICodeSummary | None = None
    file_reports: tuple[FileReport, ...] = ()
    failures: tuple[FileFailure, ...] = ()

    def to_dict(self) -> dict:
        data = self.result.to_dict()
        if self.ai_summary is not None:
            data["aiSummary"] = self.ai_summary.to_dict()
        if self.failures:
            data["failures"] = [f.to_dict() for f in self.failures]
        return data


@dataclass(frozen=True)
class ProjectScan:
    """Scan of a directory on disk, with the coverage estimate used."""

    project_path: str
    outcome: ScanOutcome
    test_coverage: float = 0.0


@dataclass
class AuditReport:
    """Dependency audit of one project (one entry per tool that ran)."""

    project_path: str
    results: list[DependencyAuditResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "projectPath": self.project_path,
            "results": [r.to_dict() for r in self.results],
            "totalVulnerabilities": sum(r.total for r in self.results),
        }
