"""Repository-level scan result.

ScanResult is the single artifact downstream reporting reads. to_dict() emits
the historical camelCase JSON shape field-for-field.
"""

from dataclasses import dataclass, field

from techdebt.domain.entities.findings import Finding
from techdebt.domain.entities.metrics import ComplexityMetrics


@dataclass(frozen=True)
class TechnicalDebt:
    total_minutes: int = 0
    debt_ratio: float = 0.0
    sqale_rating: str = "A"
    maintainability_index: float = 100.0


@dataclass(frozen=True)
class ComplexitySummary:
    avg_cyclomatic: float = 0.0
    avg_cognitive: float = 0.0
    high_complexity_files: int = 0


@dataclass(frozen=True)
class QualitySummary:
    code_smells: int = 0
    security_issues: int = 0
    test_coverage: float = 0.0


@dataclass(frozen=True)
class ScanSummary:
    """Общие счётчики скана."""
    total_files: int = 0
    total_lines: int = 0
    total_issues: int = 0
    critical_issues: int = 0
    technical_debt: TechnicalDebt = field(default_factory=TechnicalDebt)
    complexity: ComplexitySummary = field(default_factory=ComplexitySummary)
    quality: QualitySummary = field(default_factory=QualitySummary)
    issues_by_severity: tuple[tuple[str, int], ...] = ()
    issues_by_category: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True)
class BusinessImpact:
    """Технический долг в бизнес-метриках."""
    financial_cost: float = 0.0
    time_to_fix: str = "0 minutes"
    risk_score: int = 0
    productivity_impact: str = ""
    customer_impact: str = ""
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "financialCost": self.financial_cost,
            "timeToFix": self.time_to_fix,
            "riskScore": self.risk_score,
            "productivityImpact": self.productivity_impact,
            "customerImpact": self.customer_impact,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class FileMetricsEntry:
    file: str
    lines: int
    complexity: ComplexityMetrics
    issues: int
    debt_minutes: int

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "lines": self.lines,
            "complexity": self.complexity.to_dict(),
            "issues": self.issues,
            "debtMinutes": self.debt_minutes,
        }


@dataclass(frozen=True)
class WorstFile:
    file: str
    score: float
    reason: str


@dataclass(frozen=True)
class QuickWin:
    file: str
    effort: int
    impact: str


@dataclass(frozen=True)
class Trends:
    worst_files: tuple[WorstFile, ...] = ()
    quick_wins: tuple[QuickWin, ...] = ()
    critical_path: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScanResult:
    """Результат полного скана репозитория."""
    summary: ScanSummary = field(default_factory=ScanSummary)
    business_impact: BusinessImpact = field(default_factory=BusinessImpact)
    issues: tuple[Finding, ...] = ()
    file_metrics: tuple[FileMetricsEntry, ...] = ()
    trends: Trends = field(default_factory=Trends)

    def to_dict(self) -> dict:
        s = self.summary
        return {
            "summary": {
                "totalFiles": s.total_files,
                "totalLines": s.total_lines,
                "totalIssues": s.total_issues,
                "criticalIssues": s.critical_issues,
                "technicalDebt": {
                    "totalMinutes": s.technical_debt.total_minutes,
                    "debtRatio": s.technical_debt.debt_ratio,
                    "sqaleRating": s.technical_debt.sqale_rating,
                    "maintainabilityIndex": s.technical_debt.maintainability_index,
                },
                "complexity": {
                    "avgCyclomatic": s.complexity.avg_cyclomatic,
                    "avgCognitive": s.complexity.avg_cognitive,
                    "highComplexityFiles": s.complexity.high_complexity_files,
                },
                "quality": {
                    "codeSmells": s.quality.code_smells,
                    "securityIssues": s.quality.security_issues,
                    "testCoverage": s.quality.test_coverage,
                },
                "issuesBySeverity": dict(s.issues_by_severity),
                "issuesByCategory": dict(s.issues_by_category),
            },
            "businessImpact": self.business_impact.to_dict(),
            "issues": [f.to_dict() for f in self.issues],
            "fileMetrics": [m.to_dict() for m in self.file_metrics],
            "trends": {
                "worstFiles": [
                    {"file": w.file, "score": w.score, "reason": w.reason}
                    for w in self.trends.worst_files
                ],
                "quickWins": [
                    {"file": q.file, "effort": q.effort, "impact": q.impact}
                    for q in self.trends.quick_wins
                ],
                "criticalPath": list(self.trends.critical_path),
            },
        }
