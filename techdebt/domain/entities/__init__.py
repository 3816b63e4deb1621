"""Domain entities: findings, per-file reports, scan results."""

from techdebt.domain.entities.audit import DependencyAuditResult
from techdebt.domain.entities.authorship import (
    AICodeSummary,
    AuthorshipAnalysis,
    AuthorshipIndicators,
    AuthorshipPattern,
    AuthorshipRisk,
    PatternFrequency,
    StaticCodeMetrics,
)
from techdebt.domain.entities.enterprise import BenchmarkComparison, EnterpriseMetrics
from techdebt.domain.entities.findings import Category, Finding, FindingKind, Severity
from techdebt.domain.entities.metrics import (
    ComplexityMetrics,
    FileFailure,
    FileReport,
    LineCounts,
    SourceUnit,
)
from techdebt.domain.entities.scan_result import (
    BusinessImpact,
    FileMetricsEntry,
    ScanResult,
    ScanSummary,
    TechnicalDebt,
    Trends,
)

__all__ = [
    "AICodeSummary",
    "AuthorshipAnalysis",
    "AuthorshipIndicators",
    "AuthorshipPattern",
    "AuthorshipRisk",
    "BenchmarkComparison",
    "BusinessImpact",
    "Category",
    "ComplexityMetrics",
    "DependencyAuditResult",
    "EnterpriseMetrics",
    "FileFailure",
    "FileMetricsEntry",
    "FileReport",
    "Finding",
    "FindingKind",
    "LineCounts",
    "PatternFrequency",
    "ScanResult",
    "ScanSummary",
    "Severity",
    "SourceUnit",
    "StaticCodeMetrics",
    "TechnicalDebt",
    "Trends",
]
