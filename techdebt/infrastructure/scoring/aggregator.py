"""Aggregator: reduces per-file reports into one immutable ScanResult.

Pure reduction over the ordered FileReports. Worker timing never reaches
here; the caller passes reports in input order.
"""

from techdebt.domain.entities.findings import Category, Finding, Severity
from techdebt.domain.entities.metrics import FileReport
from techdebt.domain.entities.scan_result import (
    ComplexitySummary,
    FileMetricsEntry,
    QualitySummary,
    QuickWin,
    ScanResult,
    ScanSummary,
    TechnicalDebt,
    Trends,
    WorstFile,
)
from techdebt.domain.ports.config import ScanConfig
from techdebt.infrastructure.analyzer.duplication import WINDOW_SIZE
from techdebt.infrastructure.scoring.business_impact import (
    calculate_business_impact,
    calculate_debt_ratio,
    calculate_maintainability_index,
    calculate_sqale_rating,
)

HIGH_COMPLEXITY = 50
MAX_WORST_FILES = 10
MAX_QUICK_WINS = 10
MAX_CRITICAL_PATH = 5
QUICK_WIN_EFFORT = 30
_QUICK_WIN_SEVERITIES = (Severity.CRITICAL, Severity.MAJOR)


def file_score(cyclomatic: int, cognitive: int, issues: int, lines: int) -> float:
    """Оценка качества файла 0-100, чем выше, тем лучше."""
    score = 100.0
    score -= min(cyclomatic / 10, 30)
    score -= min(cognitive / 10, 20)
    score -= min(issues * 2, 30)
    if lines > 500:
        score -= 10
    if lines > 1000:
        score -= 10
    return max(0.0, score)


def _worst_file_reason(entry: FileMetricsEntry) -> str:
    if entry.issues > 5:
        return "High issue count"
    if entry.complexity.cyclomatic > HIGH_COMPLEXITY:
        return "High complexity"
    if entry.lines > 1000:
        return "Large file size"
    return "Multiple factors"


def _worst_files(entries: list[FileMetricsEntry]) -> tuple[WorstFile, ...]:
    scored = [
        WorstFile(
            file=e.file,
            score=file_score(e.complexity.cyclomatic, e.complexity.cognitive, e.issues, e.lines),
            reason=_worst_file_reason(e),
        )
        for e in entries
    ]
    scored.sort(key=lambda w: w.score)
    return tuple(scored[:MAX_WORST_FILES])


def _quick_wins(findings: list[Finding]) -> tuple[QuickWin, ...]:
    wins = [
        QuickWin(file=f.file, effort=f.effort_minutes, impact=f.business_impact)
        for f in findings
        if f.effort_minutes < QUICK_WIN_EFFORT and f.severity in _QUICK_WIN_SEVERITIES
    ]
    return tuple(wins[:MAX_QUICK_WINS])


def _critical_path(entries: list[FileMetricsEntry]) -> tuple[str, ...]:
    with_issues = [e for e in entries if e.issues > 0]
    with_issues.sort(key=lambda e: e.debt_minutes, reverse=True)
    return tuple(e.file for e in with_issues[:MAX_CRITICAL_PATH])


def aggregate(
    file_reports: list[FileReport],
    test_coverage: float = 0.0,
    config: ScanConfig | None = None,
) -> ScanResult:
    """Сводит отчёты по файлам в ScanResult.

    Args:
        file_reports: Per-file reports in input order.
        test_coverage: Test coverage percentage supplied by the caller.
        config: Scan configuration (weights, rate, thresholds).

    Returns:
        ScanResult. Empty input gives 0 files, ratio 0, rating A, index 100.
    """
    config = config or ScanConfig()

    findings: list[Finding] = []
    entries: list[FileMetricsEntry] = []
    total_lines = total_comment_lines = 0
    total_cyclomatic = total_cognitive = 0
    total_debt = 0
    high_complexity = 0
    duplicate_blocks = 0

    for report in file_reports:
        total_lines += report.line_counts.total
        total_comment_lines += report.line_counts.comment
        total_cyclomatic += report.complexity.cyclomatic
        total_cognitive += report.complexity.cognitive
        if report.complexity.cyclomatic > HIGH_COMPLEXITY or report.complexity.cognitive > HIGH_COMPLEXITY:
            high_complexity += 1

        findings.extend(report.findings)
        total_debt += report.debt_minutes
        duplicate_blocks += report.duplicate_blocks
        entries.append(FileMetricsEntry(
            file=report.file,
            lines=report.line_counts.total,
            complexity=report.complexity,
            issues=report.issue_count,
            debt_minutes=report.debt_minutes,
        ))

    file_count = len(file_reports)
    comment_ratio = total_comment_lines / total_lines if total_lines else 0.0
    debt_ratio = calculate_debt_ratio(total_debt, total_lines, config.minutes_per_line)

    security_issues = sum(1 for f in findings if f.category is Category.SECURITY)
    code_smells = sum(1 for f in findings if f.category is Category.MAINTAINABILITY)
    critical_issues = sum(1 for f in findings if f.severity in (Severity.BLOCKER, Severity.CRITICAL))
    by_severity = tuple((s.value, sum(1 for f in findings if f.severity is s)) for s in Severity)
    by_category = tuple((c.value, sum(1 for f in findings if f.category is c)) for c in Category)
    duplicate_ratio = duplicate_blocks * WINDOW_SIZE / total_lines if total_lines else 0.0

    summary = ScanSummary(
        total_files=file_count,
        total_lines=total_lines,
        total_issues=len(findings),
        critical_issues=critical_issues,
        technical_debt=TechnicalDebt(
            total_minutes=total_debt,
            debt_ratio=debt_ratio,
            sqale_rating=calculate_sqale_rating(debt_ratio),
            maintainability_index=calculate_maintainability_index(total_lines, total_cyclomatic, comment_ratio),
        ),
        complexity=ComplexitySummary(
            avg_cyclomatic=total_cyclomatic / file_count if file_count else 0.0,
            avg_cognitive=total_cognitive / file_count if file_count else 0.0,
            high_complexity_files=high_complexity,
        ),
        quality=QualitySummary(
            code_smells=code_smells,
            security_issues=security_issues,
            test_coverage=test_coverage,
        ),
        issues_by_severity=by_severity,
        issues_by_category=by_category,
    )

    business_impact = calculate_business_impact(
        total_debt,
        total_lines,
        findings,
        total_cyclomatic,
        code_smells,
        test_coverage,
        hourly_rate=config.hourly_rate,
        minutes_per_line=config.minutes_per_line,
        severity_weights=config.severity_weights,
        require_tests=config.require_tests,
        duplicate_ratio=duplicate_ratio,
        duplicate_ratio_threshold=config.duplicate_ratio_threshold,
    )

    return ScanResult(
        summary=summary,
        business_impact=business_impact,
        issues=tuple(findings),
        file_metrics=tuple(entries),
        trends=Trends(
            worst_files=_worst_files(entries),
            quick_wins=_quick_wins(findings),
            critical_path=_critical_path(entries),
        ),
    )
