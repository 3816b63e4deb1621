"""Tests for aggregator — pure reduction of FileReports into ScanResult."""

import pytest

from techdebt.domain.entities.findings import Finding, FindingKind, Severity
from techdebt.domain.entities.metrics import ComplexityMetrics, FileReport, LineCounts
from techdebt.domain.ports.config import ScanConfig
from techdebt.infrastructure.scoring.aggregator import aggregate, file_score


def _finding(
    severity: Severity = Severity.MINOR,
    kind: FindingKind = FindingKind.MAGIC_NUMBER,
    effort: int = 5,
    file: str = "a.js",
) -> Finding:
    return Finding(kind=kind, severity=severity, file=file, message="m", effort_minutes=effort)


def _report(
    path: str,
    lines: int = 100,
    cyclomatic: int = 5,
    cognitive: int = 3,
    findings: tuple[Finding, ...] = (),
    comment: int = 0,
    duplicate_blocks: int = 0,
) -> FileReport:
    return FileReport(
        file=path,
        language="js",
        line_counts=LineCounts(total=lines, code=lines - comment, comment=comment, blank=0),
        complexity=ComplexityMetrics(cyclomatic=cyclomatic, cognitive=cognitive, function_count=1),
        findings=findings,
        duplicate_blocks=duplicate_blocks,
    )


class TestAggregateEmpty:
    def test_empty_input(self):
        result = aggregate([])
        s = result.summary
        assert s.total_files == 0
        assert s.total_lines == 0
        assert s.technical_debt.debt_ratio == 0
        assert s.technical_debt.sqale_rating == "A"
        assert s.technical_debt.maintainability_index == 100
        assert s.complexity.avg_cyclomatic == 0.0
        assert dict(s.issues_by_severity) == {"blocker": 0, "critical": 0, "major": 0, "minor": 0, "info": 0}
        assert dict(s.issues_by_category) == {"maintainability": 0, "security": 0, "reliability": 0}
        assert result.trends.worst_files == ()


class TestAggregateTotals:
    def test_sums_and_averages(self):
        reports = [
            _report("a.js", lines=100, cyclomatic=10, cognitive=4, findings=(
                _finding(Severity.BLOCKER, FindingKind.HARDCODED_SECRET, 15, "a.js"),
                _finding(Severity.MINOR, effort=5, file="a.js"),
            )),
            _report("b.js", lines=300, cyclomatic=60, cognitive=10, findings=(
                _finding(Severity.CRITICAL, FindingKind.EVAL_USAGE, 20, "b.js"),
            )),
        ]
        s = aggregate(reports, test_coverage=50.0).summary
        assert s.total_files == 2
        assert s.total_lines == 400
        assert s.total_issues == 3
        assert s.critical_issues == 2
        assert s.technical_debt.total_minutes == 40
        assert s.technical_debt.debt_ratio == pytest.approx(40 / (400 * 30) * 100)
        assert s.complexity.avg_cyclomatic == 35.0
        assert s.complexity.avg_cognitive == 7.0
        assert s.complexity.high_complexity_files == 1
        assert s.quality.security_issues == 2
        assert s.quality.code_smells == 1
        assert s.quality.test_coverage == 50.0

    def test_issues_keep_input_order(self):
        reports = [
            _report("a.js", findings=(_finding(file="a.js"),)),
            _report("b.js", findings=(_finding(file="b.js"), _finding(Severity.MAJOR, file="b.js"))),
        ]
        result = aggregate(reports)
        assert [f.file for f in result.issues] == ["a.js", "b.js", "b.js"]
        assert [m.file for m in result.file_metrics] == ["a.js", "b.js"]

    def test_severity_weights_from_config(self):
        config = ScanConfig(severity_weights={"blocker": 1})
        result = aggregate([_report("a.js", findings=(_finding(Severity.BLOCKER),))], config=config)
        assert result.business_impact.risk_score == 1

    def test_partial_severity_weights_keep_defaults(self):
        config = ScanConfig(severity_weights={"blocker": 1})
        result = aggregate([_report("a.js", findings=(_finding(Severity.MAJOR),))], config=config)
        assert result.business_impact.risk_score == 10


class TestTrends:
    def test_large_file_ranks_worse(self):
        issues = tuple(_finding() for _ in range(2))
        result = aggregate([
            _report("medium.js", lines=600, findings=issues),
            _report("huge.js", lines=1200, findings=issues),
        ])
        worst = result.trends.worst_files
        assert worst[0].file == "huge.js"
        assert worst[0].score <= worst[1].score
        assert worst[0].reason == "Large file size"

    def test_file_score_bounds(self):
        assert file_score(0, 0, 0, 10) == 100.0
        assert file_score(1000, 1000, 100, 5000) == 0.0
        assert file_score(0, 0, 0, 1200) == 80.0

    def test_quick_wins(self):
        result = aggregate([_report("a.js", findings=(
            _finding(Severity.MAJOR, FindingKind.MISSING_ERROR_HANDLING, 20),
            _finding(Severity.MINOR, effort=5),
            _finding(Severity.CRITICAL, FindingKind.XSS_VULNERABILITY, 45),
        ))])
        wins = result.trends.quick_wins
        assert len(wins) == 1
        assert wins[0].effort == 20
        assert wins[0].impact.startswith("MEDIUM")

    def test_critical_path_by_debt(self):
        result = aggregate([
            _report("low.js", findings=(_finding(effort=5, file="low.js"),)),
            _report("clean.js"),
            _report("high.js", findings=(_finding(effort=50, file="high.js"),)),
        ])
        assert result.trends.critical_path == ("high.js", "low.js")


class TestDuplicationRecommendation:
    def _dup_report(self) -> FileReport:
        return _report("dup.js", lines=100, duplicate_blocks=6, findings=(
            _finding(Severity.MAJOR, FindingKind.CODE_DUPLICATION, 180, "dup.js"),
        ))

    def test_over_threshold(self):
        result = aggregate([self._dup_report()])
        assert any(r.startswith("♻️") for r in result.business_impact.recommendations)

    def test_under_threshold(self):
        result = aggregate([self._dup_report()], config=ScanConfig(duplicate_ratio_threshold=0.5))
        assert not any(r.startswith("♻️") for r in result.business_impact.recommendations)

    def test_ratio_uses_block_count_not_effort(self):
        report = _report("dup.js", lines=100, findings=(
            _finding(Severity.MAJOR, FindingKind.CODE_DUPLICATION, 180, "dup.js"),
        ))
        result = aggregate([report])
        assert not any(r.startswith("♻️") for r in result.business_impact.recommendations)


class TestToDict:
    def test_shape(self):
        data = aggregate([_report("a.js", findings=(_finding(),))]).to_dict()
        assert set(data) == {"summary", "businessImpact", "issues", "fileMetrics", "trends"}
        assert data["summary"]["technicalDebt"]["sqaleRating"] in "ABCDE"
        assert data["fileMetrics"][0]["complexity"]["avgComplexityPerFunction"] == 5.0
        assert set(data["trends"]) == {"worstFiles", "quickWins", "criticalPath"}
        assert data["issues"][0]["type"] == "magic_number"
        assert "cwe" not in data["issues"][0]
