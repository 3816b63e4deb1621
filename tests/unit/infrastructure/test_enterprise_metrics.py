"""Tests for enterprise_metrics — KPI estimates and benchmarks."""

import pytest

from techdebt.domain.entities.findings import Finding, FindingKind, Severity
from techdebt.domain.entities.scan_result import (
    ComplexitySummary,
    QualitySummary,
    ScanResult,
    ScanSummary,
    TechnicalDebt,
)
from techdebt.infrastructure.scoring.enterprise_metrics import (
    calculate_code_quality_score,
    calculate_defect_density,
    calculate_enterprise_metrics,
    calculate_tdr,
    calculate_velocity_impact,
    estimate_cycle_time,
    generate_benchmarks,
)


def _finding(severity: Severity) -> Finding:
    return Finding(kind=FindingKind.MAGIC_NUMBER, severity=severity, file="a.js", message="m", effort_minutes=5)


def _result(total_lines: int = 1000, debt: int = 0, coverage: float = 80.0, issues=()) -> ScanResult:
    return ScanResult(
        summary=ScanSummary(
            total_files=10,
            total_lines=total_lines,
            total_issues=len(issues),
            technical_debt=TechnicalDebt(total_minutes=debt),
            complexity=ComplexitySummary(avg_cyclomatic=5.0),
            quality=QualitySummary(test_coverage=coverage),
        ),
        issues=tuple(issues),
    )


class TestRatios:
    def test_tdr(self):
        # 200 lines = 1 day = 480 minutes
        assert calculate_tdr(48, 200) == pytest.approx(10.0)

    def test_tdr_zero_lines(self):
        assert calculate_tdr(100, 0) == 0.0

    def test_defect_density(self):
        assert calculate_defect_density(5, 2000) == 2.5
        assert calculate_defect_density(5, 0) == 0.0


class TestCycleTime:
    def test_empty(self):
        cycle = estimate_cycle_time([])
        assert (cycle.average, cycle.median, cycle.p95) == (0.0, 0.0, 0.0)

    def test_severity_hours(self):
        cycle = estimate_cycle_time([_finding(Severity.CRITICAL), _finding(Severity.MINOR), _finding(Severity.MAJOR)])
        # hours sorted: 1, 1, 8
        assert cycle.average == pytest.approx(10 / 3)
        assert cycle.median == 1
        assert cycle.p95 == 8

    def test_only_critical_costs_a_day(self):
        cycle = estimate_cycle_time([_finding(Severity.BLOCKER), _finding(Severity.INFO)])
        assert (cycle.average, cycle.median, cycle.p95) == (1.0, 1.0, 1.0)


class TestCodeQualityScore:
    def test_perfect(self):
        assert calculate_code_quality_score(5, 90, 0, 0, 10) == 100.0

    def test_coverage_below_60_single_penalty(self):
        assert calculate_code_quality_score(5, 30, 0, 0, 10) == 80.0
        assert calculate_code_quality_score(5, 50, 0, 0, 10) == 80.0

    def test_floor_at_zero(self):
        assert calculate_code_quality_score(25, 0, 100, 20, 1) == 0.0


class TestVelocity:
    def test_healthy(self):
        trend = calculate_velocity_impact(0, 0, 100)
        assert trend.current == 100.0
        assert trend.previous == 100.0
        assert trend.change == 0.0
        assert trend.impact_level == "Low"

    def test_degraded(self):
        trend = calculate_velocity_impact(50, 3, 40)
        assert trend.current == 20.0
        assert trend.impact_level == "Critical"
        assert trend.change == pytest.approx((20 - 22) / 22 * 100)


class TestEnterpriseMetrics:
    def test_clean_codebase(self):
        metrics = calculate_enterprise_metrics(_result())
        assert metrics.technical_debt_ratio == 0.0
        assert metrics.deployment_frequency == "Multiple per day"
        assert metrics.lead_time_for_changes == "<1 day"
        assert metrics.time_to_restore_service == "<1 hour"
        assert metrics.test_coverage.unit == pytest.approx(56.0)
        assert metrics.security_posture == 100.0

    def test_heavy_debt(self):
        metrics = calculate_enterprise_metrics(_result(total_lines=200, debt=480))
        assert metrics.technical_debt_ratio == pytest.approx(100.0)
        assert metrics.deployment_frequency == "Monthly"
        assert metrics.maintenance_cost_ratio == 100.0
        assert metrics.feature_delivery_velocity == 0

    def test_does_not_mutate_result(self):
        result = _result(issues=[_finding(Severity.MAJOR)])
        before = result.to_dict()
        calculate_enterprise_metrics(result)
        assert result.to_dict() == before

    def test_to_dict_camel_case(self):
        data = calculate_enterprise_metrics(_result()).to_dict()
        assert "technicalDebtRatio" in data
        assert data["velocityTrend"]["impactLevel"] == "Low"
        assert set(data["cycleTime"]) == {"average", "median", "p95"}


class TestBenchmarks:
    def test_five_metrics(self):
        benchmarks = generate_benchmarks(calculate_enterprise_metrics(_result()))
        assert [b.metric for b in benchmarks] == [
            "Technical Debt Ratio",
            "Defect Density (per 1K LOC)",
            "Test Coverage %",
            "Code Quality Score",
            "Maintenance Cost Ratio %",
        ]

    def test_statuses(self):
        benchmarks = generate_benchmarks(calculate_enterprise_metrics(_result()))
        by_metric = {b.metric: b for b in benchmarks}
        assert by_metric["Technical Debt Ratio"].status == "Excellent"
        assert by_metric["Test Coverage %"].status == "Excellent"
        assert by_metric["Test Coverage %"].gap == 0.0

    def test_poor_coverage(self):
        benchmarks = generate_benchmarks(calculate_enterprise_metrics(_result(coverage=10.0)))
        assert benchmarks[2].status == "Critical"
