"""Enterprise KPIs estimated from a single scan.

Industry-style metrics (TDR, defect density, DORA proxies, velocity) derived
from a ScanResult, plus benchmark comparisons. Estimates only: no history is
kept, so "previous" values and DORA figures are proxies. The ScanResult is
never mutated.
"""

import math

from techdebt.domain.entities.enterprise import (
    BenchmarkComparison,
    CoverageBreakdown,
    CycleTime,
    EnterpriseMetrics,
    FocusTime,
    VelocityTrend,
)
from techdebt.domain.entities.findings import Finding, Severity
from techdebt.domain.entities.scan_result import ScanResult

LINES_PER_DAY = 200
HOURS_PER_DAY = 8

# Estimated hours to fix one finding; anything below critical counts as one hour
FIX_HOURS_BY_SEVERITY: dict[Severity, float] = {Severity.CRITICAL: 8}
DEFAULT_FIX_HOURS = 1.0


def calculate_tdr(debt_minutes: float, total_lines: int, lines_per_day: int = LINES_PER_DAY) -> float:
    """Technical Debt Ratio: debt / estimated development time * 100."""
    dev_minutes = total_lines / lines_per_day * HOURS_PER_DAY * 60
    if dev_minutes <= 0:
        return 0.0
    return debt_minutes / dev_minutes * 100


def calculate_defect_density(total_issues: int, total_lines: int) -> float:
    """Findings per 1000 lines."""
    if total_lines <= 0:
        return 0.0
    return total_issues / total_lines * 1000


def calculate_code_churn(high_complexity_files: int, total_files: int) -> float:
    if total_files <= 0:
        return 0.0
    return high_complexity_files / total_files * 100


def estimate_cycle_time(findings: tuple[Finding, ...] | list[Finding]) -> CycleTime:
    if not findings:
        return CycleTime()
    hours = sorted(FIX_HOURS_BY_SEVERITY.get(f.severity, DEFAULT_FIX_HOURS) for f in findings)
    return CycleTime(
        average=sum(hours) / len(hours),
        median=hours[len(hours) // 2],
        p95=hours[min(len(hours) - 1, math.floor(len(hours) * 0.95))],
    )


def calculate_code_quality_score(
    avg_complexity: float,
    test_coverage: float,
    code_smells: int,
    security_issues: int,
    total_files: int,
) -> float:
    """Composite quality score 0-100."""
    score = 100.0

    if avg_complexity > 20:
        score -= 30
    elif avg_complexity > 15:
        score -= 20
    elif avg_complexity > 10:
        score -= 10

    if test_coverage >= 80:
        score += 10
    elif test_coverage < 60:
        score -= 20

    smells_per_file = code_smells / total_files if total_files else 0.0
    if smells_per_file > 5:
        score -= 25
    elif smells_per_file > 3:
        score -= 15
    elif smells_per_file > 1:
        score -= 5

    if security_issues > 10:
        score -= 25
    elif security_issues > 5:
        score -= 15
    elif security_issues > 0:
        score -= 10

    return max(0.0, min(100.0, score))


def calculate_velocity_impact(tdr: float, defect_density: float, code_quality_score: float) -> VelocityTrend:
    current = 100.0
    if tdr > 40:
        current -= 40
    elif tdr > 25:
        current -= 25
    elif tdr > 10:
        current -= 10

    if defect_density > 2:
        current -= 20
    elif defect_density > 1:
        current -= 10

    if code_quality_score < 50:
        current -= 20
    elif code_quality_score < 70:
        current -= 10

    current = max(0.0, current)
    # No history: previous velocity is assumed 10% higher
    previous = min(100.0, current * 1.1)
    change = (current - previous) / previous * 100 if previous else 0.0

    if current >= 80:
        level = "Low"
    elif current >= 60:
        level = "Medium"
    elif current >= 40:
        level = "High"
    else:
        level = "Critical"
    return VelocityTrend(current=current, previous=previous, change=change, impact_level=level)


def calculate_team_satisfaction(code_quality_score: float, test_coverage: float, avg_complexity: float) -> float:
    satisfaction = code_quality_score
    if test_coverage >= 80:
        satisfaction += 10
    elif test_coverage < 40:
        satisfaction -= 15
    if avg_complexity > 15:
        satisfaction -= 15
    elif avg_complexity < 8:
        satisfaction += 5
    return max(0.0, min(100.0, satisfaction))


def calculate_enterprise_metrics(scan_result: ScanResult) -> EnterpriseMetrics:
    """Рассчитывает enterprise-метрики по результату скана."""
    summary = scan_result.summary
    coverage = summary.quality.test_coverage

    tdr = calculate_tdr(summary.technical_debt.total_minutes, summary.total_lines)
    defect_density = calculate_defect_density(summary.total_issues, summary.total_lines)
    churn = calculate_code_churn(summary.complexity.high_complexity_files, summary.total_files)
    cycle_time = estimate_cycle_time(scan_result.issues)
    quality_score = calculate_code_quality_score(
        summary.complexity.avg_cyclomatic,
        coverage,
        summary.quality.code_smells,
        summary.quality.security_issues,
        summary.total_files,
    )

    if tdr < 10:
        deployment_frequency = "Multiple per day"
    elif tdr < 25:
        deployment_frequency = "Weekly"
    else:
        deployment_frequency = "Monthly"

    if cycle_time.average < 4:
        lead_time = "<1 day"
    elif cycle_time.average < 24:
        lead_time = "1-3 days"
    else:
        lead_time = "1-2 weeks"

    if cycle_time.median < 2:
        time_to_restore = "<1 hour"
    elif cycle_time.median < 8:
        time_to_restore = "1-8 hours"
    else:
        time_to_restore = "1-2 days"

    return EnterpriseMetrics(
        technical_debt_ratio=tdr,
        defect_density=defect_density,
        code_churn_rate=churn,
        cycle_time=cycle_time,
        deployment_frequency=deployment_frequency,
        lead_time_for_changes=lead_time,
        change_failure_rate=min(50.0, defect_density * 5),
        time_to_restore_service=time_to_restore,
        velocity_trend=calculate_velocity_impact(tdr, defect_density, quality_score),
        focus_time=FocusTime(
            percentage=max(0.0, 100 - tdr * 2),
            interruption_rate=min(20, math.floor(defect_density * 3)),
        ),
        test_coverage=CoverageBreakdown(
            overall=coverage,
            unit=coverage * 0.7,
            integration=coverage * 0.2,
            e2e=coverage * 0.1,
        ),
        code_quality_score=quality_score,
        duplication_rate=min(30.0, churn * 0.5),
        maintenance_cost_ratio=min(100.0, tdr * 1.5),
        feature_delivery_velocity=max(0, 10 - math.floor(tdr / 5)),
        customer_impact_score=max(0.0, 100.0 - summary.critical_issues * 5),
        team_satisfaction_index=calculate_team_satisfaction(quality_score, coverage, summary.complexity.avg_cyclomatic),
        critical_path_risk=scan_result.business_impact.risk_score,
        scalability_index=max(0.0, 100 - tdr * 2),
        security_posture=max(0.0, 100.0 - summary.quality.security_issues * 10),
        compliance_risk=min(100.0, summary.critical_issues * 3 + summary.quality.security_issues * 5),
    )


def _tier(value: float, bounds: tuple[float, float, float, float], higher_is_better: bool) -> str:
    tiers = ("Excellent", "Good", "Fair", "Poor")
    for tier, bound in zip(tiers, bounds):
        if (value >= bound) if higher_is_better else (value < bound):
            return tier
    return "Critical"


def generate_benchmarks(metrics: EnterpriseMetrics) -> list[BenchmarkComparison]:
    """Сравнение ключевых метрик с целевыми и отраслевыми значениями."""
    coverage = metrics.test_coverage.overall
    return [
        BenchmarkComparison(
            metric="Technical Debt Ratio",
            current=metrics.technical_debt_ratio,
            target=5,
            industry=15,
            status=_tier(metrics.technical_debt_ratio, (5, 15, 25, 40), higher_is_better=False),
            gap=metrics.technical_debt_ratio - 5,
        ),
        BenchmarkComparison(
            metric="Defect Density (per 1K LOC)",
            current=metrics.defect_density,
            target=0.5,
            industry=1.0,
            status=_tier(metrics.defect_density, (0.5, 1.0, 2.0, 3.0), higher_is_better=False),
            gap=metrics.defect_density - 0.5,
        ),
        BenchmarkComparison(
            metric="Test Coverage %",
            current=coverage,
            target=80,
            industry=70,
            status=_tier(coverage, (80, 70, 60, 40), higher_is_better=True),
            gap=coverage - 80,
        ),
        BenchmarkComparison(
            metric="Code Quality Score",
            current=metrics.code_quality_score,
            target=85,
            industry=75,
            status=_tier(metrics.code_quality_score, (85, 75, 65, 50), higher_is_better=True),
            gap=metrics.code_quality_score - 85,
        ),
        BenchmarkComparison(
            metric="Maintenance Cost Ratio %",
            current=metrics.maintenance_cost_ratio,
            target=20,
            industry=30,
            status=_tier(metrics.maintenance_cost_ratio, (20, 30, 40, 50), higher_is_better=False),
            gap=metrics.maintenance_cost_ratio - 20,
        ),
    ]
