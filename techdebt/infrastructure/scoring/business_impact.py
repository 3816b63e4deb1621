"""Business impact calculators.

Translate technical-debt counts into business metrics: debt ratio, SQALE
rating, maintainability index, cost, time to fix, risk and recommendations.
All functions are pure and guard every division.
"""

import math
from collections.abc import Iterable, Mapping

from techdebt.domain.entities.findings import Category, Finding
from techdebt.domain.entities.scan_result import BusinessImpact

DEFAULT_HOURLY_RATE = 75.0  # USD
DEFAULT_MINUTES_PER_LINE = 30.0

DEFAULT_SEVERITY_WEIGHTS: dict[str, int] = {
    "blocker": 20,
    "critical": 15,
    "major": 10,
    "minor": 5,
    "info": 1,
}

# (upper bound exclusive, divisor, unit)
_TIME_UNITS = (
    (480, 60, "hours"),
    (2400, 480, "days"),
    (9600, 2400, "weeks"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_debt_ratio(total_debt_minutes: float, lines_of_code: int, minutes_per_line: float = DEFAULT_MINUTES_PER_LINE) -> float:
    """Debt ratio in percent: debt / (lines * minutes_per_line) * 100. 0 without lines."""
    development_cost = lines_of_code * minutes_per_line
    if development_cost <= 0:
        return 0.0
    return total_debt_minutes / development_cost * 100


def calculate_sqale_rating(debt_ratio: float) -> str:
    """A: <=5%, B: <=10%, C: <=20%, D: <=50%, E: above."""
    if debt_ratio <= 5:
        return "A"
    if debt_ratio <= 10:
        return "B"
    if debt_ratio <= 20:
        return "C"
    if debt_ratio <= 50:
        return "D"
    return "E"


def calculate_maintainability_index(lines_of_code: int, cyclomatic: float, comment_ratio: float) -> float:
    """Simplified maintainability index clamped to [0, 100]; 100 for an empty codebase."""
    if lines_of_code <= 0:
        return 100.0
    complexity_penalty = min(cyclomatic / 10, 30)
    size_penalty = min(math.log(lines_of_code) * 2, 30)
    index = 100 - complexity_penalty - size_penalty + comment_ratio * 10
    return max(0.0, min(100.0, index))


def format_time(minutes: float) -> str:
    """Человекочитаемое время исправления."""
    if minutes < 60:
        return f"{_round_half_up(minutes)} minutes"
    for bound, divisor, unit in _TIME_UNITS:
        if minutes < bound:
            return f"{minutes / divisor:.1f} {unit}"
    return f"{minutes / 9600:.1f} months"


def calculate_financial_cost(total_debt_minutes: float, hourly_rate: float = DEFAULT_HOURLY_RATE) -> float:
    return total_debt_minutes / 60 * hourly_rate


def calculate_risk_score(findings: Iterable[Finding], weights: Mapping[str, int] | None = None) -> int:
    """Sum of severity weights, capped at 100."""
    weights = weights or DEFAULT_SEVERITY_WEIGHTS
    score = sum(weights.get(f.severity.value, 0) for f in findings)
    return min(100, score)


def assess_productivity_impact(cyclomatic: float, code_smells: int, debt_ratio: float) -> str:
    total = cyclomatic / 100 + code_smells / 50 + debt_ratio / 20
    if total > 2:
        return "High - Development velocity significantly impacted"
    if total > 1:
        return "Medium - Moderate slowdown in feature delivery"
    return "Low - Minimal impact on development speed"


def assess_customer_impact(security_issues: int, reliability_issues: int) -> str:
    if security_issues > 5 or reliability_issues > 10:
        return "High - Critical issues affecting user experience and security"
    if security_issues > 2 or reliability_issues > 5:
        return "Medium - Some issues may affect user satisfaction"
    return "Low - Limited direct impact on end users"


def generate_recommendations(
    sqale_rating: str,
    security_issues: int,
    cyclomatic: float,
    test_coverage: float,
    require_tests: bool = True,
    duplicate_ratio: float = 0.0,
    duplicate_ratio_threshold: float | None = None,
) -> list[str]:
    """Ordered, actionable recommendations. The last two entries are always present."""
    recommendations: list[str] = []

    if sqale_rating in ("D", "E"):
        recommendations.append("🚨 URGENT: Schedule immediate technical debt reduction sprint")
        recommendations.append("Consider allocating 30-40% of sprint capacity to refactoring")

    if security_issues > 0:
        recommendations.append(f"🔒 Address {security_issues} security vulnerabilities immediately")
        recommendations.append("Implement security code review process")

    if cyclomatic > 50:
        recommendations.append("📊 Refactor high-complexity modules to improve maintainability")
        recommendations.append("Establish complexity thresholds in CI/CD pipeline")

    if require_tests and test_coverage < 60:
        recommendations.append("🧪 Increase test coverage to at least 80%")
        recommendations.append("Implement test-driven development (TDD) practices")

    if duplicate_ratio_threshold is not None and duplicate_ratio > duplicate_ratio_threshold:
        recommendations.append(
            f"♻️ Duplicated code covers {duplicate_ratio * 100:.1f}% of lines; extract shared helpers"
        )

    recommendations.append("📈 Track technical debt metrics in sprint retrospectives")
    recommendations.append("💰 Budget 15-20% of development time for technical debt reduction")
    return recommendations


def calculate_business_impact(
    total_debt_minutes: int,
    lines_of_code: int,
    findings: list[Finding],
    cyclomatic: float,
    code_smells: int,
    test_coverage: float,
    *,
    hourly_rate: float = DEFAULT_HOURLY_RATE,
    minutes_per_line: float = DEFAULT_MINUTES_PER_LINE,
    severity_weights: Mapping[str, int] | None = None,
    require_tests: bool = True,
    duplicate_ratio: float = 0.0,
    duplicate_ratio_threshold: float | None = None,
) -> BusinessImpact:
    """Технический долг в бизнес-метриках."""
    debt_ratio = calculate_debt_ratio(total_debt_minutes, lines_of_code, minutes_per_line)
    rating = calculate_sqale_rating(debt_ratio)
    security = sum(1 for f in findings if f.category is Category.SECURITY)
    reliability = sum(1 for f in findings if f.category is Category.RELIABILITY)

    return BusinessImpact(
        financial_cost=calculate_financial_cost(total_debt_minutes, hourly_rate),
        time_to_fix=format_time(total_debt_minutes),
        risk_score=calculate_risk_score(findings, severity_weights),
        productivity_impact=assess_productivity_impact(cyclomatic, code_smells, debt_ratio),
        customer_impact=assess_customer_impact(security, reliability),
        recommendations=tuple(generate_recommendations(
            rating,
            security,
            cyclomatic,
            test_coverage,
            require_tests=require_tests,
            duplicate_ratio=duplicate_ratio,
            duplicate_ratio_threshold=duplicate_ratio_threshold,
        )),
    )
