"""Tests for business_impact — ratio, rating, index, cost, risk, recommendations."""

import pytest

from techdebt.domain.entities.findings import Finding, FindingKind, Severity
from techdebt.infrastructure.scoring.business_impact import (
    assess_customer_impact,
    assess_productivity_impact,
    calculate_business_impact,
    calculate_debt_ratio,
    calculate_financial_cost,
    calculate_maintainability_index,
    calculate_risk_score,
    calculate_sqale_rating,
    format_time,
    generate_recommendations,
)


def _finding(severity: Severity, kind: FindingKind = FindingKind.MAGIC_NUMBER) -> Finding:
    return Finding(kind=kind, severity=severity, file="a.js", message="m", effort_minutes=10)


class TestDebtRatio:
    def test_zero_lines(self):
        assert calculate_debt_ratio(100, 0) == 0.0

    def test_ratio(self):
        # 300 / (100 * 30) * 100
        assert calculate_debt_ratio(300, 100) == pytest.approx(10.0)

    def test_custom_minutes_per_line(self):
        assert calculate_debt_ratio(300, 100, minutes_per_line=60) == pytest.approx(5.0)


class TestSqaleRating:
    @pytest.mark.parametrize(
        ("ratio", "rating"),
        [(0, "A"), (5, "A"), (5.01, "B"), (10, "B"), (20, "C"), (20.5, "D"), (50, "D"), (50.1, "E")],
    )
    def test_thresholds(self, ratio: float, rating: str):
        assert calculate_sqale_rating(ratio) == rating


class TestMaintainabilityIndex:
    def test_empty_codebase(self):
        assert calculate_maintainability_index(0, 0, 0) == 100.0

    def test_clamped(self):
        assert 0 <= calculate_maintainability_index(10**9, 10**6, 0) <= 100
        assert calculate_maintainability_index(1, 0, 5.0) == 100.0

    def test_penalties(self):
        # 100 - min(50/10, 30) - min(ln(100)*2, 30)
        expected = 100 - 5 - min(2 * 4.605170185988092, 30)
        assert calculate_maintainability_index(100, 50, 0) == pytest.approx(expected)


class TestFormatTime:
    @pytest.mark.parametrize(
        ("minutes", "text"),
        [
            (0, "0 minutes"),
            (45, "45 minutes"),
            (90, "1.5 hours"),
            (960, "2.0 days"),
            (4800, "2.0 weeks"),
            (19200, "2.0 months"),
        ],
    )
    def test_units(self, minutes: int, text: str):
        assert format_time(minutes) == text


class TestCostAndRisk:
    def test_financial_cost(self):
        assert calculate_financial_cost(120, 75) == 150.0

    def test_risk_score_weights(self):
        findings = [_finding(Severity.BLOCKER), _finding(Severity.MINOR)]
        assert calculate_risk_score(findings) == 25

    def test_risk_score_capped(self):
        assert calculate_risk_score([_finding(Severity.BLOCKER)] * 10) == 100

    def test_custom_weights(self):
        assert calculate_risk_score([_finding(Severity.MAJOR)], {"major": 3}) == 3


class TestAssessments:
    def test_productivity_levels(self):
        assert assess_productivity_impact(0, 0, 0).startswith("Low")
        assert assess_productivity_impact(150, 0, 0).startswith("Medium")
        assert assess_productivity_impact(300, 0, 0).startswith("High")

    def test_customer_levels(self):
        assert assess_customer_impact(0, 0).startswith("Low")
        assert assess_customer_impact(3, 0).startswith("Medium")
        assert assess_customer_impact(6, 0).startswith("High")
        assert assess_customer_impact(0, 11).startswith("High")


class TestRecommendations:
    def test_baseline_always_last(self):
        recs = generate_recommendations("A", 0, 0, 100)
        assert len(recs) == 2
        assert recs[-2].startswith("📈")
        assert recs[-1].startswith("💰")

    def test_all_triggers_in_order(self):
        recs = generate_recommendations("E", 3, 60, 10, duplicate_ratio=0.2, duplicate_ratio_threshold=0.05)
        assert recs[0].startswith("🚨")
        assert recs[2] == "🔒 Address 3 security vulnerabilities immediately"
        assert recs[4].startswith("📊")
        assert recs[6].startswith("🧪")
        assert recs[8].startswith("♻️")
        assert len(recs) == 11

    def test_tests_not_required(self):
        recs = generate_recommendations("A", 0, 0, 0, require_tests=False)
        assert not any(r.startswith("🧪") for r in recs)


class TestCalculateBusinessImpact:
    def test_combines_calculators(self):
        findings = [
            _finding(Severity.BLOCKER, FindingKind.EVAL_USAGE),
            _finding(Severity.MAJOR),
        ]
        impact = calculate_business_impact(120, 100, findings, 10, 1, 90)
        assert impact.financial_cost == 150.0
        assert impact.time_to_fix == "2.0 hours"
        assert impact.risk_score == 30
        assert impact.customer_impact.startswith("Low")
        assert any("1 security" in r for r in impact.recommendations)

    def test_to_dict_keys(self):
        data = calculate_business_impact(0, 0, [], 0, 0, 0).to_dict()
        assert set(data) == {
            "financialCost", "timeToFix", "riskScore", "productivityImpact", "customerImpact", "recommendations",
        }
