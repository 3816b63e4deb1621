"""Enterprise KPI views derived from a ScanResult."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CycleTime:
    average: float = 0.0
    median: float = 0.0
    p95: float = 0.0


@dataclass(frozen=True)
class VelocityTrend:
    current: float
    previous: float
    change: float
    impact_level: str  # Low, Medium, High, Critical


@dataclass(frozen=True)
class FocusTime:
    percentage: float
    interruption_rate: int


@dataclass(frozen=True)
class CoverageBreakdown:
    overall: float
    unit: float
    integration: float
    e2e: float


@dataclass(frozen=True)
class EnterpriseMetrics:
    """Industry-style KPIs estimated from a single scan."""
    technical_debt_ratio: float
    defect_density: float
    code_churn_rate: float
    cycle_time: CycleTime

    # DORA proxies
    deployment_frequency: str
    lead_time_for_changes: str
    change_failure_rate: float
    time_to_restore_service: str

    velocity_trend: VelocityTrend
    focus_time: FocusTime

    test_coverage: CoverageBreakdown
    code_quality_score: float
    duplication_rate: float

    maintenance_cost_ratio: float
    feature_delivery_velocity: int
    customer_impact_score: float
    team_satisfaction_index: float

    critical_path_risk: int
    scalability_index: float
    security_posture: float
    compliance_risk: float

    def to_dict(self) -> dict:
        return {
            "technicalDebtRatio": self.technical_debt_ratio,
            "defectDensity": self.defect_density,
            "codeChurnRate": self.code_churn_rate,
            "cycleTime": asdict(self.cycle_time),
            "deploymentFrequency": self.deployment_frequency,
            "leadTimeForChanges": self.lead_time_for_changes,
            "changeFailureRate": self.change_failure_rate,
            "timeToRestoreService": self.time_to_restore_service,
            "velocityTrend": {
                "current": self.velocity_trend.current,
                "previous": self.velocity_trend.previous,
                "change": self.velocity_trend.change,
                "impactLevel": self.velocity_trend.impact_level,
            },
            "focusTime": {
                "percentage": self.focus_time.percentage,
                "interruptionRate": self.focus_time.interruption_rate,
            },
            "testCoverage": asdict(self.test_coverage),
            "codeQualityScore": self.code_quality_score,
            "duplicationRate": self.duplication_rate,
            "maintenanceCostRatio": self.maintenance_cost_ratio,
            "featureDeliveryVelocity": self.feature_delivery_velocity,
            "customerImpactScore": self.customer_impact_score,
            "teamSatisfactionIndex": self.team_satisfaction_index,
            "criticalPathRisk": self.critical_path_risk,
            "scalabilityIndex": self.scalability_index,
            "securityPosture": self.security_posture,
            "complianceRisk": self.compliance_risk,
        }


@dataclass(frozen=True)
class BenchmarkComparison:
    """One metric against its target and industry reference."""
    metric: str
    current: float
    target: float
    industry: float
    status: str  # Excellent, Good, Fair, Poor, Critical
    gap: float

    def to_dict(self) -> dict:
        return asdict(self)
