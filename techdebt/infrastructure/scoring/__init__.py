"""Scoring: aggregation, business impact and enterprise KPIs."""

from techdebt.infrastructure.scoring.aggregator import aggregate
from techdebt.infrastructure.scoring.enterprise_metrics import calculate_enterprise_metrics, generate_benchmarks

__all__ = ["aggregate", "calculate_enterprise_metrics", "generate_benchmarks"]
