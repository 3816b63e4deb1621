"""Report Generator - Markdown отчёт по результатам скана.

Renders a ScanResult (plus optional AICodeSummary) into a Markdown document:
- Executive summary and health status
- Benchmark and DORA tables from enterprise metrics
- Critical actions, worst files, quick wins
- Recommendations and issue breakdown
"""

import logging
import math
from collections import Counter
from datetime import datetime
from pathlib import Path

from techdebt.domain.entities.authorship import AICodeSummary
from techdebt.domain.entities.enterprise import BenchmarkComparison, EnterpriseMetrics
from techdebt.domain.entities.findings import Finding, Severity
from techdebt.domain.entities.scan_result import ScanResult
from techdebt.infrastructure.scoring.enterprise_metrics import calculate_enterprise_metrics, generate_benchmarks

logger = logging.getLogger(__name__)

MAX_CRITICAL_ACTIONS = 5
MAX_HIGH_PRIORITY = 10
MAX_QUICK_WINS = 15


def escape_markdown(text: str | None) -> str:
    """Escape characters that break table cells and inline code."""
    if not text:
        return ""
    return text.replace("|", "\\|").replace("`", "\\`")


def health_status(metrics: EnterpriseMetrics) -> str:
    tdr = metrics.technical_debt_ratio
    quality = metrics.code_quality_score
    if tdr > 40 or quality < 50:
        return "🔴 Critical"
    if tdr > 25 or quality < 65:
        return "🟠 Needs Attention"
    if tdr > 10 or quality < 75:
        return "🟡 Good"
    return "🟢 Excellent"


def dora_level(metrics: EnterpriseMetrics) -> str:
    if metrics.deployment_frequency == "Multiple per day" and metrics.change_failure_rate < 15:
        return "🏆 Elite"
    if metrics.deployment_frequency == "Weekly":
        return "⭐ High"
    if metrics.deployment_frequency == "Monthly":
        return "📊 Medium"
    return "⚠️ Low"


def _location(finding: Finding) -> str:
    if finding.line is None:
        return finding.file
    return f"{finding.file}:{finding.line}"


def _money(value: float) -> str:
    return f"${value:,.2f}"


class ReportGenerator:
    """Генератор Markdown отчётов технического долга."""

    def generate_markdown(
        self,
        scan_result: ScanResult,
        repo_path: str,
        ai_summary: AICodeSummary | None = None,
    ) -> str:
        """Генерирует Markdown отчёт.

        Args:
            scan_result: Aggregated scan result.
            repo_path: Repository path shown in the header.
            ai_summary: Optional authorship summary; adds the AI section.

        Returns:
            Markdown string.
        """
        metrics = calculate_enterprise_metrics(scan_result)
        benchmarks = generate_benchmarks(metrics)

        sections = [
            self._header(scan_result, repo_path, metrics),
            self._executive_summary(scan_result, metrics, benchmarks),
            self._dora_section(metrics),
            self._critical_actions(scan_result),
            self._worst_files(scan_result),
            self._quick_wins(scan_result),
            self._benchmark_section(benchmarks),
            self._recommendations(scan_result),
            self._issue_breakdown(scan_result),
            self._ai_section(ai_summary),
            self._footer(),
        ]
        return "\n\n---\n\n".join(s for s in sections if s and s.strip()) + "\n"

    def save_report(self, content: str, output_dir: Path, repo_path: str) -> Path:
        """Write the report as techdebt_<name>_<timestamp>.md and return its path."""
        output_dir.mkdir(parents=True, exist_ok=True)
        name = Path(repo_path).name or "project"
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = output_dir / f"techdebt_{name}_{timestamp}.md"
        path.write_text(content, encoding="utf-8")
        logger.info("Report saved: %s", path)
        return path

    def _header(self, result: ScanResult, repo_path: str, metrics: EnterpriseMetrics) -> str:
        generated = datetime.now().isoformat(timespec="seconds")
        return f"""# 📊 Technical Debt Analysis Report

**Repository:** `{escape_markdown(repo_path)}`
**Generated:** {generated}
**Overall Health:** {health_status(metrics)}
**SQALE Rating:** {result.summary.technical_debt.sqale_rating}"""

    def _executive_summary(
        self, result: ScanResult, metrics: EnterpriseMetrics, benchmarks: list[BenchmarkComparison]
    ) -> str:
        s = result.summary
        impact = result.business_impact
        tdr, density, coverage, quality, maintenance = benchmarks
        monthly = impact.financial_cost * metrics.maintenance_cost_ratio / 100

        return f"""## 🎯 Executive Summary

| Metric | Value | Status | Industry Benchmark |
|--------|-------|--------|-------------------|
| **Technical Debt Ratio** | {metrics.technical_debt_ratio:.1f}% | {tdr.status} | {tdr.industry:g}% |
| **Code Quality Score** | {metrics.code_quality_score:.0f}/100 | {quality.status} | {quality.industry:g}/100 |
| **Defect Density** | {metrics.defect_density:.2f}/1K LOC | {density.status} | {density.industry:g}/1K LOC |
| **Test Coverage** | {metrics.test_coverage.overall:.1f}% | {coverage.status} | {coverage.industry:g}% |
| **Maintenance Cost Ratio** | {metrics.maintenance_cost_ratio:.1f}% | {maintenance.status} | {maintenance.industry:g}% |

### 💰 Financial Impact

- **Estimated Remediation Cost:** {_money(impact.financial_cost)}
- **Time to Fix:** {impact.time_to_fix}
- **Monthly Maintenance Burden:** {_money(monthly)}
- **Risk Score:** {impact.risk_score}/100

### 📈 Key Metrics

| Metric | Value |
|--------|-------|
| Total Files | {s.total_files:,} |
| Lines of Code | {s.total_lines:,} |
| Total Issues | {s.total_issues:,} |
| Critical Issues | {s.critical_issues} |
| Security Issues | {s.quality.security_issues} |
| Code Smells | {s.quality.code_smells} |
| Avg Cyclomatic | {s.complexity.avg_cyclomatic:.1f} |
| Avg Cognitive | {s.complexity.avg_cognitive:.1f} |
| High Complexity Files | {s.complexity.high_complexity_files} |
| Maintainability Index | {s.technical_debt.maintainability_index:.1f} |"""

    def _dora_section(self, metrics: EnterpriseMetrics) -> str:
        return f"""## 🚀 DORA Metrics

| Metric | Current Value | Industry Target |
|--------|---------------|-----------------|
| **Deployment Frequency** | {metrics.deployment_frequency} | Multiple per day |
| **Lead Time for Changes** | {metrics.lead_time_for_changes} | <1 day |
| **Change Failure Rate** | {metrics.change_failure_rate:.1f}% | <15% |
| **Time to Restore Service** | {metrics.time_to_restore_service} | <1 hour |

**Performance Level:** {dora_level(metrics)}"""

    def _critical_actions(self, result: ScanResult) -> str:
        urgent = [f for f in result.issues if f.severity in (Severity.BLOCKER, Severity.CRITICAL)]
        high = [f for f in result.issues if f.severity == Severity.MAJOR]

        lines = ["## 🚨 Critical Actions Required", "", "### Immediate Actions (Next 24-48 Hours)", ""]
        if urgent:
            for idx, f in enumerate(urgent[:MAX_CRITICAL_ACTIONS], 1):
                lines.append(
                    f"{idx}. **[{f.severity.value.upper()}]** {escape_markdown(f.message)} "
                    f"in `{escape_markdown(_location(f))}`"
                )
        else:
            lines.append("✅ No critical issues requiring immediate attention")

        lines += ["", "### High Priority (This Sprint)", ""]
        if high:
            for idx, f in enumerate(high[:MAX_HIGH_PRIORITY], 1):
                lines.append(f"{idx}. **[MAJOR]** {escape_markdown(f.message)} in `{escape_markdown(_location(f))}`")
        else:
            lines.append("✅ No high priority issues")
        return "\n".join(lines)

    def _worst_files(self, result: ScanResult) -> str:
        worst = result.trends.worst_files
        if not worst:
            return ""
        lines = ["## 🔥 Top Files Requiring Attention", ""]
        for i, w in enumerate(worst, 1):
            hours = math.ceil((100 - w.score) / 10)
            lines += [
                f"### {i}. `{escape_markdown(w.file)}`",
                f"- **Health Score:** {w.score:.1f}/100",
                f"- **Reason:** {escape_markdown(w.reason)}",
                f"- **Estimated Fix Time:** {hours} hours",
                "",
            ]
        return "\n".join(lines).rstrip()

    def _quick_wins(self, result: ScanResult) -> str:
        wins = result.trends.quick_wins[:MAX_QUICK_WINS]
        if not wins:
            return ""
        lines = ["## ⚡ Quick Wins (High ROI, Low Effort)", ""]
        for i, qw in enumerate(wins, 1):
            lines.append(f"{i}. **`{escape_markdown(qw.file)}`** - {escape_markdown(qw.impact)} ({qw.effort} minutes)")
        total = sum(qw.effort for qw in wins)
        lines += ["", f"**Total Quick Win Time:** {total} minutes (~{math.ceil(total / 60)} hours)"]
        return "\n".join(lines)

    def _benchmark_section(self, benchmarks: list[BenchmarkComparison]) -> str:
        rows = [
            f"| **{b.metric}** | {b.current:.1f} | {b.target:.1f} | {b.industry:.1f} | {b.gap:+.1f} | {b.status} |"
            for b in benchmarks
        ]
        return "\n".join([
            "## 📋 Benchmark Comparison",
            "",
            "| Metric | Your Value | Target | Industry Avg | Gap | Status |",
            "|--------|------------|--------|--------------|-----|--------|",
            *rows,
        ])

    def _recommendations(self, result: ScanResult) -> str:
        recs = result.business_impact.recommendations
        short = "\n".join(f"{i}. {r}" for i, r in enumerate(recs[:3], 1)) or "- No immediate actions"
        medium = (
            "\n".join(f"{i}. {r}" for i, r in enumerate(recs[3:6], 1))
            or "- Continue monitoring and maintaining current quality levels"
        )
        return f"""## 💡 Recommendations

### Short Term (1-2 Sprints)

{short}

### Medium Term (1-2 Quarters)

{medium}"""

    def _issue_breakdown(self, result: ScanResult) -> str:
        total = result.summary.total_issues
        lines = [
            "## 📊 Issue Breakdown",
            "",
            "### By Severity",
            "",
            "| Severity | Count | % of Total |",
            "|----------|-------|------------|",
        ]
        for severity, count in result.summary.issues_by_severity:
            pct = count / total * 100 if total else 0.0
            lines.append(f"| {severity.capitalize()} | {count} | {pct:.1f}% |")

        by_kind = Counter(f.kind.value for f in result.issues)
        if by_kind:
            lines += ["", "### By Type", "", "| Type | Count |", "|------|-------|"]
            for kind, count in sorted(by_kind.items(), key=lambda kv: (-kv[1], kv[0])):
                lines.append(f"| {kind.replace('_', ' ').title()} | {count} |")
        return "\n".join(lines)

    def _ai_section(self, summary: AICodeSummary | None) -> str:
        if summary is None or summary.total_files == 0:
            return ""

        def share(count: int) -> str:
            return f"{count / summary.total_files * 100:.1f}%"

        if summary.ai_code_percentage > 70:
            classification = "🔴 HIGH - Majority AI-generated"
        elif summary.ai_code_percentage > 40:
            classification = "🟡 MEDIUM - Significant AI code"
        else:
            classification = "🟢 LOW - Mostly human-written"

        patterns = "\n".join(
            f"{i}. **{p.pattern.replace('_', ' ').upper()}**: {p.count} occurrences"
            for i, p in enumerate(summary.top_patterns[:5], 1)
        ) or "- None detected"
        recs = "\n".join(f"{i}. {r}" for i, r in enumerate(summary.recommendations[:3], 1))

        return f"""## 🤖 AI Code Detection

- **Total Files Analyzed:** {summary.total_files}
- **AI-Generated Files:** {summary.ai_generated_files} ({share(summary.ai_generated_files)})
- **Human-Written Files:** {summary.human_written_files} ({share(summary.human_written_files)})
- **Mixed/Uncertain:** {summary.mixed_files}
- **AI Code Percentage:** {summary.ai_code_percentage}%
- **Detection Confidence:** {summary.confidence_score}%
- **Classification:** {classification}

### Top AI Patterns
{patterns}

### Risk Assessment
- 🛡️ **Security Risks:** {summary.risk.security_risks} files
- 🔧 **Maintenance Risks:** {summary.risk.maintenance_risks} files
- 📊 **Quality Risks:** {summary.risk.quality_risks} files

### Recommendations
{recs}"""

    def _footer(self) -> str:
        return """## 📝 Methodology

- **SQALE:** remediation effort versus estimated development effort
- **Cyclomatic Complexity:** 1 + decision points per file
- **Technical Debt Ratio:** (Remediation Time / Development Time) × 100"""
