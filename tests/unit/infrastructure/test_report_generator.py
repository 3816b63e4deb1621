"""Tests for ReportGenerator — Markdown sections from a ScanResult."""

from pathlib import Path

from techdebt.application.scan.use_case import ScanUseCase
from techdebt.domain.entities.metrics import SourceUnit
from techdebt.domain.entities.scan_result import ScanResult
from techdebt.infrastructure.reports.report_generator import ReportGenerator, escape_markdown

VULNERABLE_JS = "\n".join([
    'const password = "hunter2";',
    "const r = eval(userInput);",
    "function load() {",
    "  return fetch(url);",
    "}",
])


def _outcome():
    use_case = ScanUseCase()
    return use_case.scan([SourceUnit(path="src/app.js", content=VULNERABLE_JS)], test_coverage=20.0)


class TestEscapeMarkdown:
    def test_escapes_pipe_and_backtick(self):
        assert escape_markdown("a|b`c") == "a\\|b\\`c"

    def test_none(self):
        assert escape_markdown(None) == ""


class TestGenerateMarkdown:
    def test_sections_present(self):
        outcome = _outcome()
        report = ReportGenerator().generate_markdown(outcome.result, "/repo/app", outcome.ai_summary)
        for heading in (
            "# 📊 Technical Debt Analysis Report",
            "## 🎯 Executive Summary",
            "## 🚀 DORA Metrics",
            "## 🚨 Critical Actions Required",
            "## 🔥 Top Files Requiring Attention",
            "## 📋 Benchmark Comparison",
            "## 💡 Recommendations",
            "## 📊 Issue Breakdown",
            "## 🤖 AI Code Detection",
        ):
            assert heading in report
        assert "`/repo/app`" in report

    def test_critical_actions_list_security_findings(self):
        outcome = _outcome()
        report = ReportGenerator().generate_markdown(outcome.result, "/repo/app")
        assert "**[BLOCKER]** Hardcoded password detected" in report
        assert "`src/app.js:2`" in report

    def test_ai_section_optional(self):
        outcome = _outcome()
        report = ReportGenerator().generate_markdown(outcome.result, "/repo/app", None)
        assert "AI Code Detection" not in report

    def test_empty_result(self):
        report = ReportGenerator().generate_markdown(ScanResult(), "/empty")
        assert "No critical issues requiring immediate attention" in report
        assert "SQALE Rating:** A" in report
        assert "Top Files Requiring Attention" not in report
        assert "Quick Wins" not in report


class TestSaveReport:
    def test_writes_file(self, tmp_path: Path):
        generator = ReportGenerator()
        path = generator.save_report("# report\n", tmp_path / "reports", "/repo/my-app")
        assert path.exists()
        assert path.parent == tmp_path / "reports"
        assert path.name.startswith("techdebt_my-app_")
        assert path.read_text(encoding="utf-8") == "# report\n"
