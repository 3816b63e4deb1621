"""ScanUseCase unit tests."""

from dataclasses import replace
from pathlib import Path

import pytest

from techdebt.application.scan import use_case as use_case_module
from techdebt.application.scan.use_case import ScanUseCase, resolve_project_path
from techdebt.domain.entities.findings import Finding, FindingKind, Severity
from techdebt.domain.entities.metrics import FileFailure, SourceUnit
from techdebt.domain.ports.config import AIDetectionConfig, AuditConfig, ScanConfig
from techdebt.infrastructure.analyzer.file_analyzer import analyze_unit
from techdebt.infrastructure.scoring.aggregator import aggregate


def _filler(count: int, prefix: str = "item") -> list[str]:
    return [f'const {prefix}{i} = load("{prefix}-{i}");' for i in range(count)]


def _kinds(outcome) -> list[tuple[str, str]]:
    return [(f.kind.value, f.severity.value) for f in outcome.result.issues]


class TestScan:
    def test_empty_input(self):
        outcome = ScanUseCase().scan([])
        summary = outcome.result.summary
        assert summary.total_files == 0
        assert summary.technical_debt.debt_ratio == 0
        assert summary.technical_debt.sqale_rating == "A"
        assert summary.technical_debt.maintainability_index == 100
        assert outcome.failures == ()

    def test_oversized_file_with_eval_and_password(self):
        lines = _filler(598) + ['const password = "hunter2";', "const result = eval(userInput);"]
        outcome = ScanUseCase().scan([SourceUnit(path="src/big.js", content="\n".join(lines))])

        kinds = _kinds(outcome)
        assert len(kinds) >= 2
        assert ("god_class", "critical") in kinds
        assert ("hardcoded_secret", "blocker") in kinds
        assert ("eval_usage", "critical") in kinds

        eval_finding = next(f for f in outcome.result.issues if f.kind is FindingKind.EVAL_USAGE)
        assert eval_finding.line == 600
        assert eval_finding.weakness_id == "CWE-95"

    def test_generic_comments_flagged(self):
        lines = []
        for i in range(4):
            lines += ["// This function does X.", f"function step{i}() {{", f"  return run({i});", "}", ""]
        outcome = ScanUseCase().scan([SourceUnit(path="steps.js", content="\n".join(lines))])
        authorship = outcome.file_reports[0].authorship
        assert "generic_comments" in [p.type for p in authorship.patterns]

    def test_repeated_block_single_duplication_finding(self):
        block = [
            "const first = computeSomethingLong(alpha, beta);",
            "const second = computeSomethingLong(gamma, delta);",
            "if (first > second) {",
            "  report(first, second, 'greater');",
            "}",
            "log('compared values for the report');",
        ]
        lines: list[str] = []
        for i in range(7):
            lines += block + [f"marker({i});"]
        outcome = ScanUseCase().scan([SourceUnit(path="dup.js", content="\n".join(lines))])

        duplication = [f for f in outcome.result.issues if f.kind is FindingKind.CODE_DUPLICATION]
        assert len(duplication) == 1
        assert duplication[0].effort_minutes == 30
        assert outcome.file_reports[0].duplicate_blocks == 1

    def test_likelihoods_sum_to_100(self):
        units = [
            SourceUnit(path="a.py", content="def f(x):\n    return x\n"),
            SourceUnit(path="b.js", content="// Generated by ChatGPT\nconst data = fetch(url);\n"),
            SourceUnit(path="c.go", content=""),
        ]
        outcome = ScanUseCase().scan(units)
        for report in outcome.file_reports:
            assert report.authorship.ai_likelihood + report.authorship.human_likelihood == 100
        assert outcome.ai_summary.total_files == 3

    def test_ai_detection_disabled(self):
        config = ScanConfig(ai_detection=AIDetectionConfig(enabled=False))
        outcome = ScanUseCase(config).scan([SourceUnit(path="a.py", content="x = 1\n")])
        assert outcome.ai_summary is None
        assert outcome.file_reports[0].authorship is None
        assert "aiSummary" not in outcome.to_dict()

    def test_bigger_file_ranks_worse(self):
        units = [
            SourceUnit(path="medium.js", content="\n".join(_filler(600, "m"))),
            SourceUnit(path="huge.js", content="\n".join(_filler(1200, "h"))),
        ]
        outcome = ScanUseCase().scan(units)
        order = [w.file for w in outcome.result.trends.worst_files]
        assert order.index("huge.js") < order.index("medium.js")

    def test_reports_keep_input_order(self):
        units = [SourceUnit(path=f"f{i}.py", content=f"value_{i} = compute()\n") for i in range(12)]
        outcome = ScanUseCase(ScanConfig(max_workers=4)).scan(units)
        assert [r.file for r in outcome.file_reports] == [u.path for u in units]

    def test_idempotent(self):
        units = [
            SourceUnit(path="app.js", content='const password = "x";\nconst y = eval(z);\n'),
            SourceUnit(path="util.py", content="def helper(a):\n    if a:\n        return 1\n    return 0\n"),
        ]
        use_case = ScanUseCase()
        assert use_case.scan(units, 40.0).to_dict() == use_case.scan(units, 40.0).to_dict()

    def test_failed_unit_isolated(self, monkeypatch):
        def flaky(unit, config=None):
            if unit.path == "bad.js":
                raise RuntimeError("boom")
            return analyze_unit(unit, config)

        monkeypatch.setattr(use_case_module, "analyze_unit", flaky)
        units = [
            SourceUnit(path="good.js", content="const a = 1;\n"),
            SourceUnit(path="bad.js", content="const b = 2;\n"),
        ]
        outcome = ScanUseCase().scan(units)
        assert outcome.result.summary.total_files == 1
        assert outcome.failures == (FileFailure(path="bad.js", error="boom"),)
        assert outcome.to_dict()["failures"] == [{"file": "bad.js", "error": "boom"}]


class TestMonotonicity:
    def test_blocker_never_lowers_risk_or_debt(self):
        config = ScanConfig()
        reports = [analyze_unit(SourceUnit(path="svc.js", content="\n".join(_filler(40))), config)]
        before = aggregate(reports, 50.0, config)

        blocker = Finding(
            kind=FindingKind.HARDCODED_SECRET,
            severity=Severity.BLOCKER,
            file="svc.js",
            message="Hardcoded password detected",
            effort_minutes=30,
            line=1,
        )
        extended = [replace(reports[0], findings=reports[0].findings + (blocker,))]
        after = aggregate(extended, 50.0, config)

        assert after.business_impact.risk_score >= before.business_impact.risk_score
        assert after.summary.technical_debt.total_minutes >= before.summary.technical_debt.total_minutes


class TestResolveProjectPath:
    def test_empty(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            resolve_project_path("   ")

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ValueError, match="does not exist"):
            resolve_project_path(str(tmp_path / "nope"))

    def test_not_directory(self, tmp_path: Path):
        f = tmp_path / "file.py"
        f.write_text("x = 1\n")
        with pytest.raises(ValueError, match="not a directory"):
            resolve_project_path(str(f))

    def test_valid(self, tmp_path: Path):
        assert resolve_project_path(str(tmp_path)) == tmp_path.resolve()


class TestScanProject:
    def test_scans_directory_and_estimates_coverage(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        (tmp_path / "tests").mkdir()
        (tmp_path / "src" / "app.js").write_text('const password = "x";\n')
        (tmp_path / "tests" / "app.test.js").write_text("test('ok', () => {});\n")

        scan = ScanUseCase().scan_project(str(tmp_path))
        assert scan.project_path == str(tmp_path.resolve())
        assert scan.test_coverage == 100.0
        assert scan.outcome.result.summary.total_files == 2
        assert scan.outcome.result.summary.quality.test_coverage == 100.0

    def test_explicit_coverage_wins(self, tmp_path: Path):
        (tmp_path / "main.py").write_text("print('hi')\n")
        scan = ScanUseCase().scan_project(str(tmp_path), test_coverage=42.0)
        assert scan.test_coverage == 42.0

    def test_read_failures_reported(self, tmp_path: Path, monkeypatch):
        def fake_collect(root, config=None):
            return [SourceUnit(path="ok.py", content="x = 1\n")], [FileFailure(path="locked.py", error="denied")]

        monkeypatch.setattr(use_case_module, "collect_source_units", fake_collect)
        scan = ScanUseCase().scan_project(str(tmp_path))
        assert scan.outcome.failures == (FileFailure(path="locked.py", error="denied"),)
        assert scan.outcome.result.summary.total_files == 1

    def test_invalid_path(self, tmp_path: Path):
        with pytest.raises(ValueError):
            ScanUseCase().scan_project(str(tmp_path / "missing"))


class TestAuditProject:
    def test_no_manifests(self, tmp_path: Path):
        report = ScanUseCase().audit_project(str(tmp_path))
        assert report.results == []
        assert report.to_dict() == {
            "projectPath": str(tmp_path.resolve()),
            "results": [],
            "totalVulnerabilities": 0,
        }

    def test_toggles_passed_through(self, tmp_path: Path, monkeypatch):
        seen = {}

        def fake_audit(root, config=None):
            seen["config"] = config
            return []

        monkeypatch.setattr(use_case_module, "run_dependency_audit", fake_audit)
        config = ScanConfig(audit=AuditConfig(npm=False, timeout=5))
        ScanUseCase(config).audit_project(str(tmp_path))
        assert seen["config"].npm is False
        assert seen["config"].timeout == 5
