"""Finding entity unit tests."""

from techdebt.domain.entities.findings import Category, Finding, FindingKind, Severity, finding_id


def test_finding_id_is_stable():
    """Same kind/file/line always gives the same 8-char hex id."""
    first = finding_id("eval_usage", "src/app.js", 12)
    assert first == finding_id("eval_usage", "src/app.js", 12)
    assert len(first) == 8
    int(first, 16)


def test_finding_id_depends_on_location():
    assert finding_id("eval_usage", "src/app.js", 12) != finding_id("eval_usage", "src/app.js", 13)
    assert finding_id("eval_usage", "a.js", 1) != finding_id("eval_usage", "b.js", 1)


def test_missing_line_hashes_as_zero():
    assert finding_id("god_class", "big.py", None) == finding_id("god_class", "big.py", 0)


def test_severity_rank_order():
    ranks = [s.rank for s in (Severity.BLOCKER, Severity.CRITICAL, Severity.MAJOR, Severity.MINOR, Severity.INFO)]
    assert ranks == sorted(ranks, reverse=True)


def test_category_mapping():
    assert FindingKind.HARDCODED_SECRET.category is Category.SECURITY
    assert FindingKind.EVAL_USAGE.category is Category.SECURITY
    assert FindingKind.LONG_METHOD.category is Category.MAINTAINABILITY
    assert FindingKind.CODE_DUPLICATION.category is Category.MAINTAINABILITY


def test_to_dict_omits_unset_line_and_cwe():
    finding = Finding(
        kind=FindingKind.GOD_CLASS,
        severity=Severity.CRITICAL,
        file="big.py",
        message="too big",
        effort_minutes=360,
    )
    data = finding.to_dict()
    assert "line" not in data
    assert "cwe" not in data
    assert data["type"] == "god_class"
    assert data["category"] == "maintainability"
    assert data["effort"] == 360
    assert data["businessImpact"].startswith("HIGH")


def test_to_dict_includes_line_and_cwe():
    finding = Finding(
        kind=FindingKind.EVAL_USAGE,
        severity=Severity.CRITICAL,
        file="app.js",
        message="eval",
        effort_minutes=20,
        line=3,
        weakness_id="CWE-95",
    )
    data = finding.to_dict()
    assert data["line"] == 3
    assert data["cwe"] == "CWE-95"
    assert data["id"] == finding.id
    assert list(data) == [
        "id", "type", "severity", "category", "file", "line", "message", "effort", "businessImpact", "cwe",
    ]
