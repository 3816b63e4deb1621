"""Finding model: one detected issue with severity, location and remediation effort."""

import hashlib
from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """Finding severity, ordered blocker > critical > major > minor > info."""

    BLOCKER = "blocker"
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Higher rank = more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.BLOCKER: 5,
    Severity.CRITICAL: 4,
    Severity.MAJOR: 3,
    Severity.MINOR: 2,
    Severity.INFO: 1,
}


class Category(str, Enum):
    """Issue category used by business-impact classifiers."""

    MAINTAINABILITY = "maintainability"
    SECURITY = "security"
    RELIABILITY = "reliability"


class FindingKind(str, Enum):
    """Smell and security sub-types."""

    # Smells
    LONG_METHOD = "long_method"
    GOD_CLASS = "god_class"
    MAGIC_NUMBER = "magic_number"
    DEEP_NESTING = "deep_nesting"
    COMMENTED_CODE = "commented_code"
    CODE_DUPLICATION = "code_duplication"
    MISSING_ERROR_HANDLING = "missing_error_handling"
    # Security
    HARDCODED_SECRET = "hardcoded_secret"
    SQL_INJECTION = "sql_injection"
    XSS_VULNERABILITY = "xss_vulnerability"
    INSECURE_RANDOM = "insecure_random"
    EVAL_USAGE = "eval_usage"
    INSECURE_DEPENDENCY = "insecure_dependency"

    @property
    def category(self) -> Category:
        if self in _SECURITY_KINDS:
            return Category.SECURITY
        return Category.MAINTAINABILITY


_SECURITY_KINDS = frozenset({
    FindingKind.HARDCODED_SECRET,
    FindingKind.SQL_INJECTION,
    FindingKind.XSS_VULNERABILITY,
    FindingKind.INSECURE_RANDOM,
    FindingKind.EVAL_USAGE,
    FindingKind.INSECURE_DEPENDENCY,
})

BUSINESS_IMPACT_BY_SEVERITY: dict[Severity, str] = {
    Severity.BLOCKER: "CRITICAL - Immediate production risk, potential data breach or system failure",
    Severity.CRITICAL: "HIGH - Significant impact on reliability, security, or performance",
    Severity.MAJOR: "MEDIUM - Affects maintainability and development velocity",
    Severity.MINOR: "LOW - Minor quality improvement, technical excellence",
    Severity.INFO: "MINIMAL - Informational, best practice suggestion",
}


def finding_id(kind: str, file: str, line: int | None) -> str:
    """Стабильный ID проблемы: первые 8 hex-символов sha256 от kind:file:line."""
    raw = f"{kind}:{file}:{line or 0}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:8]


@dataclass(frozen=True)
class Finding:
    """Одна обнаруженная проблема."""

    kind: FindingKind
    severity: Severity
    file: str
    message: str
    effort_minutes: int
    line: int | None = None
    weakness_id: str | None = None  # CWE reference, security findings only

    @property
    def id(self) -> str:
        return finding_id(self.kind.value, self.file, self.line)

    @property
    def category(self) -> Category:
        return self.kind.category

    @property
    def business_impact(self) -> str:
        return BUSINESS_IMPACT_BY_SEVERITY[self.severity]

    def to_dict(self) -> dict:
        """Serialize in the historical issue shape (line/cwe omitted when unset)."""
        data: dict = {
            "id": self.id,
            "type": self.kind.value,
            "severity": self.severity.value,
            "category": self.category.value,
            "file": self.file,
        }
        if self.line is not None:
            data["line"] = self.line
        data["message"] = self.message
        data["effort"] = self.effort_minutes
        data["businessImpact"] = self.business_impact
        if self.weakness_id is not None:
            data["cwe"] = self.weakness_id
        return data
