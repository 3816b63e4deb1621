"""Dependency audit result (produced by package-manager tooling)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DependencyAuditResult:
    tool: str
    vulnerabilities: dict[str, int] = field(default_factory=dict)
    error: str | None = None

    @property
    def total(self) -> int:
        return sum(self.vulnerabilities.values())

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "vulnerabilities": dict(self.vulnerabilities),
            "total": self.total,
            "error": self.error,
        }
