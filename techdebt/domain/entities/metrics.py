"""Per-file analysis records.

SourceUnit is the scan input, FileReport the per-file join of line counts,
complexity, findings and (optionally) authorship analysis.
"""

from dataclasses import dataclass

from techdebt.domain.entities.authorship import AuthorshipAnalysis
from techdebt.domain.entities.findings import Finding


@dataclass(frozen=True)
class SourceUnit:
    """Repository-relative path and full file text."""
    path: str
    content: str


@dataclass(frozen=True)
class LineCounts:
    """Счётчики строк файла."""
    total: int = 0
    code: int = 0
    comment: int = 0
    blank: int = 0

    def to_dict(self) -> dict:
        return {
            "totalLines": self.total,
            "codeLines": self.code,
            "commentLines": self.comment,
            "blankLines": self.blank,
        }


@dataclass(frozen=True)
class ComplexityMetrics:
    """Метрики сложности файла. cyclomatic всегда >= 1."""
    cyclomatic: int = 1
    cognitive: int = 0
    function_count: int = 0

    @property
    def average_per_function(self) -> float:
        if self.function_count <= 0:
            return 0.0
        return self.cyclomatic / self.function_count

    def to_dict(self) -> dict:
        return {
            "cyclomatic": self.cyclomatic,
            "cognitive": self.cognitive,
            "functions": self.function_count,
            "avgComplexityPerFunction": self.average_per_function,
        }


@dataclass(frozen=True)
class FileReport:
    """Результат анализа одного файла."""
    file: str
    language: str
    line_counts: LineCounts
    complexity: ComplexityMetrics
    findings: tuple[Finding, ...] = ()
    authorship: AuthorshipAnalysis | None = None
    duplicate_blocks: int = 0  # repeated 6-line windows

    @property
    def debt_minutes(self) -> int:
        return sum(f.effort_minutes for f in self.findings)

    @property
    def issue_count(self) -> int:
        return len(self.findings)


@dataclass(frozen=True)
class FileFailure:
    """A unit that could not be read or analyzed."""
    path: str
    error: str

    def to_dict(self) -> dict:
        return {"file": self.path, "error": self.error}
