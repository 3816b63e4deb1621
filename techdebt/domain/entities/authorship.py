"""Authorship classification records (per-file analysis and repository summary)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthorshipPattern:
    """Matched machine-authorship signal."""
    type: str
    description: str
    severity: str  # low, medium, high
    confidence: int  # 0-100

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "description": self.description,
            "severity": self.severity,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class StaticCodeMetrics:
    """Static metrics the classifier scores against."""
    sum_cyclomatic: int = 0
    avg_function_length: float = 0.0
    declaration_lines: int = 0
    function_count: int = 0
    max_nesting: int = 0
    blank_lines: int = 0
    keyword_ratio: float = 0.0
    operator_ratio: float = 0.0
    function_length_stddev: float = 0.0

    def to_dict(self) -> dict:
        return {
            "sumCyclomatic": self.sum_cyclomatic,
            "avgCountLineCode": self.avg_function_length,
            "countLineCodeDecl": self.declaration_lines,
            "countDeclFunction": self.function_count,
            "maxNesting": self.max_nesting,
            "countLineBlank": self.blank_lines,
            "keywordRatio": self.keyword_ratio,
            "operatorRatio": self.operator_ratio,
            "functionLengthStdDev": self.function_length_stddev,
        }


@dataclass(frozen=True)
class AuthorshipIndicators:
    """Informational 0-100 sub-scores; they do not feed the likelihood."""
    style_consistency: int = 0
    comment_quality: int = 0
    naming_quality: int = 0
    structural_quality: int = 0
    error_handling_quality: int = 0

    def to_dict(self) -> dict:
        return {
            "styleConsistency": self.style_consistency,
            "commentQuality": self.comment_quality,
            "namingPatterns": self.naming_quality,
            "codeStructure": self.structural_quality,
            "errorHandling": self.error_handling_quality,
        }


@dataclass(frozen=True)
class AuthorshipAnalysis:
    """Оценка вероятности машинного авторства файла.

    ai_likelihood + human_likelihood == 100.
    """
    file: str
    ai_likelihood: int
    human_likelihood: int
    patterns: tuple[AuthorshipPattern, ...]
    static_metrics: StaticCodeMetrics
    indicators: AuthorshipIndicators
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "aiLikelihood": self.ai_likelihood,
            "humanLikelihood": self.human_likelihood,
            "patterns": [p.to_dict() for p in self.patterns],
            "staticMetrics": self.static_metrics.to_dict(),
            "indicators": self.indicators.to_dict(),
            "metadata": {
                "totalLines": self.total_lines,
                "codeLines": self.code_lines,
                "commentLines": self.comment_lines,
                "blankLines": self.blank_lines,
            },
        }


@dataclass(frozen=True)
class PatternFrequency:
    pattern: str
    count: int


@dataclass(frozen=True)
class AuthorshipRisk:
    """Number of files carrying risk-indicating patterns."""
    security_risks: int = 0
    maintenance_risks: int = 0
    quality_risks: int = 0


@dataclass(frozen=True)
class AICodeSummary:
    """Сводка по авторству для всего репозитория."""
    total_files: int = 0
    ai_generated_files: int = 0
    human_written_files: int = 0
    mixed_files: int = 0
    ai_code_percentage: int = 0
    confidence_score: int = 0
    top_patterns: tuple[PatternFrequency, ...] = ()
    risk: AuthorshipRisk = field(default_factory=AuthorshipRisk)
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "totalFiles": self.total_files,
            "aiGeneratedFiles": self.ai_generated_files,
            "humanWrittenFiles": self.human_written_files,
            "mixedFiles": self.mixed_files,
            "aiCodePercentage": self.ai_code_percentage,
            "confidenceScore": self.confidence_score,
            "topAIPatterns": [{"pattern": p.pattern, "count": p.count} for p in self.top_patterns],
            "riskAssessment": {
                "securityRisks": self.risk.security_risks,
                "maintenanceRisks": self.risk.maintenance_risks,
                "qualityRisks": self.risk.quality_risks,
            },
            "recommendations": list(self.recommendations),
        }
