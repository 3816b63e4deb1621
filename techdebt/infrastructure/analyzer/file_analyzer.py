"""Per-file analysis: joins line counts, complexity, smells, security and authorship."""

from techdebt.domain.entities.metrics import FileReport, SourceUnit
from techdebt.domain.ports.config import ScanConfig
from techdebt.infrastructure.analyzer.authorship import analyze_authorship
from techdebt.infrastructure.analyzer.code_smells import analyze_code_smells
from techdebt.infrastructure.analyzer.complexity import analyze_complexity
from techdebt.infrastructure.analyzer.duplication import duplicate_blocks
from techdebt.infrastructure.analyzer.languages import language_for_path
from techdebt.infrastructure.analyzer.security_scanner import analyze_security
from techdebt.infrastructure.analyzer.text_metrics import count_lines


def analyze_unit(unit: SourceUnit, config: ScanConfig | None = None) -> FileReport:
    """Анализирует один файл и возвращает FileReport.

    Findings keep rule order: smells first, then security. Authorship is
    attached only when AI detection is enabled.
    """
    config = config or ScanConfig()
    text = unit.content
    findings = [
        *analyze_code_smells(text, unit.path, duplicate_min_length=config.duplicate_min_length),
        *analyze_security(text, unit.path),
    ]
    authorship = analyze_authorship(text, unit.path) if config.ai_detection.enabled else None
    return FileReport(
        file=unit.path,
        language=language_for_path(unit.path).tag,
        line_counts=count_lines(text),
        complexity=analyze_complexity(text, unit.path, tuple(config.complexity_markers)),
        findings=tuple(findings),
        authorship=authorship,
        duplicate_blocks=duplicate_blocks(text, min_length=config.duplicate_min_length),
    )
