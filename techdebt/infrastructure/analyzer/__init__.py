"""Per-file heuristic analyzers."""

from techdebt.infrastructure.analyzer.authorship import analyze_authorship, summarize_authorship
from techdebt.infrastructure.analyzer.code_smells import analyze_code_smells
from techdebt.infrastructure.analyzer.complexity import (
    analyze_complexity,
    cognitive_complexity,
    count_functions,
    cyclomatic_complexity,
)
from techdebt.infrastructure.analyzer.file_analyzer import analyze_unit
from techdebt.infrastructure.analyzer.languages import LANGUAGES, LanguageProfile, language_for_path
from techdebt.infrastructure.analyzer.security_scanner import analyze_security
from techdebt.infrastructure.analyzer.text_metrics import count_lines

__all__ = [
    "LANGUAGES",
    "LanguageProfile",
    "language_for_path",
    "count_lines",
    "cyclomatic_complexity",
    "cognitive_complexity",
    "count_functions",
    "analyze_complexity",
    "analyze_code_smells",
    "analyze_security",
    "analyze_authorship",
    "summarize_authorship",
    "analyze_unit",
]
