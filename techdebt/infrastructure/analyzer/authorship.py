"""Heuristic authorship classifier (machine-generated vs hand-written code).

Not a trained model: each matched signal adds fixed points to an AI score or
a human score, and the likelihood is the normalized AI share:

    ai = 100 * ai_score / (ai_score + 0.7 * human_score)   (50 when both are 0)

The indicator sub-scores are informational and do not feed the likelihood.
"""

import math
import re
from collections import Counter
from statistics import pstdev

from techdebt.domain.entities.authorship import (
    AICodeSummary,
    AuthorshipAnalysis,
    AuthorshipIndicators,
    AuthorshipPattern,
    AuthorshipRisk,
    PatternFrequency,
    StaticCodeMetrics,
)
from techdebt.infrastructure.analyzer.complexity import function_spans
from techdebt.infrastructure.analyzer.duplication import count_repeated_lines
from techdebt.infrastructure.analyzer.languages import language_for_path
from techdebt.infrastructure.analyzer.text_metrics import count_lines, max_brace_nesting

HUMAN_WEIGHT = 0.7
DEFAULT_AI_THRESHOLD = 70
DEFAULT_HUMAN_THRESHOLD = 30
TOP_PATTERNS = 5

_KEYWORDS = re.compile(
    r"\b(?:if|else|elif|while|for|switch|case|break|continue|return|function|def|const|let|var|class"
    r"|import|export|from|try|catch|except|finally|throw|raise|async|await|yield|new|this|self|super"
    r"|extends|implements|interface|type|enum|public|private|protected|static|abstract|lambda|with|pass)\b"
)
_BRANCH_MARKERS = re.compile(r"\b(?:else\s+if|if|elif|while|for|case|catch|except)\b|&&|\|\|")
_CONDITIONAL_OPERATORS = re.compile(r"(?:if|while|for)\s*\([^)]*[<>=!&|]+")
_DECLARATION_LINE = re.compile(r"^\s*(?:const|let|var|function|class|interface|type|enum|def)\s+")
_FUNCTION_LINE = re.compile(
    r"function\s+\w+|const\s+\w+\s*=\s*\([^)]*\)\s*=>|^\s*\w+\s*\([^)]*\)\s*\{|^\s*(?:async\s+)?def\s+\w+"
)

_GENERIC_COMMENTS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^\s*(?://|#)\s*This function",
        r"^\s*(?://|#)\s*This method",
        r"^\s*(?://|#)\s*Initialize",
        r"^\s*(?://|#)\s*TODO:",
        r"^\s*(?://|#)\s*Helper function",
        r"^\s*(?://|#)\s*Utility",
        r"^\s*(?://|#)\s*Main function",
        r"^\s*(?://|#)\s*Returns?:",
        r"^\s*(?://|#)\s*Parameters?:",
        r"^\s*(?://|#)\s*@param",
        r"^\s*(?://|#)\s*@returns?",
        r"^\s*(?://|#)\s*Example:",
        r"^\s*(?://|#)\s*Usage:",
        r"^\s*/\*\*\s*$",
        r"^\s*(?://|#)\s*Function to",
        r"^\s*(?://|#)\s*Method to",
    )
]

_GENERIC_NAMES = "data|result|response|value|item|element|temp|tmp|obj|arr|str|num|output|input"
_GENERIC_DECLARED = re.compile(rf"\b(?:const|let|var)\s+(?:{_GENERIC_NAMES})\b")
_GENERIC_ASSIGNED = re.compile(rf"^\s*(?:{_GENERIC_NAMES})\s*=(?!=)", re.MULTILINE)

_BOILERPLATE = [
    re.compile(r"try\s*{\s*//\s*TODO", re.IGNORECASE),
    re.compile(r"catch\s*\(\s*error\s*\)\s*{\s*console\.(log|error)", re.IGNORECASE),
    re.compile(r"function\s+\w+\s*\(\s*\)\s*{\s*//", re.IGNORECASE),
    re.compile(r"eslint-disable", re.IGNORECASE),
    re.compile(r"prettier-ignore", re.IGNORECASE),
    re.compile(r"except\s+Exception(?:\s+as\s+\w+)?:\s*\n\s*(?:pass|print\()"),
]

_NARRATIVE_COMMENT = re.compile(r"(?://|#)\s*(?!TODO|FIXME|NOTE|HACK|This|Function|Method)[A-Z][a-z]+.*[.!?]")
_DOMAIN_NAMES = re.compile(
    r"\b(?:user|customer|order|product|invoice|payment|account|profile|transaction|session|auth|config)\w+",
    re.IGNORECASE,
)
_REFACTOR_COMMENT = re.compile(
    r"(?://|#)\s*(?:refactor|optimize|improve|cleanup|performance|memory|FIXME|HACK|XXX)", re.IGNORECASE
)
_DEBUG_ARTIFACTS = [
    re.compile(r"console\.(?:log|debug|warn|error)\([^)]*//", re.IGNORECASE),
    re.compile(r"print\([^)]*#", re.IGNORECASE),
]

AI_TOOL_SIGNATURES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"github\s*copilot", re.IGNORECASE), "GitHub Copilot"),
    (re.compile(r"generated\s*by\s*(?:ai|copilot|chatgpt)", re.IGNORECASE), "AI Generator"),
    (re.compile(r"chatgpt", re.IGNORECASE), "ChatGPT"),
    (re.compile(r"claude\s*(?:ai)?", re.IGNORECASE), "Claude"),
    (re.compile(r"auto-generated", re.IGNORECASE), "Auto-generator"),
    (re.compile(r"AI-generated"), "AI"),
]

_SECURITY_RISK_PATTERNS = frozenset({"missing_edge_cases", "low_complexity_pattern"})
_MAINTENANCE_RISK_PATTERNS = frozenset({"generic_naming", "repetitive_structures"})
_QUALITY_RISK_PATTERNS = frozenset({"boilerplate_code", "excessive_comments"})


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_static_metrics(text: str, path: str = "") -> StaticCodeMetrics:
    """Static metrics the classifier scores against."""
    lines = text.split("\n")
    sum_cyclomatic = declaration_lines = function_count = blank_lines = 0
    keyword_count = operator_count = total_tokens = 0

    for line in lines:
        stripped = line.strip()
        if not stripped:
            blank_lines += 1
            continue
        if _DECLARATION_LINE.match(line):
            declaration_lines += 1
        if _FUNCTION_LINE.search(line):
            function_count += 1
        sum_cyclomatic += len(_BRANCH_MARKERS.findall(line))
        keyword_count += len(_KEYWORDS.findall(line))
        operator_count += len(_CONDITIONAL_OPERATORS.findall(line))
        total_tokens += len(stripped.split())

    avg_function_length = (len(lines) - blank_lines) / function_count if function_count else 0.0
    lengths = [span.length for span in function_spans(text, language_for_path(path or "file.js"))]
    stddev = pstdev(lengths) if len(lengths) >= 2 else 0.0
    max_nesting, _ = max_brace_nesting(text)

    return StaticCodeMetrics(
        sum_cyclomatic=sum_cyclomatic,
        avg_function_length=avg_function_length,
        declaration_lines=declaration_lines,
        function_count=function_count,
        max_nesting=max_nesting,
        blank_lines=blank_lines,
        keyword_ratio=keyword_count / total_tokens if total_tokens else 0.0,
        operator_ratio=operator_count / total_tokens if total_tokens else 0.0,
        function_length_stddev=stddev,
    )


def _indentation(lines: list[str]) -> tuple[int, bool]:
    """(consistency score, perfect 4-space indentation on more than 10 lines)."""
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    if not indents:
        return 0, False
    multiples_of_2 = all(i % 2 == 0 for i in indents)
    multiples_of_4 = all(i % 4 == 0 for i in indents)
    consistency = 90 if multiples_of_2 or multiples_of_4 else 60
    return consistency, multiples_of_4 and len(indents) > 10


def _comment_quality(lines: list[str], comment_lines: int) -> float:
    if comment_lines == 0:
        return 50.0
    meaningful = 0
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("//"):
            comment = stripped[2:].strip()
        elif stripped.startswith("#"):
            comment = stripped[1:].strip()
        else:
            continue
        if len(comment) > 20 and comment[-1] in ".!?":
            meaningful += 1
    return meaningful / comment_lines * 100


def _naming_quality(text: str) -> float:
    names = re.findall(r"(?:const|let|var|function|def)\s+([A-Za-z_$][\w$]*)", text)
    if not names:
        return 50.0
    descriptive = sum(
        1 for name in names
        if len(name) > 5 and (re.search(r"[a-z][A-Z]", name) or re.search(r"[a-z]_[a-z]", name))
    )
    return descriptive / len(names) * 100


def _structure_quality(text: str) -> float:
    score = 50
    if re.search(r"function\s+\w+|const\s+\w+\s*=\s*\([^)]*\)\s*=>|\bdef\s+\w+", text):
        score += 20
    if re.search(r"\bclass\s+\w+", text):
        score += 15
    if re.search(r"import\s+.*from|export\s+(?:default|const|function|class)|^from\s+\S+\s+import\b", text, re.MULTILINE):
        score += 15
    return min(100, score)


def _error_handling_quality(text: str) -> float:
    score = 0
    if re.search(r"\btry\s*(?:\{|:)", text):
        score += 40
    if re.search(r"\bif\s*\(?[^)\n]*\b(?:error|err|exception)\b", text, re.IGNORECASE):
        score += 30
    if re.search(r"throw\s+new\s+\w+Error|raise\s+\w+(?:Error|Exception)", text):
        score += 30
    return score


def analyze_authorship(text: str, path: str) -> AuthorshipAnalysis:
    """Оценивает вероятность того, что файл сгенерирован ИИ.

    Args:
        text: Содержимое файла.
        path: Путь файла (для выбора языкового профиля и в результате).

    Returns:
        AuthorshipAnalysis; ai_likelihood + human_likelihood == 100.
    """
    lines = text.split("\n")
    counts = count_lines(text)
    metrics = compute_static_metrics(text, path)
    patterns: list[AuthorshipPattern] = []
    ai_score = 0
    human_score = 0

    if metrics.sum_cyclomatic < 5 and metrics.max_nesting < 2 and counts.code > 20:
        ai_score += 30
        patterns.append(AuthorshipPattern(
            type="low_complexity_pattern",
            description=(
                f"Low cyclomatic complexity ({metrics.sum_cyclomatic}) for {counts.code} lines"
                " - AI generates simpler code"
            ),
            severity="high",
            confidence=85,
        ))

    if metrics.keyword_ratio > 0.15:
        ai_score += 25
        patterns.append(AuthorshipPattern(
            type="high_keyword_density",
            description=f"High keyword density ({metrics.keyword_ratio * 100:.1f}%) - typical of AI code",
            severity="high",
            confidence=78,
        ))

    if 0 < metrics.avg_function_length < 20 and metrics.function_length_stddev < 5:
        ai_score += 20
        patterns.append(AuthorshipPattern(
            type="uniform_function_length",
            description=(
                f"Uniform function lengths (std dev: {metrics.function_length_stddev:.1f})"
                " - AI consistency pattern"
            ),
            severity="medium",
            confidence=72,
        ))

    comment_ratio = counts.comment / counts.total if counts.total else 0.0
    if comment_ratio > 0.25:
        ai_score += 25
        patterns.append(AuthorshipPattern(
            type="excessive_comments",
            description=f"High comment ratio ({comment_ratio * 100:.1f}%) - AI over-documents",
            severity="high",
            confidence=82,
        ))
    elif comment_ratio < 0.05 and counts.code > 30:
        ai_score += 15
        patterns.append(AuthorshipPattern(
            type="minimal_comments",
            description="Very few comments for code length - Copilot pattern",
            severity="medium",
            confidence=70,
        ))

    generic_comments = sum(1 for line in lines if any(p.search(line) for p in _GENERIC_COMMENTS))
    if generic_comments > 3:
        ai_score += 30
        patterns.append(AuthorshipPattern(
            type="generic_comments",
            description=f"{generic_comments} generic AI-style comments - strong Copilot/ChatGPT indicator",
            severity="high",
            confidence=88,
        ))

    generic_names = len(_GENERIC_DECLARED.findall(text)) + len(_GENERIC_ASSIGNED.findall(text))
    if generic_names > 5:
        ai_score += 28
        patterns.append(AuthorshipPattern(
            type="generic_naming",
            description=f"{generic_names} generic variable names (data, result, etc.) - strong AI indicator",
            severity="high",
            confidence=82,
        ))
    elif generic_names == 0 and counts.code > 20:
        human_score += 18

    consistency, perfect_indentation = _indentation(lines)
    if perfect_indentation:
        ai_score += 12
        patterns.append(AuthorshipPattern(
            type="perfect_indentation",
            description="Perfect indentation consistency - AI formatting pattern",
            severity="low",
            confidence=65,
        ))

    boilerplate = sum(1 for p in _BOILERPLATE if p.search(text))
    if boilerplate > 2:
        ai_score += 15
        patterns.append(AuthorshipPattern(
            type="boilerplate_code",
            description=f"{boilerplate} boilerplate patterns detected",
            severity="medium",
            confidence=70,
        ))

    repeated = count_repeated_lines(text)
    if repeated > 3:
        ai_score += 20
        patterns.append(AuthorshipPattern(
            type="repetitive_structures",
            description=f"{repeated} repetitive code structures - AI copy-paste pattern",
            severity="high",
            confidence=80,
        ))

    # Human signals
    if _NARRATIVE_COMMENT.search(text):
        human_score += 20
    if _DOMAIN_NAMES.search(text):
        human_score += 15
    if _REFACTOR_COMMENT.search(text):
        human_score += 25
    if any(p.search(text) for p in _DEBUG_ARTIFACTS):
        human_score += 12

    for pattern, tool in AI_TOOL_SIGNATURES:
        if pattern.search(text):
            ai_score += 60
            patterns.append(AuthorshipPattern(
                type="ai_signature",
                description=f"{tool} signature detected in code/comments",
                severity="high",
                confidence=95,
            ))

    if ai_score + human_score > 0:
        ai = min(100.0, ai_score / (ai_score + human_score * HUMAN_WEIGHT) * 100)
    else:
        ai = 50.0
    ai_likelihood = round_half_up(ai)

    return AuthorshipAnalysis(
        file=path,
        ai_likelihood=ai_likelihood,
        human_likelihood=100 - ai_likelihood,
        patterns=tuple(patterns),
        static_metrics=metrics,
        indicators=AuthorshipIndicators(
            style_consistency=consistency,
            comment_quality=round_half_up(_comment_quality(lines, counts.comment)),
            naming_quality=round_half_up(_naming_quality(text)),
            structural_quality=round_half_up(_structure_quality(text)),
            error_handling_quality=round_half_up(_error_handling_quality(text)),
        ),
        total_lines=counts.total,
        code_lines=counts.code,
        comment_lines=counts.comment,
        blank_lines=counts.blank,
    )


def _files_with(analyses: list[AuthorshipAnalysis], types: frozenset[str]) -> int:
    return sum(1 for a in analyses if any(p.type in types for p in a.patterns))


def summarize_authorship(
    analyses: list[AuthorshipAnalysis],
    threshold: int = DEFAULT_AI_THRESHOLD,
    human_threshold: int = DEFAULT_HUMAN_THRESHOLD,
) -> AICodeSummary:
    """Repository-level authorship summary.

    Files above `threshold` count as AI-generated, below `human_threshold` as
    human-written, the rest as mixed.
    """
    total = len(analyses)
    ai_files = sum(1 for a in analyses if a.ai_likelihood > threshold)
    human_files = sum(1 for a in analyses if a.ai_likelihood < human_threshold)
    mixed_files = total - ai_files - human_files

    pattern_counts: Counter[str] = Counter()
    confidence_total = 0
    pattern_total = 0
    for analysis in analyses:
        for pattern in analysis.patterns:
            pattern_counts[pattern.type] += 1
            confidence_total += pattern.confidence
            pattern_total += 1

    ai_percentage = sum(a.ai_likelihood for a in analyses) / total if total else 0.0
    confidence = confidence_total / max(1, pattern_total)
    # sorted() is stable: ties keep first-appearance order
    top = sorted(pattern_counts.items(), key=lambda kv: kv[1], reverse=True)[:TOP_PATTERNS]

    risk = AuthorshipRisk(
        security_risks=_files_with(analyses, _SECURITY_RISK_PATTERNS),
        maintenance_risks=_files_with(analyses, _MAINTENANCE_RISK_PATTERNS),
        quality_risks=_files_with(analyses, _QUALITY_RISK_PATTERNS),
    )

    recommendations: list[str] = []
    if ai_percentage > 50:
        recommendations.append(
            "🔍 High AI-generated code detected (>50%). Conduct thorough code review focusing on edge cases and security."
        )
    if risk.security_risks > total * 0.3:
        recommendations.append(
            "🛡️ Implement comprehensive error handling and input validation in AI-generated sections."
        )
    if risk.maintenance_risks > total * 0.3:
        recommendations.append(
            "♻️ Refactor generic variable names and repetitive structures for better maintainability."
        )
    if risk.quality_risks > total * 0.3:
        recommendations.append("📝 Review and improve comment quality; remove generic boilerplate comments.")
    if ai_files > 0:
        recommendations.append("✅ Establish code review guidelines specifically for AI-generated code.")
        recommendations.append("🧪 Add comprehensive test coverage for AI-generated functions.")
    if not recommendations:
        recommendations.append("✨ Code quality looks good! Continue maintaining high standards.")

    return AICodeSummary(
        total_files=total,
        ai_generated_files=ai_files,
        human_written_files=human_files,
        mixed_files=mixed_files,
        ai_code_percentage=round_half_up(ai_percentage),
        confidence_score=round_half_up(confidence),
        top_patterns=tuple(PatternFrequency(pattern=p, count=c) for p, c in top),
        risk=risk,
        recommendations=tuple(recommendations),
    )
