"""Code smells detection.

Independent line/regex rules over raw text. Each rule returns zero or more
Finding records for one file and never raises. Used by file_analyzer.
"""

import math
import re
from pathlib import PurePosixPath

from techdebt.domain.entities.findings import Finding, FindingKind, Severity
from techdebt.infrastructure.analyzer.complexity import function_spans
from techdebt.infrastructure.analyzer.duplication import DEFAULT_MIN_LENGTH, duplicate_blocks
from techdebt.infrastructure.analyzer.languages import LanguageProfile, language_for_path
from techdebt.infrastructure.analyzer.text_metrics import max_brace_nesting

LONG_METHOD_LINES = 50
VERY_LONG_METHOD_LINES = 100
GOD_FILE_LINES = 500
HUGE_FILE_LINES = 1000
MAX_MAGIC_NUMBERS = 10
NESTING_MINOR = 4
NESTING_MAJOR = 6
COMMENTED_CODE_LINES = 10
DUPLICATION_MAJOR_BLOCKS = 5

_MAGIC_NUMBER = re.compile(r"(?<![\w.])(?:[2-9]|[1-9]\d+)(?![\w.])")
_ASSIGNED_VALUE = re.compile(r"(?<![=!<>])=\s*$")
_DECLARATION_LINE = re.compile(r"^\s*(?:export\s+)?(?:const|let|var|final|static\s+final)\b")

_ASYNC_TOKENS = re.compile(
    r"\basync\b|\bawait\b|\bPromise\b|\bfetch\b|\baxios\b|\brequests\.|\bhttpx\.|\burllib\.request\b"
)
_HANDLING_TOKENS = re.compile(r"\btry\b|\bcatch\b|\.then\(|\.catch\(")


def detect_long_methods(text: str, path: str, profile: LanguageProfile | None = None) -> list[Finding]:
    """Функции длиннее 50 строк (major), длиннее 100 (critical)."""
    profile = profile or language_for_path(path)
    findings: list[Finding] = []
    for span in function_spans(text, profile):
        if span.length <= LONG_METHOD_LINES:
            continue
        findings.append(Finding(
            kind=FindingKind.LONG_METHOD,
            severity=Severity.CRITICAL if span.length > VERY_LONG_METHOD_LINES else Severity.MAJOR,
            file=path,
            line=span.start + 1,
            message=f"Function '{span.name}' is {span.length} lines long (recommended: < {LONG_METHOD_LINES} lines)",
            effort_minutes=math.ceil(span.length / 10) * 15,
        ))
    return findings


def detect_god_files(text: str, path: str) -> list[Finding]:
    """Файлы больше 500 непустых строк (critical), больше 1000 (blocker)."""
    non_blank = sum(1 for line in text.split("\n") if line.strip())
    if non_blank <= GOD_FILE_LINES:
        return []
    name = PurePosixPath(path.replace("\\", "/")).name or "unknown"
    return [Finding(
        kind=FindingKind.GOD_CLASS,
        severity=Severity.BLOCKER if non_blank > HUGE_FILE_LINES else Severity.CRITICAL,
        file=path,
        message=(
            f"File '{name}' has {non_blank} lines (recommended: < {GOD_FILE_LINES} lines). "
            "Consider splitting into smaller modules."
        ),
        effort_minutes=math.ceil(non_blank / 100) * 60,
    )]


def _has_magic_number(line: str) -> bool:
    if _DECLARATION_LINE.match(line):
        return False
    for match in _MAGIC_NUMBER.finditer(line):
        if not _ASSIGNED_VALUE.search(line[:match.start()]):
            return True
    return False


def detect_magic_numbers(text: str, path: str) -> list[Finding]:
    """Numeric literals other than 0/1/-1, one finding per line, at most 10 per file."""
    findings: list[Finding] = []
    for i, line in enumerate(text.split("\n"), 1):
        stripped = line.strip()
        if stripped.startswith(("*", "#")) or "//" in line:
            continue
        if not _has_magic_number(line):
            continue
        findings.append(Finding(
            kind=FindingKind.MAGIC_NUMBER,
            severity=Severity.MINOR,
            file=path,
            line=i,
            message="Magic number detected. Consider using named constants for better readability.",
            effort_minutes=5,
        ))
        if len(findings) >= MAX_MAGIC_NUMBERS:
            break
    return findings


def detect_deep_nesting(text: str, path: str) -> list[Finding]:
    peak, peak_line = max_brace_nesting(text)
    if peak <= NESTING_MINOR:
        return []
    return [Finding(
        kind=FindingKind.DEEP_NESTING,
        severity=Severity.MAJOR if peak > NESTING_MAJOR else Severity.MINOR,
        file=path,
        line=peak_line,
        message=f"Deep nesting detected ({peak} levels). Consider extracting methods or using early returns.",
        effort_minutes=peak * 10,
    )]


def detect_commented_code(text: str, path: str) -> list[Finding]:
    """Комментарии, похожие на код (=, ( или {). Больше 10 -> одна находка."""
    count = 0
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith(("//", "#")) and any(ch in stripped for ch in "=({"):
            count += 1
    if count <= COMMENTED_CODE_LINES:
        return []
    return [Finding(
        kind=FindingKind.COMMENTED_CODE,
        severity=Severity.MINOR,
        file=path,
        message=f"{count} lines of commented code detected. Remove dead code or use version control.",
        effort_minutes=count * 2,
    )]


def detect_duplication(text: str, path: str, min_length: int = DEFAULT_MIN_LENGTH) -> list[Finding]:
    blocks = duplicate_blocks(text, min_length=min_length)
    if blocks == 0:
        return []
    return [Finding(
        kind=FindingKind.CODE_DUPLICATION,
        severity=Severity.MAJOR if blocks > DUPLICATION_MAJOR_BLOCKS else Severity.MINOR,
        file=path,
        message=f"{blocks} duplicate code blocks detected. Consider extracting common functionality.",
        effort_minutes=blocks * 30,
    )]


def detect_missing_error_handling(text: str, path: str) -> list[Finding]:
    """Async/network calls in a file without any try/catch/.then/.catch."""
    if not _ASYNC_TOKENS.search(text) or _HANDLING_TOKENS.search(text):
        return []
    return [Finding(
        kind=FindingKind.MISSING_ERROR_HANDLING,
        severity=Severity.MAJOR,
        file=path,
        message="Async operations detected without proper error handling. Add try-catch or .catch() handlers.",
        effort_minutes=20,
    )]


def analyze_code_smells(text: str, path: str, duplicate_min_length: int = DEFAULT_MIN_LENGTH) -> list[Finding]:
    """All smell rules for one file, in rule order."""
    profile = language_for_path(path)
    return [
        *detect_long_methods(text, path, profile),
        *detect_god_files(text, path),
        *detect_magic_numbers(text, path),
        *detect_deep_nesting(text, path),
        *detect_commented_code(text, path),
        *detect_duplication(text, path, duplicate_min_length),
        *detect_missing_error_handling(text, path),
    ]
