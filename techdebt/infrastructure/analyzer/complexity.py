"""Lexical complexity metrics: cyclomatic, cognitive, function count.

No parsing; every number comes from the regex tokens of the file's
LanguageProfile. Pathological input degrades to cyclomatic 1 / cognitive 0.
"""

import re
from collections import Counter
from dataclasses import dataclass

from techdebt.domain.entities.metrics import ComplexityMetrics
from techdebt.infrastructure.analyzer.languages import (
    LanguageProfile,
    declared_names,
    get_language,
    language_for_path,
)

# Fallback declaration start used for brace languages when scanning spans
_GENERIC_DECLARATION = re.compile(r"\b(?:function|def|fn)\s+(\w+)")


@dataclass(frozen=True)
class FunctionSpan:
    """Function body location: start line (0-based) and length in lines."""
    name: str
    start: int
    length: int


def _profile(lang: str | LanguageProfile) -> LanguageProfile:
    if isinstance(lang, LanguageProfile):
        return lang
    return get_language(lang)


def cyclomatic_complexity(text: str, lang: str | LanguageProfile, extra_markers: tuple[str, ...] = ()) -> int:
    """McCabe-style count: 1 + branch tokens. 'else if' counts once."""
    profile = _profile(lang)
    return 1 + sum(1 for _ in profile.branch_re(extra_markers).finditer(text))


def cognitive_complexity(text: str, lang: str | LanguageProfile) -> int:
    """Nesting-weighted keyword count plus a flat recursion penalty.

    Depth moves by at most one per line: a line containing '{' opens, a line
    containing '}' closes (floor 0). A line with any cognitive keyword adds
    1 + depth. Each declared function whose name is called again in the file
    adds 1.
    """
    profile = _profile(lang)
    keywords = profile.cognitive_re
    depth = 0
    score = 0
    for line in text.split("\n"):
        stripped = line.strip()
        if "{" in stripped:
            depth += 1
        if "}" in stripped:
            depth = max(0, depth - 1)
        if keywords.search(stripped):
            score += 1 + depth
    return score + _recursion_penalty(text, profile)


def _recursion_penalty(text: str, profile: LanguageProfile) -> int:
    declarations = declared_names(text, profile)
    if not declarations:
        return 0
    declaration_offsets = {offset for _, offset in declarations}
    penalty = 0
    for name in Counter(name for name, _ in declarations):
        call = re.compile(rf"(?<![\w.$]){re.escape(name)}\s*\(")
        if any(m.start() not in declaration_offsets for m in call.finditer(text)):
            penalty += 1
    return penalty


def count_functions(text: str, lang: str | LanguageProfile) -> int:
    return len(declared_names(text, _profile(lang)))


def analyze_complexity(text: str, path: str, extra_markers: tuple[str, ...] = ()) -> ComplexityMetrics:
    """Complexity metrics of one file, language resolved from the path."""
    profile = language_for_path(path)
    return ComplexityMetrics(
        cyclomatic=cyclomatic_complexity(text, profile, extra_markers),
        cognitive=cognitive_complexity(text, profile),
        function_count=count_functions(text, profile),
    )


def function_spans(text: str, lang: str | LanguageProfile) -> list[FunctionSpan]:
    """Top-level function bodies in encounter order.

    Brace languages: from the declaration line to the line where the per-line
    brace counter returns to zero. Indent languages: from the declaration to
    the last following line indented deeper than it. Nested functions are
    part of their enclosing span.
    """
    profile = _profile(lang)
    lines = text.split("\n")
    if profile.block_style == "indent":
        return _indent_spans(lines, profile)
    return _brace_spans(lines, profile)


def _declaration_name(line: str, profile: LanguageProfile) -> str | None:
    match = profile.declaration_re.search(line) or _GENERIC_DECLARATION.search(line)
    if match is None:
        return None
    return next((g for g in match.groups() if g), "anonymous")


def _brace_spans(lines: list[str], profile: LanguageProfile) -> list[FunctionSpan]:
    spans: list[FunctionSpan] = []
    in_function = False
    start = 0
    braces = 0
    name = ""
    for i, line in enumerate(lines):
        if not in_function:
            found = _declaration_name(line, profile)
            if found is not None:
                in_function = True
                start = i
                name = found
                braces = 0
        if in_function:
            if "{" in line:
                braces += 1
            if "}" in line:
                braces -= 1
            if braces == 0 and i > start:
                spans.append(FunctionSpan(name=name, start=start, length=i - start))
                in_function = False
    return spans


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _indent_spans(lines: list[str], profile: LanguageProfile) -> list[FunctionSpan]:
    spans: list[FunctionSpan] = []
    i = 0
    while i < len(lines):
        name = _declaration_name(lines[i], profile)
        if name is None:
            i += 1
            continue
        base = _indent_of(lines[i])
        last = i
        j = i + 1
        while j < len(lines):
            if lines[j].strip():
                if _indent_of(lines[j]) <= base:
                    break
                last = j
            j += 1
        spans.append(FunctionSpan(name=name, start=i, length=last - i))
        i = last + 1
    return spans
