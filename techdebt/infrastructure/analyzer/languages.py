"""Per-language lexical profiles.

One frozen row per language tag. Every regex heuristic in the analyzer reads
its tokens from here, so adding a language means adding a row.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePosixPath

DEFAULT_LANGUAGE = "js"

# Ternary "?" that is not optional chaining (?.) or nullish coalescing (??)
_TERNARY = r"(?<!\?)\?(?![.?])"
_C_FAMILY_BRANCHES = (r"\belse\s+if\b", r"\bif\b", r"\bfor\b", r"\bwhile\b", r"\bcase\b", r"\bcatch\b", r"&&", r"\|\|", _TERNARY)

# Function/method declarations, group(1) = name
_JS_DECLARATION = (
    r"\bfunction\s*\*?\s+(\w+)\s*\("
    r"|\b(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?(?:function\b|\([^)]*\)\s*=>|\w+\s*=>)"
    r"|^[ \t]*(?:async\s+)?(?!(?:if|for|while|switch|catch|function|return)\b)(\w+)\s*\([^)\n]*\)\s*\{"
)


@dataclass(frozen=True)
class LanguageProfile:
    tag: str
    extensions: tuple[str, ...]
    branch_tokens: tuple[str, ...]
    cognitive_tokens: tuple[str, ...]
    declaration: str
    block_style: str = "brace"  # brace | indent

    @property
    def declaration_re(self) -> re.Pattern[str]:
        return _compile(self.declaration, re.MULTILINE)

    @property
    def cognitive_re(self) -> re.Pattern[str]:
        return _compile("|".join(self.cognitive_tokens))

    def branch_re(self, extra_markers: tuple[str, ...] = ()) -> re.Pattern[str]:
        """Cyclomatic branch tokens plus configured extra markers."""
        tokens = list(self.branch_tokens)
        for marker in extra_markers:
            if marker.strip():
                tokens.append(_marker_token(marker.strip()))
        return _compile("|".join(tokens))


def _marker_token(marker: str) -> str:
    escaped = re.escape(marker)
    if marker[0].isalnum() or marker[0] == "_":
        escaped = r"\b" + escaped
    if marker[-1].isalnum() or marker[-1] == "_":
        escaped += r"\b"
    return escaped


@lru_cache(maxsize=128)
def _compile(pattern: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(pattern, flags)


LANGUAGES: dict[str, LanguageProfile] = {
    "js": LanguageProfile(
        tag="js",
        extensions=(".js", ".jsx", ".mjs", ".cjs"),
        branch_tokens=_C_FAMILY_BRANCHES,
        cognitive_tokens=_C_FAMILY_BRANCHES,
        declaration=_JS_DECLARATION,
    ),
    "ts": LanguageProfile(
        tag="ts",
        extensions=(".ts", ".tsx"),
        branch_tokens=_C_FAMILY_BRANCHES,
        cognitive_tokens=_C_FAMILY_BRANCHES,
        declaration=_JS_DECLARATION,
    ),
    "py": LanguageProfile(
        tag="py",
        extensions=(".py",),
        branch_tokens=(r"\belif\b", r"\bif\b", r"\bfor\b", r"\bwhile\b", r"\bexcept\b", r"\band\b", r"\bor\b"),
        cognitive_tokens=(r"\belif\b", r"\bif\b", r"\bfor\b", r"\bwhile\b", r"\bexcept\b", r"\band\b", r"\bor\b"),
        declaration=r"\bdef\s+(\w+)\s*\(",
        block_style="indent",
    ),
    "java": LanguageProfile(
        tag="java",
        extensions=(".java",),
        branch_tokens=_C_FAMILY_BRANCHES,
        cognitive_tokens=_C_FAMILY_BRANCHES,
        declaration=r"\b(?:public|private|protected|static)\s+(?:[\w<>\[\],]+\s+)*?(\w+)\s*\([^;\n]*$",
    ),
    "go": LanguageProfile(
        tag="go",
        extensions=(".go",),
        branch_tokens=(r"\belse\s+if\b", r"\bif\b", r"\bfor\b", r"\bcase\b", r"&&", r"\|\|"),
        cognitive_tokens=(r"\belse\s+if\b", r"\bif\b", r"\bfor\b", r"\bcase\b", r"&&", r"\|\|"),
        declaration=r"\bfunc\s+(?:\([^)]*\)\s*)?(\w+)\s*\(",
    ),
    "rs": LanguageProfile(
        tag="rs",
        extensions=(".rs",),
        branch_tokens=(r"\belse\s+if\b", r"\bif\b", r"\bfor\b", r"\bwhile\b", r"\bmatch\b", r"&&", r"\|\|"),
        cognitive_tokens=(r"\belse\s+if\b", r"\bif\b", r"\bfor\b", r"\bwhile\b", r"\bmatch\b", r"&&", r"\|\|"),
        declaration=r"\bfn\s+(\w+)\s*(?:<[^>]*>)?\s*\(",
    ),
}

_BY_EXTENSION: dict[str, str] = {
    ext: profile.tag for profile in LANGUAGES.values() for ext in profile.extensions
}


def language_for_path(path: str) -> LanguageProfile:
    """Профиль языка по расширению файла. Неизвестное расширение -> js."""
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    return LANGUAGES[_BY_EXTENSION.get(suffix, DEFAULT_LANGUAGE)]


def get_language(tag: str) -> LanguageProfile:
    """Lookup by tag (js, ts, py, java, go, rs) or extension without the dot."""
    key = tag.lower().lstrip(".")
    if key in LANGUAGES:
        return LANGUAGES[key]
    return LANGUAGES[_BY_EXTENSION.get("." + key, DEFAULT_LANGUAGE)]


def declared_names(text: str, profile: LanguageProfile) -> list[tuple[str, int]]:
    """(name, offset of the name) for every function declaration in text."""
    result: list[tuple[str, int]] = []
    for match in profile.declaration_re.finditer(text):
        for group in range(1, (match.lastindex or 0) + 1):
            if match.group(group):
                result.append((match.group(group), match.start(group)))
                break
    return result
