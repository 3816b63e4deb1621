"""Security scanner.

Line-scoped, stateless pattern rules (secrets, injection, unsafe eval, risky
process/FS access). Returns Finding records tagged with a CWE reference.
Pure comment lines are skipped by every rule except hardcoded secrets.
"""

import re

from techdebt.domain.entities.findings import Finding, FindingKind, Severity
from techdebt.infrastructure.analyzer.text_metrics import is_comment_line

# Паттерны секретов: (regex, сообщение)
SECRET_PATTERNS: list[tuple[str, str]] = [
    (r"(?:password|passwd|pwd)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", "Hardcoded password detected"),
    (r"(?:api[_-]?key|apikey)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", "Hardcoded API key detected"),
    (r"(?:secret|token)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", "Hardcoded secret/token detected"),
    (r"['\"][A-Za-z0-9]{32,}['\"]", "Potential hardcoded credential detected"),
]

_COMPILED_SECRETS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(pattern, re.IGNORECASE), message) for pattern, message in SECRET_PATTERNS
]

# A line reading from env/config is not a literal secret
_SECRET_SAFE_ACCESSORS = ("process.env", "os.environ", "os.getenv", "getenv(", "config.", "settings.")

_SQL_VERB = re.compile(r"\b(?:SELECT|INSERT|UPDATE|DELETE)\b")
_SQL_INTERPOLATION = re.compile(r"\+|\$\{|`|\bf['\"]|\.format\(|['\"]\s*%\s*[\w(]")

_XSS_SINK = re.compile(r"\.(?:innerHTML|outerHTML)\b|\bdocument\.write(?:ln)?\s*\(|\binsertAdjacentHTML\s*\(")
_XSS_MARKER = re.compile(r"\+|\$\{|`")

_JS_RANDOM = re.compile(r"\bMath\.random\(\)")
_PY_RANDOM = re.compile(r"\brandom\.(?:random|randint|randrange|choice|choices|getrandbits|sample)\(")
_SENSITIVE_NAME = re.compile(r"token|key|password|secret", re.IGNORECASE)

_EVAL = re.compile(r"(?<![\w.])eval\s*\(|\bnew\s+Function\s*\(")

RISKY_MODULE_PATTERNS: list[tuple[str, str]] = [
    (
        r"require\(\s*['\"](?:node:)?child_process['\"]\s*\)|from\s+['\"](?:node:)?child_process['\"]",
        "child_process usage can be dangerous if not properly sanitized",
    ),
    (
        r"require\(\s*['\"](?:node:)?fs(?:/promises)?['\"]\s*\)|from\s+['\"](?:node:)?fs(?:/promises)?['\"]",
        "File system access should be carefully controlled",
    ),
    (
        r"^\s*(?:import\s+subprocess\b|from\s+subprocess\s+import\b)",
        "subprocess usage can lead to command injection if arguments are not sanitized",
    ),
    (
        r"\b(?:exec|spawn)\(|\bos\.system\s*\(",
        "Command execution can lead to command injection if not sanitized",
    ),
]

_COMPILED_RISKY: list[tuple[re.Pattern[str], str]] = [
    (re.compile(pattern), message) for pattern, message in RISKY_MODULE_PATTERNS
]


def detect_hardcoded_secrets(text: str, path: str) -> list[Finding]:
    """Literal credentials. One finding per line, comment lines included."""
    findings: list[Finding] = []
    for i, line in enumerate(text.split("\n"), 1):
        if any(accessor in line for accessor in _SECRET_SAFE_ACCESSORS):
            continue
        for pattern, message in _COMPILED_SECRETS:
            if pattern.search(line):
                findings.append(Finding(
                    kind=FindingKind.HARDCODED_SECRET,
                    severity=Severity.BLOCKER,
                    file=path,
                    line=i,
                    message=f"{message}. Use environment variables or secure vaults.",
                    effort_minutes=15,
                    weakness_id="CWE-798",
                ))
                break
    return findings


def _code_lines(text: str):
    for i, line in enumerate(text.split("\n"), 1):
        if not is_comment_line(line.strip()):
            yield i, line


def detect_sql_injection(text: str, path: str) -> list[Finding]:
    return [
        Finding(
            kind=FindingKind.SQL_INJECTION,
            severity=Severity.BLOCKER,
            file=path,
            line=i,
            message="Potential SQL injection vulnerability. Use parameterized queries or ORM.",
            effort_minutes=30,
            weakness_id="CWE-89",
        )
        for i, line in _code_lines(text)
        if _SQL_VERB.search(line) and _SQL_INTERPOLATION.search(line)
    ]


def detect_xss(text: str, path: str) -> list[Finding]:
    return [
        Finding(
            kind=FindingKind.XSS_VULNERABILITY,
            severity=Severity.CRITICAL,
            file=path,
            line=i,
            message="Potential XSS vulnerability. Sanitize user input before rendering.",
            effort_minutes=25,
            weakness_id="CWE-79",
        )
        for i, line in _code_lines(text)
        if _XSS_SINK.search(line) and _XSS_MARKER.search(line)
    ]


def detect_insecure_random(text: str, path: str) -> list[Finding]:
    """Non-cryptographic RNG used for a token/key/password/secret."""
    findings: list[Finding] = []
    for i, line in _code_lines(text):
        if not _SENSITIVE_NAME.search(line):
            continue
        if _JS_RANDOM.search(line):
            message = "Math.random() is not cryptographically secure. Use crypto.randomBytes() instead."
        elif _PY_RANDOM.search(line):
            message = "random module is not cryptographically secure. Use the secrets module instead."
        else:
            continue
        findings.append(Finding(
            kind=FindingKind.INSECURE_RANDOM,
            severity=Severity.CRITICAL,
            file=path,
            line=i,
            message=message,
            effort_minutes=10,
            weakness_id="CWE-338",
        ))
    return findings


def detect_eval_usage(text: str, path: str) -> list[Finding]:
    return [
        Finding(
            kind=FindingKind.EVAL_USAGE,
            severity=Severity.CRITICAL,
            file=path,
            line=i,
            message="eval() usage detected. This can lead to code injection vulnerabilities.",
            effort_minutes=20,
            weakness_id="CWE-95",
        )
        for i, line in _code_lines(text)
        if _EVAL.search(line)
    ]


def detect_risky_process_usage(text: str, path: str) -> list[Finding]:
    """Process-spawning / filesystem modules and direct command execution."""
    findings: list[Finding] = []
    for i, line in _code_lines(text):
        for pattern, message in _COMPILED_RISKY:
            if pattern.search(line):
                findings.append(Finding(
                    kind=FindingKind.INSECURE_DEPENDENCY,
                    severity=Severity.MAJOR,
                    file=path,
                    line=i,
                    message=message,
                    effort_minutes=20,
                    weakness_id="CWE-78",
                ))
                break
    return findings


def analyze_security(text: str, path: str) -> list[Finding]:
    """Все правила безопасности для одного файла, в порядке правил."""
    return [
        *detect_hardcoded_secrets(text, path),
        *detect_sql_injection(text, path),
        *detect_xss(text, path),
        *detect_insecure_random(text, path),
        *detect_eval_usage(text, path),
        *detect_risky_process_usage(text, path),
    ]
