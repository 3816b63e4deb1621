"""File Collector - enumerates source files of a repository for scanning.

- Excluded directories and configured ignore globs
- Gitignore support with negation patterns
- Oversized and binary file skipping
- Unreadable files reported as FileFailure, never raised
"""

import fnmatch
import logging
import re
from pathlib import Path, PurePosixPath

from techdebt.domain.entities.metrics import FileFailure, SourceUnit
from techdebt.domain.ports.config import ScanConfig

logger = logging.getLogger(__name__)

MAX_FILE_COUNT = 10000

# Directories never scanned
EXCLUDED_DIRS = {
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    "dist",
    "build",
    ".next",
    ".nuxt",
    "coverage",
    ".tox",
    "vendor",
}

DEFAULT_IGNORES = [
    "*.min.js",
    "*.bundle.js",
    "*.d.ts",
    "*.pyc",
    "*.log",
]

_TEST_DIRS = {"test", "tests", "__tests__"}
_TEST_FILE = re.compile(r"(?:\.(?:test|spec)\.[^/]+$|^test_[^/]*\.py$|_test\.(?:py|go)$)")


def parse_gitignore(root: Path) -> tuple[list[str], list[str]]:
    """Read root/.gitignore into (ignore_patterns, negated_patterns)."""
    patterns = list(DEFAULT_IGNORES)
    negated: list[str] = []
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return patterns, negated

    try:
        content = gitignore.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Failed to read %s: %s", gitignore, e)
        return patterns, negated

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            negated.append(line[1:].lstrip("/"))
        else:
            patterns.append(line.lstrip("/"))
    return patterns, negated


def matches_glob(rel_path: str, pattern: str) -> bool:
    """fnmatch on a posix relative path; '**/x/**' also matches x at the root."""
    return fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch("/" + rel_path, pattern)


def is_ignored(rel_path: str, patterns: list[str], negated: list[str] | None = None) -> bool:
    """Gitignore-style check; negated patterns re-include a matched file."""
    parts = rel_path.split("/")
    filename = parts[-1]

    if any(part in EXCLUDED_DIRS for part in parts[:-1]):
        return True

    matched = False
    for pattern in patterns:
        if pattern.endswith("/"):
            dir_pattern = pattern.rstrip("/")
            if any(fnmatch.fnmatch(part, dir_pattern) for part in parts[:-1]):
                matched = True
                break
        elif matches_glob(rel_path, pattern) or fnmatch.fnmatch(filename, pattern):
            matched = True
            break

    if matched and negated:
        if any(matches_glob(rel_path, p) or fnmatch.fnmatch(filename, p) for p in negated):
            return False
    return matched


def is_binary_file(file_path: Path, check_bytes: int = 8192) -> bool:
    """Null byte or >30% control characters in the first check_bytes."""
    try:
        with open(file_path, "rb") as f:
            chunk = f.read(check_bytes)
    except OSError:
        return True
    if b"\x00" in chunk:
        return True
    if not chunk:
        return False
    non_text = sum(1 for b in chunk if b < 32 and b not in (9, 10, 13))
    return non_text / len(chunk) > 0.3


def collect_source_units(
    root: Path,
    config: ScanConfig | None = None,
    max_files: int = MAX_FILE_COUNT,
) -> tuple[list[SourceUnit], list[FileFailure]]:
    """Собирает исходные файлы репозитория.

    Args:
        root: Repository directory.
        config: Extensions, ignore globs and max file size.
        max_files: Stop after this many units.

    Returns:
        (units sorted by relative path, failures for unreadable files).
    """
    config = config or ScanConfig()
    root = root.resolve()
    units: list[SourceUnit] = []
    failures: list[FileFailure] = []

    if not root.is_dir():
        logger.warning("Path is not a directory: %s", root)
        return units, failures

    extensions = {ext.lower() for ext in config.include_extensions}
    ignore_patterns, negated_patterns = parse_gitignore(root)
    skipped_large = skipped_binary = 0

    for p in sorted(root.rglob("*")):
        if len(units) >= max_files:
            logger.warning("Reached max file limit (%d), stopping collection", max_files)
            break
        if p.is_symlink() or not p.is_file():
            continue
        if p.suffix.lower() not in extensions:
            continue

        rel = PurePosixPath(p.relative_to(root)).as_posix()
        if any(matches_glob(rel, g) for g in config.ignore_globs):
            continue
        if is_ignored(rel, ignore_patterns, negated_patterns):
            continue

        try:
            size = p.stat().st_size
        except OSError as e:
            failures.append(FileFailure(path=rel, error=str(e)))
            continue
        if size > config.max_file_size:
            skipped_large += 1
            continue
        if is_binary_file(p):
            skipped_binary += 1
            continue

        try:
            content = p.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Failed to read %s: %s", p, e)
            failures.append(FileFailure(path=rel, error=str(e)))
            continue
        units.append(SourceUnit(path=rel, content=content))

    if skipped_large or skipped_binary or failures:
        logger.debug(
            "Skipped files: %d large, %d binary, %d errors", skipped_large, skipped_binary, len(failures)
        )
    return units, failures


def is_test_file(rel_path: str) -> bool:
    parts = rel_path.replace("\\", "/").split("/")
    if any(part in _TEST_DIRS for part in parts[:-1]):
        return True
    return bool(_TEST_FILE.search(parts[-1]))


def estimate_test_coverage(paths: list[str]) -> float:
    """Test-file ratio as a coverage proxy: 100 * tests / sources, capped at 100."""
    tests = sum(1 for p in paths if is_test_file(p))
    sources = len(paths) - tests
    if sources <= 0:
        return 0.0
    return min(100.0, tests / sources * 100)
