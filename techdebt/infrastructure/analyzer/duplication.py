"""Duplicate-text helpers shared by the smell detector and the authorship classifier."""

from collections import Counter

WINDOW_SIZE = 6
DEFAULT_MIN_LENGTH = 50


def duplicate_blocks(text: str, min_length: int = DEFAULT_MIN_LENGTH, window: int = WINDOW_SIZE) -> int:
    """Number of distinct windows of `window` non-blank trimmed lines seen more than once.

    A window counts only when its joined text is at least `min_length` chars.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < window:
        return 0

    seen: Counter[str] = Counter()
    for i in range(len(lines) - window + 1):
        block = "\n".join(lines[i:i + window])
        if len(block) >= min_length:
            seen[block] += 1
    return sum(1 for count in seen.values() if count > 1)


def count_repeated_lines(text: str, min_length: int = 10, min_repeats: int = 3) -> int:
    """Distinct code lines (trimmed, longer than min_length) occurring >= min_repeats times."""
    counts: Counter[str] = Counter(
        line
        for line in (raw.strip() for raw in text.split("\n"))
        if line and not line.startswith(("//", "#")) and len(line) > min_length
    )
    return sum(1 for count in counts.values() if count >= min_repeats)
