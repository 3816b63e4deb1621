"""Line classification: total / code / comment / blank.

Approximate: a line inside a multi-line string
that happens to start with a comment token is counted as a comment.
"""

from techdebt.domain.entities.metrics import LineCounts

COMMENT_PREFIXES = ("//", "#", "/*", "*")


def is_comment_line(stripped: str) -> bool:
    """True for a trimmed line that starts with a comment token."""
    return stripped.startswith(COMMENT_PREFIXES)


def count_lines(text: str) -> LineCounts:
    """Считает строки файла по категориям. Пустой текст -> все нули."""
    if not text:
        return LineCounts()

    lines = text.split("\n")
    code = comment = blank = 0
    for line in lines:
        stripped = line.strip()
        if not stripped:
            blank += 1
        elif is_comment_line(stripped):
            comment += 1
        else:
            code += 1
    return LineCounts(total=len(lines), code=code, comment=comment, blank=blank)


def max_brace_nesting(text: str) -> tuple[int, int]:
    """(peak running brace balance, 1-based line of the peak); (0, 0) without braces."""
    level = peak = peak_line = 0
    for i, line in enumerate(text.split("\n"), 1):
        level += line.count("{") - line.count("}")
        if level > peak:
            peak = level
            peak_line = i
    return peak, peak_line
