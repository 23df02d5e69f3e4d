"""Canonical form for license text.

Every strategy in the resolution chain runs its result through
normalize_license_text() so that the same license read from a file, a
remote API or a plain-text download compares equal.
"""

import re
from typing import Optional

LINE_BREAK = "\r\n"

# Exact set: form feed, byte order mark, zero width space
CONTROL_CHARACTER_RE = re.compile("[\f\ufeff\u200b]")
SINGLE_LINE_FEED_RE = re.compile(r"(?<!\r)\n")
SINGLE_CARRIAGE_RETURN_RE = re.compile(r"\r(?!\n)")


def _is_blank(line: str) -> bool:
    return not line.strip()


def common_indentation(lines: list[str]) -> int:
    """Count the leading spaces shared by all non-blank lines.

    Tabs are not spaces. The fold stops as soon as a non-blank line
    without leading spaces is seen.

    Args:
        lines: Lines without line terminators.

    Returns:
        Number of spaces to strip, 0 when there is nothing to strip.
    """
    indent: Optional[int] = None
    for line in lines:
        if indent == 0:
            break
        if _is_blank(line):
            continue
        spaces = len(line) - len(line.lstrip(" "))
        indent = spaces if indent is None else min(indent, spaces)
    return indent or 0


def strip_common_indentation(lines: list[str]) -> list[str]:
    """Remove the common leading spaces from every non-blank line.

    Blank lines are returned untouched.

    Args:
        lines: Lines without line terminators.

    Returns:
        New list of lines.
    """
    indent = common_indentation(lines)
    if indent <= 0:
        return list(lines)
    return [line if _is_blank(line) else line[indent:] for line in lines]


def normalize_license_text(raw: Optional[str]) -> Optional[str]:
    """Normalize raw license text.

    Args:
        raw: Text as read from a file, resolver or HTTP body.

    Returns:
        Text with control characters removed, surrounding line breaks
        trimmed, CRLF line endings and common indentation stripped;
        None if the input is None or holds nothing but whitespace.
    """
    if raw is None or _is_blank(raw):
        return None

    text = CONTROL_CHARACTER_RE.sub("", raw)
    text = text.strip("\r\n")
    text = SINGLE_LINE_FEED_RE.sub(LINE_BREAK, text)
    text = SINGLE_CARRIAGE_RETURN_RE.sub(LINE_BREAK, text)
    text = LINE_BREAK.join(strip_common_indentation(text.split(LINE_BREAK)))

    if _is_blank(text):
        return None
    return text
