# resume/diff.py
"""
Line-level diff between two resume texts.

Lines are compared after CRLF normalisation with trailing whitespace
stripped, so differences that consist only of trailing whitespace never
show up in the output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class DiffType(str, Enum):
    """Kind of change a line went through"""
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffSegment:
    """One line of the edit script"""
    type: DiffType
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "value": self.value}


def split_lines(text: str) -> List[str]:
    return [line.rstrip() for line in text.replace("\r\n", "\n").split("\n")]


def compute_line_diff(before: str, after: str) -> List[DiffSegment]:
    """
    Compute an edit script turning `before` into `after`

    Builds the full LCS table over line suffixes, then walks it front to
    back. When both branches keep the same LCS length the removal wins.

    Args:
        before: Original text
        after: Rewritten text

    Returns:
        Ordered list of DiffSegment
    """
    before_lines = split_lines(before)
    after_lines = split_lines(after)
    m = len(before_lines)
    n = len(after_lines)

    # dp[i][j] = LCS length of before_lines[i:] and after_lines[j:]
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m - 1, -1, -1):
        for j in range(n - 1, -1, -1):
            if before_lines[i] == after_lines[j]:
                dp[i][j] = dp[i + 1][j + 1] + 1
            else:
                dp[i][j] = max(dp[i + 1][j], dp[i][j + 1])

    segments: List[DiffSegment] = []
    i = j = 0

    while i < m and j < n:
        if before_lines[i] == after_lines[j]:
            segments.append(DiffSegment(DiffType.UNCHANGED, before_lines[i]))
            i += 1
            j += 1
        elif dp[i + 1][j] >= dp[i][j + 1]:
            segments.append(DiffSegment(DiffType.REMOVED, before_lines[i]))
            i += 1
        else:
            segments.append(DiffSegment(DiffType.ADDED, after_lines[j]))
            j += 1

    while i < m:
        segments.append(DiffSegment(DiffType.REMOVED, before_lines[i]))
        i += 1

    while j < n:
        segments.append(DiffSegment(DiffType.ADDED, after_lines[j]))
        j += 1

    return segments


def diff_summary(segments: List[DiffSegment]) -> Dict[str, int]:
    """Count segments per change type"""
    summary = {t.value: 0 for t in DiffType}
    for segment in segments:
        summary[segment.type.value] += 1
    return summary
