"""String distance metrics shared by word correction and the narration gate."""

from __future__ import annotations


def edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein (edit) distance between two strings.

    The minimum number of single-character insertions, deletions or
    substitutions needed to turn `s1` into `s2`. Only two rows of the
    dynamic programming table are kept alive at a time.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Number of edits needed
    """
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    if not s2:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    current_row = [0] * (len(s2) + 1)

    for i, c1 in enumerate(s1):
        current_row[0] = i + 1

        for j, c2 in enumerate(s2):
            if c1 == c2:
                current_row[j + 1] = previous_row[j]
            else:
                current_row[j + 1] = 1 + min(
                    previous_row[j + 1],  # deletion
                    current_row[j],  # insertion
                    previous_row[j],  # substitution
                )

        previous_row, current_row = current_row, previous_row

    return previous_row[len(s2)]


def similarity(s1: str, s2: str) -> int:
    """Score how close two strings are, from 0 (unrelated) to 100 (identical).

    The edit distance is normalized by the longer string's length and the
    result floored to an integer. Two empty strings score 100.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Integer similarity score in [0, 100]
    """
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 100

    distance = edit_distance(s1, s2)
    return (longest - distance) * 100 // longest
