"""
Edit distance used by fuzzy matching
"""


def edit_distance(a: str, b: str) -> int:
    """
    Levenshtein distance between two strings

    Only two rows of the dynamic-programming table are kept, so memory is
    O(len(b)). Callers are expected to keep inputs short (names, not
    document bodies).

    Args:
        a: Source string
        b: Target string

    Returns:
        Minimum number of single-character insertions, deletions and
        substitutions turning ``a`` into ``b``
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)

    for i, char_a in enumerate(a, 1):
        current[0] = i
        for j, char_b in enumerate(b, 1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous, current = current, previous

    return previous[len(b)]
