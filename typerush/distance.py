# distance.py
"""Levenshtein edit distance."""


def distance(a, b):
    """
    Minimum number of single-character insertions, deletions or
    substitutions turning `a` into `b`. Strings are compared as given
    (no case folding). Keeps two rows of the DP table, sized by the
    shorter string.
    """
    if not a:
        return len(b)
    if not b:
        return len(a)
    # the table is symmetric, so iterate over the longer string
    if len(a) < len(b):
        a, b = b, a
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            cur[j] = min(prev[j] + 1,          # deletion
                         cur[j - 1] + 1,       # insertion
                         prev[j - 1] + cost)   # substitution
        prev = cur
    return prev[-1]
