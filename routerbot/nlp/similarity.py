"""String similarity primitives used by the FAQ matcher."""

from __future__ import annotations

from rapidfuzz.distance import JaroWinkler


def jaro_winkler(left: str, right: str) -> float:
    """Return the Jaro-Winkler similarity of two strings in ``[0, 1]``."""

    if not left or not right:
        return 1.0 if left == right else 0.0
    return float(JaroWinkler.normalized_similarity(left, right))
