"""
Heuristic title comparison for catching retitled reposts.

The matcher is deliberately permissive: a false positive skips one story,
while a false negative spams the subreddit with a duplicate.
"""

from __future__ import annotations

MIN_TOKENS = 4
MIN_TOKEN_LENGTH = 3
OVERLAP_THRESHOLD = 0.7


def _token_overlap(tokens_a: list[str], tokens_b: list[str]) -> float:
    vocabulary = {token for token in tokens_a if len(token) >= MIN_TOKEN_LENGTH}
    common = sum(
        1 for token in tokens_b if len(token) >= MIN_TOKEN_LENGTH and token in vocabulary
    )
    return common / min(len(tokens_a), len(tokens_b))


def similar(first: str, second: str) -> bool:
    """Return True when two titles most likely describe the same story."""

    a = first.strip().lower()
    b = second.strip().lower()

    if a == b:
        return True

    if a and b and (a in b or b in a):
        return True

    tokens_a = a.split()
    tokens_b = b.split()
    if len(tokens_a) >= MIN_TOKENS and len(tokens_b) >= MIN_TOKENS:
        return _token_overlap(tokens_a, tokens_b) > OVERLAP_THRESHOLD

    return False


__all__ = ["MIN_TOKENS", "OVERLAP_THRESHOLD", "similar"]
