"""Digest comparison for face-digest.

The score is the fraction of positions at which two equal-length digests
hold the same character. It says nothing about how close the original
descriptors were: unrelated SHA-256 / MD5 hex digests still agree on
about 1/16 of their positions, and two photos of the same person will
score no higher than that.
"""

from __future__ import annotations


def compare_hashes(hash1: str, hash2: str) -> float:
    """Positional character agreement between two digests, in [0, 1].

    Returns 0.0 when the lengths differ or both digests are empty.
    """
    if len(hash1) != len(hash2) or not hash1:
        return 0.0
    matches = sum(1 for a, b in zip(hash1, hash2) if a == b)
    return matches / len(hash1)