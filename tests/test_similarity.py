"""Unit tests for face_digest.similarity."""

import pytest

from face_digest.digest import generate_face_hash
from face_digest.similarity import compare_hashes


def test_identical():
    assert compare_hashes("abc123", "abc123") == 1.0


def test_identical_real_digest():
    d = generate_face_hash([0.1, -0.2, 0.3], "sha256")
    assert compare_hashes(d, d) == 1.0


def test_length_mismatch():
    assert compare_hashes("abcd", "abc") == 0.0
    assert compare_hashes("abc", "abcd") == 0.0


def test_both_empty():
    assert compare_hashes("", "") == 0.0


def test_partial_match():
    assert compare_hashes("abcd", "abzz") == pytest.approx(0.5)


def test_positional_not_set_based():
    # same characters, different positions
    assert compare_hashes("abcd", "dcba") == 0.0


def test_symmetric():
    assert compare_hashes("a1b2c3", "a1x2y3") == compare_hashes("a1x2y3", "a1b2c3")


def test_truncated_prefix_still_matches():
    full = generate_face_hash([0.5] * 8, "md5")
    assert compare_hashes(full[:16], generate_face_hash([0.5] * 8, "md5", 16)) == 1.0
