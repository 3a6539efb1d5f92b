from __future__ import annotations

import pytest

from formbridge.similarity import similarity


def test_identical_strings_score_one() -> None:
    assert similarity("first_name", "first_name") == 1.0


def test_two_empty_strings_are_identical() -> None:
    assert similarity("", "") == 1.0


def test_empty_against_non_empty_scores_zero() -> None:
    assert similarity("", "abc") == 0.0


def test_score_is_normalized_by_longest_string() -> None:
    assert similarity("kitten", "sitting") == pytest.approx(4 / 7)


def test_similarity_is_symmetric() -> None:
    assert similarity("first_name", "firstname") == similarity("firstname", "first_name")


def test_similarity_is_case_sensitive() -> None:
    assert similarity("A", "a") == 0.0
