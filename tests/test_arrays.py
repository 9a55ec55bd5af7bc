"""Tests for collection helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from apihelpers.utils.arrays import in_array  # noqa: E402


class TestInArray:
    """Tests for in_array."""

    def test_all_mode_requires_every_element(self) -> None:
        assert in_array(['a', 'b'], ['a'], check_all=True) is False

    def test_any_mode_needs_one_shared_element(self) -> None:
        assert in_array(['a', 'b'], ['a'], check_all=False) is True

    def test_all_mode_matches_full_subset(self) -> None:
        assert in_array(['a', 'b'], ['c', 'b', 'a'], check_all=True) is True

    def test_any_mode_without_overlap(self) -> None:
        assert in_array(['x'], ['a', 'b'], check_all=False) is False

    def test_candidate_duplicates_do_not_double_count(self) -> None:
        assert in_array(['a', 'b'], ['a', 'a'], check_all=True) is False
        assert in_array(['a'], ['a', 'a'], check_all=True) is True

    def test_subset_duplicates(self) -> None:
        assert in_array(['a', 'a'], ['a'], check_all=True) is True

    def test_works_with_integers(self) -> None:
        assert in_array([1, 2], [2, 3, 1], check_all=True) is True
        assert in_array([4], [2, 3, 1], check_all=False) is False

    @pytest.mark.parametrize('check_all', [True, False])
    def test_empty_subset_matches(self, check_all: bool) -> None:
        assert in_array([], ['a'], check_all=check_all) is True

    def test_empty_candidates(self) -> None:
        assert in_array(['a'], [], check_all=False) is False
        assert in_array(['a'], [], check_all=True) is False

    def test_accepts_generators(self) -> None:
        assert in_array(['b'], (c for c in 'abc'), check_all=True) is True
