"""Tests for dopk.validation — pre-flight data checks.

Checks return False and warn on bad data; they never raise.
"""

import warnings

import numpy as np
import pytest

from dopk.validation import (
    check_crossinfo,
    check_founder_geno_size,
    check_founder_geno_values,
    check_geno,
    check_is_female_vector,
    need_founder_geno,
)


@pytest.fixture
def no_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        yield


# ═══════════════════════════════════════════════════════════════════════
# check_geno
# ═══════════════════════════════════════════════════════════════════════


class TestCheckGeno:
    @pytest.mark.parametrize("gen", [0, 1, 2, 3, 4, 5])
    def test_observed_valid(self, gen):
        assert check_geno(gen, True, False, False)
        assert check_geno(gen, True, True, False)

    @pytest.mark.parametrize("gen", [-1, 6, 64])
    def test_observed_invalid(self, gen):
        assert not check_geno(gen, True, False, True)

    def test_autosome_range(self):
        for gen in range(1, 65):
            assert check_geno(gen, False, False, False)
        assert not check_geno(0, False, False, False)
        assert not check_geno(65, False, False, False)

    def test_female_x_range(self):
        assert check_geno(1, False, True, True)
        assert check_geno(64, False, True, True)
        assert not check_geno(65, False, True, True)

    def test_male_x_range(self):
        for gen in range(65, 73):
            assert check_geno(gen, False, True, False)
        assert not check_geno(64, False, True, False)
        assert not check_geno(73, False, True, False)
        assert not check_geno(1, False, True, False)

    def test_numpy_integers(self):
        assert check_geno(np.int32(3), True, False, False)
        assert check_geno(np.int64(70), False, True, False)

    def test_silent(self, no_warnings):
        assert not check_geno(100, False, False, False)


# ═══════════════════════════════════════════════════════════════════════
# is_female
# ═══════════════════════════════════════════════════════════════════════


class TestCheckIsFemale:
    def test_not_needed_without_x(self, no_warnings):
        assert check_is_female_vector([], False)
        assert check_is_female_vector([True, None], False)

    def test_complete_vector(self, no_warnings):
        assert check_is_female_vector([True, False, True], True)
        assert check_is_female_vector(np.array([True, False]), True)

    def test_empty_with_x(self):
        with pytest.warns(UserWarning, match="is_female not provided"):
            assert not check_is_female_vector([], True)

    def test_none_with_x(self):
        with pytest.warns(UserWarning, match="is_female not provided"):
            assert not check_is_female_vector(None, True)

    def test_missing_entry(self):
        with pytest.warns(UserWarning, match="missing values"):
            assert not check_is_female_vector([True, None, False], True)

    def test_nan_entry(self):
        with pytest.warns(UserWarning, match="missing values"):
            assert not check_is_female_vector(np.array([1.0, np.nan]), True)


# ═══════════════════════════════════════════════════════════════════════
# cross_info
# ═══════════════════════════════════════════════════════════════════════


class TestCheckCrossinfo:
    def test_valid_matrix(self, no_warnings):
        assert check_crossinfo(np.array([[1], [5], [12]]), True)
        assert check_crossinfo([[3, 0], [4, 1]], False)

    def test_valid_vector(self, no_warnings):
        assert check_crossinfo([2, 3, 4], True)

    def test_no_columns(self):
        with pytest.warns(UserWarning, match="cross_info not provided"):
            assert not check_crossinfo(np.empty((3, 0)), False)

    def test_empty(self):
        with pytest.warns(UserWarning, match="cross_info not provided"):
            assert not check_crossinfo([], True)

    def test_missing_with_x(self):
        """Missing generation count with X loci present fails."""
        with pytest.warns(UserWarning, match="missing values"):
            assert not check_crossinfo(np.array([[4], [np.nan], [6]]), True)

    def test_missing_none(self):
        with pytest.warns(UserWarning, match="missing values"):
            assert not check_crossinfo([[4], [None]], False)

    def test_below_one(self):
        with pytest.warns(UserWarning, match="should be >= 1"):
            assert not check_crossinfo([[0], [3]], False)

    def test_missing_and_invalid_both_reported(self):
        with pytest.warns(UserWarning) as record:
            assert not check_crossinfo([[np.nan], [-2]], True)
        assert len(record) == 2

    def test_only_first_column_checked(self, no_warnings):
        assert check_crossinfo([[5, 0], [6, -1]], True)


# ═══════════════════════════════════════════════════════════════════════
# founder genotypes
# ═══════════════════════════════════════════════════════════════════════


class TestFounderGenoSize:
    def test_valid(self, no_warnings):
        assert check_founder_geno_size(np.ones((8, 10), dtype=int), 10)

    def test_wrong_markers(self):
        with pytest.warns(UserWarning, match="incorrect number of markers"):
            assert not check_founder_geno_size(np.ones((8, 9), dtype=int), 10)

    def test_wrong_founders(self):
        with pytest.warns(UserWarning, match="should have 8 founders"):
            assert not check_founder_geno_size(np.ones((7, 10), dtype=int), 10)

    def test_both_wrong(self):
        with pytest.warns(UserWarning) as record:
            assert not check_founder_geno_size(np.ones((4, 3), dtype=int), 10)
        assert len(record) == 2

    def test_not_a_matrix(self):
        with pytest.warns(UserWarning, match="founders x markers"):
            assert not check_founder_geno_size(np.ones(8, dtype=int), 1)


class TestFounderGenoValues:
    def test_valid(self, no_warnings):
        fg = np.array([[1, 3, 3]] * 8)
        assert check_founder_geno_values(fg)

    def test_missing_calls_allowed(self, no_warnings):
        """Founder calls are routinely missing at some markers."""
        assert check_founder_geno_values(np.array([[1, 0, 3]] * 8))
        assert check_founder_geno_values(np.zeros((8, 4), dtype=int))

    def test_het_rejected(self):
        fg = np.array([[1, 2, 3]] * 8)
        with pytest.warns(UserWarning, match=r"should be in \{0, 1, 3\}"):
            assert not check_founder_geno_values(fg)

    @pytest.mark.parametrize("bad", [2, 4, -1, np.nan])
    def test_invalid(self, bad):
        fg = np.ones((8, 5))
        fg[3, 2] = bad
        with pytest.warns(UserWarning, match="invalid values"):
            assert not check_founder_geno_values(fg)

    def test_single_message(self):
        fg = np.full((8, 5), 2)
        with pytest.warns(UserWarning) as record:
            check_founder_geno_values(fg)
        assert len(record) == 1


def test_need_founder_geno():
    assert need_founder_geno() is True
