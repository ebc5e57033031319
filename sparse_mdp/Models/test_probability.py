"""Tests for numeric tolerance helpers."""

import numpy as np
import pytest

from .probability import (
    EPSILON,
    as_dense_3d,
    check_different_small,
    check_equal_small,
    is_probability,
    is_probability_row,
)


class TestTolerance:

    def test_equal_within_epsilon(self):
        assert check_equal_small(1.0, 1.0 + EPSILON / 2)
        assert check_equal_small(0.0, -EPSILON)
        assert not check_equal_small(1.0, 1.0 + 1e-8)

    def test_different_is_negation(self):
        assert check_different_small(0.0, 1e-9)
        assert not check_different_small(0.0, 1e-11)

    def test_custom_tolerance(self):
        assert check_equal_small(1.0, 1.05, tol=0.1)


class TestProbabilityRow:

    def test_valid_rows(self):
        assert is_probability_row([1.0])
        assert is_probability_row([0.1] * 10)
        assert is_probability_row(np.array([0.0, 0.3, 0.7]))

    def test_invalid_rows(self):
        assert not is_probability_row([])
        assert not is_probability_row([0.5, 0.4])
        assert not is_probability_row([1.5, -0.5])


class TestDenseSources:

    def test_as_dense_3d_shape(self):
        arr = as_dense_3d([[[1.0, 0.0]], [[0.0, 1.0]]], 2, 1)
        assert arr.shape == (2, 1, 2)
        assert arr.dtype == float

    def test_as_dense_3d_rejects_wrong_shape(self):
        with pytest.raises(ValueError, match="must have shape"):
            as_dense_3d(np.zeros((2, 2, 2)), 2, 1, name="transitions")

    def test_as_dense_3d_rejects_ragged(self):
        with pytest.raises(ValueError):
            as_dense_3d([[[1.0, 0.0]], [[1.0]]], 2, 1)

    def test_is_probability(self):
        t = np.zeros((2, 2, 2))
        t[:, :, 0] = 1.0
        assert is_probability(2, 2, t)

        t[1, 1] = [0.5, 0.4]
        assert not is_probability(2, 2, t)

        t[1, 1] = [1.2, -0.2]
        assert not is_probability(2, 2, t)
