# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import numpy as np
import pytest

from matgen.errors import InvalidSpec
from matgen.profiles import (
    bad_cholqr_profile,
    exponential_profile,
    polynomial_profile,
    staircase_profile,
)

DECAYING = [polynomial_profile, exponential_profile]


@pytest.mark.parametrize("profile", DECAYING)
@pytest.mark.parametrize("k", [2, 5, 10, 20, 57])
@pytest.mark.parametrize("cond", [1.0, 10.0, 1e4, 1e12])
def test_decaying_profiles_hit_condition_number(profile, k, cond):
    s = profile(k, cond)
    assert s.shape == (k,)
    assert s[0] == 1.0
    assert math.isclose(s.max() / s.min(), cond, rel_tol=1e-10)
    assert math.isclose(s[-1], 1.0 / cond, rel_tol=1e-10)
    assert np.all(np.diff(s) <= 0.0)


@pytest.mark.parametrize("profile", DECAYING)
def test_leading_flat_segment(profile):
    s = profile(50, 1e3)
    np.testing.assert_array_equal(s[:5], 1.0)
    assert s[6] < 1.0


def test_polynomial_tail_formula():
    k, cond = 20, 100.0
    s = polynomial_profile(k, cond)
    offset = 2
    t = math.log(cond) / math.log(k - offset)
    expected = 1.0 / np.arange(1, k - offset + 1) ** t
    np.testing.assert_allclose(s[offset:], expected, rtol=1e-13)


def test_exponential_tail_formula():
    k, cond = 30, 1e6
    s = exponential_profile(k, cond)
    offset = 3
    t = math.log(cond) / (k - offset)
    expected = np.exp(-t * np.arange(1, k - offset + 1))
    np.testing.assert_allclose(s[offset:], expected, rtol=1e-13)


@pytest.mark.parametrize("profile", DECAYING + [staircase_profile])
def test_single_value(profile):
    np.testing.assert_array_equal(profile(1, 50.0), [1.0])


def test_staircase_levels():
    s = staircase_profile(8, 100.0)
    np.testing.assert_allclose(s, [1, 1, 0.08, 0.08, 0.04, 0.04, 0.01, 0.01])


def test_staircase_remainder_goes_to_last_step():
    s = staircase_profile(10, 1e3)
    np.testing.assert_allclose(s[:2], 1.0)
    np.testing.assert_allclose(s[2:4], 8e-3)
    np.testing.assert_allclose(s[4:6], 4e-3)
    np.testing.assert_allclose(s[6:], 1e-3)
    assert math.isclose(s.max() / s.min(), 1e3)


def test_bad_cholqr_profile():
    n, k, cond = 40, 10, 1e12
    s = bad_cholqr_profile(n, k, cond)
    assert s.shape == (n,)
    np.testing.assert_array_equal(s[:k], 1.0)
    assert math.isclose(s[k], 1e-8, rel_tol=1e-12)
    assert math.isclose(s[-1], 1.0 / cond, rel_tol=1e-10)
    assert np.all(np.diff(s[k:]) < 0.0)


def test_bad_cholqr_profile_edge_tails():
    np.testing.assert_array_equal(bad_cholqr_profile(6, 6, 1e3), np.ones(6))
    s = bad_cholqr_profile(6, 5, 1e3)
    np.testing.assert_array_equal(s[:5], 1.0)
    assert math.isclose(s[5], 1e-8)


def test_profiles_are_deterministic():
    np.testing.assert_array_equal(polynomial_profile(33, 7.5), polynomial_profile(33, 7.5))
    np.testing.assert_array_equal(
        bad_cholqr_profile(33, 4, 1e9), bad_cholqr_profile(33, 4, 1e9)
    )


@pytest.mark.parametrize("profile", DECAYING + [staircase_profile])
@pytest.mark.parametrize("k,cond", [(0, 10.0), (-3, 10.0), (5, 0.5), (5, math.inf)])
def test_invalid_arguments(profile, k, cond):
    with pytest.raises(InvalidSpec):
        profile(k, cond)


def test_bad_cholqr_rejects_k_above_n():
    with pytest.raises(InvalidSpec):
        bad_cholqr_profile(5, 6, 10.0)
