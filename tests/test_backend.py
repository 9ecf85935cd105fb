# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from matgen.backend import (
    as_matrix,
    frobenius_norm,
    orthonormal_factor,
    packed_upper_to_full,
    singular_values,
    store,
)
from matgen.buffers import log_diagonal
from matgen.errors import InvalidArgument
from matgen.utils import check_permutation, check_size, invert_permutation


def test_as_matrix_is_a_column_major_view():
    buf = np.arange(1.0, 7.0)
    A = as_matrix(buf, 2, 3)
    np.testing.assert_array_equal(A, [[1, 3, 5], [2, 4, 6]])
    A[1, 2] = -1.0
    assert buf[5] == -1.0


@pytest.mark.parametrize(
    "buf,rows,cols",
    [(np.zeros(5), 2, 3), (np.zeros((2, 3)), 2, 3), (np.zeros(6), -2, 3)],
)
def test_as_matrix_rejects_bad_buffers(buf, rows, cols):
    with pytest.raises(InvalidArgument):
        as_matrix(buf, rows, cols)


def test_store_writes_leading_slots_only():
    buf = np.full(8, 9.0)
    store(buf, np.array([[1.0, 3.0], [2.0, 4.0]]))
    np.testing.assert_array_equal(buf, [1, 2, 3, 4, 9, 9, 9, 9])
    with pytest.raises(InvalidArgument):
        store(np.zeros(3), np.ones((2, 2)))
    with pytest.raises(InvalidArgument):
        store(np.zeros(4, dtype=int), np.ones((2, 2)))


def test_orthonormal_factor():
    G = np.random.default_rng(0).standard_normal((12, 5))
    Q = orthonormal_factor(G)
    assert Q.shape == (12, 5)
    assert np.allclose(Q.T @ Q, np.eye(5), atol=1e-12)
    # same column space as G
    assert np.allclose(Q @ (Q.T @ G), G, atol=1e-12)
    with pytest.raises(InvalidArgument):
        orthonormal_factor(np.ones((3, 4)))


def test_singular_values_and_norm():
    A = np.diag([3.0, -4.0])
    np.testing.assert_allclose(singular_values(A), [4.0, 3.0])
    assert frobenius_norm(A) == pytest.approx(5.0)


def test_packed_upper_to_full():
    # columns: [1], [2, 3], [4, 5, 6]
    full = packed_upper_to_full(np.arange(1.0, 7.0), 3)
    np.testing.assert_array_equal(full, [[1, 2, 4], [0, 3, 5], [0, 0, 6]])
    with pytest.raises(InvalidArgument):
        packed_upper_to_full(np.ones(5), 3)


def test_check_size():
    assert check_size("n", np.int64(4)) == 4
    for bad in (-1, 2.0, True, "3"):
        with pytest.raises(InvalidArgument):
            check_size("n", bad)


def test_partial_permutation_is_accepted():
    assert check_permutation([3, 1], 4) == [3, 1]


def test_invert_permutation():
    perm = [2, 4, 1, 3]
    inv = invert_permutation(perm)
    assert inv == [3, 1, 4, 2]
    assert [perm[i - 1] for i in inv] == [1, 2, 3, 4]


def test_log_diagonal(caplog):
    buf = np.eye(3).ravel(order="F") * 2.0
    with caplog.at_level(logging.DEBUG, logger="matgen.buffers"):
        log_diagonal(buf, 3, 3)
    assert caplog.text.count("diagonal[") == 3
    assert "diagonal[2] = 2.000000" in caplog.text
