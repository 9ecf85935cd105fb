# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Numerical diagnostics for dense matrices.

Every check accepts either a 2-D array or a flat column-major buffer
together with its `rows` and `cols`, works on a copy, and returns a fresh
value. Nothing is cached between calls.
"""

import logging
import math
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from .backend import as_matrix, frobenius_norm, packed_upper_to_full, singular_values
from .errors import InvalidArgument
from .rng import RNGState, fill_dense
from .utils import EPS, ORTHOGONALITY_TOL, RANK_TOL_FACTOR, check_size

logger = logging.getLogger(__name__)


class StorageFormat(Enum):
    FULL = "full"
    PACKED_UPPER_TRIANGULAR = "packed_upper_triangular"


def _matrix_arg(
    A: np.ndarray,
    rows: Optional[int],
    cols: Optional[int],
    storage: StorageFormat = StorageFormat.FULL,
) -> np.ndarray:
    """Turn the (A, rows, cols, storage) calling convention into a private 2-D copy."""
    A = np.asarray(A, dtype=float)
    if storage is StorageFormat.PACKED_UPPER_TRIANGULAR:
        if rows is None or cols is None or rows != cols:
            raise InvalidArgument("packed triangular storage needs rows == cols")
        return packed_upper_to_full(A, cols)
    if A.ndim == 2:
        if (rows is not None and rows != A.shape[0]) or (
            cols is not None and cols != A.shape[1]
        ):
            raise InvalidArgument(f"rows/cols {rows}x{cols} disagree with shape {A.shape}")
        return A.copy(order="F")
    if A.ndim == 1:
        if rows is None or cols is None:
            raise InvalidArgument("a flat buffer needs explicit rows and cols")
        return as_matrix(A, rows, cols).copy(order="F")
    raise InvalidArgument(f"expected a 1-D buffer or a 2-D matrix, got ndim={A.ndim}")


def cond_num_check(
    A: np.ndarray,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
    storage: StorageFormat = StorageFormat.FULL,
) -> float:
    """
    sigma_max / sigma_min from a values-only SVD of a copy of A.

    Packed upper-triangular input must say so through `storage`; the layout
    is never guessed from the buffer size. A matrix with a zero singular
    value has condition number inf.
    """
    s = singular_values(_matrix_arg(A, rows, cols, storage))
    if s.size == 0:
        raise InvalidArgument("condition number of an empty matrix")
    cond = float(s[0] / s[-1]) if s[-1] > 0 else math.inf
    logger.debug(f"condition number: {cond:f}")
    return cond


def rank_check(
    A: np.ndarray,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
    tol_factor: float = RANK_TOL_FACTOR,
) -> int:
    """
    Numerical rank: how many singular values satisfy
    sigma_i / sigma_0 > tol_factor * machine epsilon.
    """
    s = singular_values(_matrix_arg(A, rows, cols))
    if s.size == 0 or s[0] == 0:
        return 0
    return int(np.count_nonzero(s / s[0] > tol_factor * EPS))


def trailing_norm_oracle(R: np.ndarray) -> Callable[[int], float]:
    """
    Precompute ||R[k:, :]||_F for k = 0..rows in one sweep and return a
    lookup usable by `rank_search_binary`.
    """
    R = np.asarray(R, dtype=float)
    row_sq = np.sum(R * R, axis=1)
    # tails[k] = sum of squared row norms from row k on
    tails = np.concatenate([np.cumsum(row_sq[::-1])[::-1], [0.0]])
    tails = np.sqrt(np.maximum(tails, 0.0))

    def oracle(k: int) -> float:
        return float(tails[k])

    return oracle


def rank_search_binary(
    oracle: Callable[[int], float], n: int, norm_A: float, tau: float
) -> int:
    """
    Smallest k in [1, n] with oracle(k) <= tau * norm_A, never underestimated.

    `oracle(k)` is ||A[k:, :]||_F. The bisection probes k with halving
    steps, moving up when the trailing block is still too large and down
    otherwise; for a non-increasing oracle it stops at the answer or one
    below it. Rounding can make the oracle non-monotone, so the stopping
    point is never trusted as is: k is walked upward one step at a time
    until the criterion actually holds (or k reaches n). The returned rank
    therefore always passes the truncation test. An overestimate is
    accepted, an underestimate is not, because callers size workspaces
    from it.
    """
    n = check_size("n", n)
    if n < 1:
        raise InvalidArgument("rank search needs n >= 1")
    if tau < 0 or norm_A < 0:
        raise InvalidArgument("tau and norm_A must be non-negative")
    threshold = tau * norm_A

    k = 1 << (n.bit_length() - 1)
    step = k // 2
    while step:
        if oracle(k) > threshold:
            k = min(k + step, n)
        else:
            k = max(k - step, 1)
        step //= 2

    probe = k
    while k < n and oracle(k) > threshold:
        k += 1
    if k != probe:
        logger.debug(f"rank_search_binary: walked from {probe} up to {k}")
    return k


def rank_search(R: np.ndarray, tau: float, norm_A: Optional[float] = None) -> int:
    """Truncation rank of R (e.g. a QR factor) via `rank_search_binary`."""
    R = np.asarray(R, dtype=float)
    if norm_A is None:
        norm_A = frobenius_norm(R)
    return rank_search_binary(trailing_norm_oracle(R), R.shape[0], norm_A, tau)


def orthogonality_residual(
    A: np.ndarray,
    k: Optional[int] = None,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
) -> float:
    """||A^T A - I||_F over the first k columns (default: all of them)."""
    A = _matrix_arg(A, rows, cols)
    n = A.shape[1]
    k = n if k is None else check_size("k", k)
    if k > n:
        raise InvalidArgument(f"k={k} exceeds the {n} available columns")
    gram = A.T @ A
    gram[np.arange(k), np.arange(k)] -= 1.0
    err = frobenius_norm(gram[:k, :k])
    logger.debug(f"Q ERROR: {err:e}")
    return err


def orthogonality_check(
    A: np.ndarray,
    k: Optional[int] = None,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
    tol: float = ORTHOGONALITY_TOL,
) -> bool:
    """
    Returns True when the check FAILS, i.e. the first k columns of A are
    not orthonormal to within `tol` in the Frobenius norm.
    """
    return orthogonality_residual(A, k, rows, cols) > tol


def estimate_spectral_norm(
    A: np.ndarray,
    p: int,
    state: RNGState,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
) -> Tuple[float, RNGState]:
    """
    Estimate ||A||_2 with p steps of power iteration on A^T A.

    Starting from a Gaussian vector v, each step computes
    v <- (1 / ||v_prev||) A^T (A v), so ||v|| settles at sigma_max^2.
    Convergence is not checked: pick p from the expected spectral gap.

    Returns
    -------
    estimate : float
    state : RNGState
    """
    A = _matrix_arg(A, rows, cols)
    p = check_size("p", p)
    if p < 1:
        raise InvalidArgument("power iteration needs p >= 1")
    m, n = A.shape

    v, state = fill_dense(n, 1, state)
    v = v[:, 0]
    prev_norm_inv = 1.0
    for _ in range(p):
        w = A @ v
        v = prev_norm_inv * (A.T @ w)
        nrm = np.linalg.norm(v)
        if nrm == 0:
            logger.debug("estimate_spectral_norm: iterate vanished, matrix acts as zero")
            return 0.0, state
        prev_norm_inv = 1.0 / nrm
    return float(np.sqrt(np.linalg.norm(v))), state
