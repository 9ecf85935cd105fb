# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Tuple

import numpy as np

from .backend import orthonormal_factor
from .errors import InvalidSpec
from .rng import RNGState, fill_dense

logger = logging.getLogger(__name__)


def random_orthonormal(rows: int, cols: int, state: RNGState) -> Tuple[np.ndarray, RNGState]:
    """
    Random (rows, cols) matrix with orthonormal columns.

    QR trick: orthonormalize a Gaussian sample with Householder QR and keep
    the explicit Q, whose column space is the (uniformly random) span of
    the sample.
    """
    G, state = fill_dense(rows, cols, state)
    return orthonormal_factor(G), state


def random_singular_factors(
    m: int, n: int, k: int, state: RNGState
) -> Tuple[np.ndarray, np.ndarray, RNGState]:
    """Left (m, k) and right (n, k) orthonormal factors, sampled in that order."""
    U, state = random_orthonormal(m, k, state)
    V, state = random_orthonormal(n, k, state)
    return U, V, state


def embed_profile(
    m: int, n: int, s: np.ndarray, state: RNGState
) -> Tuple[np.ndarray, RNGState]:
    """
    Build A = (U diag(s)) V^T for random orthonormal U (m, k), V (n, k).

    Parameters
    ----------
    m, n : int
        Shape of the result.
    s : (k,) ndarray
        Target singular values, k <= min(m, n).
    state : RNGState

    Returns
    -------
    A : (m, n) ndarray, Fortran order
        Rank-k matrix whose nonzero singular values are exactly s
        (up to roundoff).
    state : RNGState
    """
    s = np.asarray(s, dtype=float)
    k = s.size
    if k < 1:
        raise InvalidSpec("need at least one singular value")
    if k > min(m, n):
        raise InvalidSpec(f"cannot embed {k} singular values into a {m}x{n} matrix")
    U, V, state = random_singular_factors(m, n, k, state)
    # scale the columns of U, then a single GEMM
    A = (U * s[None, :]) @ V.T
    logger.debug(f"embed_profile: {m}x{n}, rank {k}, sigma range [{s.min():.3e}, {s.max():.3e}]")
    return np.asfortranarray(A), state
