# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
One builder per matrix family.

Every builder maps (spec, buffer, state) to a GeneratedMatrix: it sizes
the buffer, fills its leading slots column-major and returns the advanced
RNG state. Specs are assumed to be validated already (see dispatch).
"""

import logging
import math
from typing import Optional

import numpy as np

from .backend import as_matrix, orthonormal_factor, store
from .buffers import ensure_capacity, upper_triangle_extract, write_diagonal
from .matrix_spec import GeneratedMatrix, MatrixSpec
from .profiles import (
    bad_cholqr_profile,
    exponential_profile,
    polynomial_profile,
    staircase_profile,
)
from .rng import RNGState, fill_dense, sample_without_replacement
from .synth import embed_profile, random_orthonormal
from .utils import (
    ADVERSARIAL_DIAGONAL_SCALE,
    ADVERSARIAL_DIAGONAL_START,
    ADVERSARIAL_SCALED_ROWS,
)

logger = logging.getLogger(__name__)


def _from_profile(
    spec: MatrixSpec, s: np.ndarray, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """Shared tail of the profile families: diagonal fast path or embedding."""
    m, n = spec.rows, spec.cols
    r = s.size
    if spec.diagonal:
        if (m, n) != (r, r):
            logger.warning(f"diagonal-only request {m}x{n} of rank {r} returned as {r}x{r}")
        buffer = ensure_capacity(buffer, r * r)
        buffer[: r * r] = 0.0
        write_diagonal(buffer, r, s)
        return GeneratedMatrix(buffer, r, r, r, state)

    buffer = ensure_capacity(buffer, m * n)
    A, state = embed_profile(m, n, s, state)
    store(buffer, A)
    return GeneratedMatrix(buffer, m, n, r, state)


def gen_poly_mat(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """Polynomially decaying spectrum, rank k, sigma_max / sigma_min = cond."""
    s = polynomial_profile(spec.rank, spec.cond_num)
    return _from_profile(spec, s, buffer, state)


def gen_exp_mat(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """Exponentially decaying spectrum, rank k, sigma_max / sigma_min = cond."""
    s = exponential_profile(spec.rank, spec.cond_num)
    return _from_profile(spec, s, buffer, state)


def gen_step_mat(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """Four-step staircase spectrum."""
    s = staircase_profile(spec.rank, spec.cond_num)
    return _from_profile(spec, s, buffer, state)


def gen_bad_cholqr_mat(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """
    Full-rank m x n matrix meant to break QB with Cholesky QR.

    `spec.rank` is the sketch dimension k: singular values 1..k are 1 and
    the remaining n - k start at 1e-8 and drift to 1/cond.
    """
    s = bad_cholqr_profile(spec.cols, spec.rank, spec.cond_num)
    return _from_profile(spec, s, buffer, state)


def gen_gaussian_mat(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    m, n = spec.rows, spec.cols
    buffer = ensure_capacity(buffer, m * n)
    G, state = fill_dense(m, n, state)
    store(buffer, G)
    return GeneratedMatrix(buffer, m, n, min(m, n), state)


def gen_spiked_mat(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """
    Matrix with highly coherent left singular vectors, hard to sketch.

    The m rows are filled with stacked copies of a random n x n orthogonal
    matrix (the last copy truncated if n does not divide m). Then n // 2
    rows, drawn without replacement, are multiplied by `spec.scaling`.
    """
    m, n = spec.rows, spec.cols
    spike_scale = spec.scaling
    buffer = ensure_capacity(buffer, m * n)

    spiked_rows, state = sample_without_replacement(m, n // 2, state)
    V, state = random_orthonormal(n, n, state)

    A = as_matrix(buffer, m, n)
    A[:, :] = np.tile(V, (math.ceil(m / n), 1))[:m]
    A[spiked_rows, :] *= spike_scale
    logger.debug(f"gen_spiked_mat: scaled rows {spiked_rows.tolist()} by {spike_scale:g}")
    return GeneratedMatrix(buffer, m, n, n, state)


def gen_adversarial_mat(
    spec: MatrixSpec,
    buffer: Optional[np.ndarray],
    state: RNGState,
    *,
    scaled_rows: int = ADVERSARIAL_SCALED_ROWS,
    diagonal_start: int = ADVERSARIAL_DIAGONAL_START,
    diagonal_scale: float = ADVERSARIAL_DIAGONAL_SCALE,
) -> GeneratedMatrix:
    """
    Numerically rank-deficient A = U V that standard rank estimators undercount.

    U is an m x n Gaussian matrix whose first `scaled_rows` rows are scaled
    by sigma (`spec.scaling`) and which is then orthonormalized with
    Householder QR. V is the upper triangle of an orthonormalized n x n
    Gaussian matrix whose diagonal entries from index `diagonal_start`
    onward are multiplied by `diagonal_scale`.
    """
    m, n = spec.rows, spec.cols
    sigma = spec.scaling
    buffer = ensure_capacity(buffer, m * n)

    GU, state = fill_dense(m, n, state)
    GV, state = fill_dense(n, n, state)
    GU[:scaled_rows, :] *= sigma

    U = orthonormal_factor(GU)
    Q = orthonormal_factor(GV)
    V = as_matrix(upper_triangle_extract(Q.ravel(order="F"), n, n), n, n)
    d = np.arange(diagonal_start, n)
    V[d, d] *= diagonal_scale

    store(buffer, U @ V)
    return GeneratedMatrix(buffer, m, n, n, state)
