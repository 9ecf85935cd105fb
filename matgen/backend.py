# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Thin dense-linear-algebra layer over numpy.linalg (LAPACK underneath).

Buffers in matgen are flat, column-major float64 arrays. Everything here
either views such a buffer as a 2-D Fortran-ordered matrix or runs one of
the factorizations the generators and diagnostics need. LinAlgError from
numpy is allowed to propagate.
"""

import numpy as np

from .errors import InvalidArgument
from .utils import check_size


def as_matrix(buffer: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """
    View the leading rows*cols slots of a flat buffer as a (rows, cols)
    column-major matrix. Writes through the view land in the buffer.
    """
    rows = check_size("rows", rows)
    cols = check_size("cols", cols)
    if buffer.ndim != 1:
        raise InvalidArgument("buffers must be flat (1-D) arrays")
    if not np.issubdtype(buffer.dtype, np.floating):
        raise InvalidArgument(f"buffers must hold floating-point values, got {buffer.dtype}")
    if buffer.size < rows * cols:
        raise InvalidArgument(
            f"buffer holds {buffer.size} values, {rows}x{cols} needs {rows * cols}"
        )
    return buffer[: rows * cols].reshape((rows, cols), order="F")


def store(buffer: np.ndarray, A: np.ndarray) -> np.ndarray:
    """Copy matrix A column-major into the leading slots of buffer."""
    A = np.asarray(A, dtype=float)
    if not np.issubdtype(buffer.dtype, np.floating):
        raise InvalidArgument(f"buffers must hold floating-point values, got {buffer.dtype}")
    if buffer.size < A.size:
        raise InvalidArgument(
            f"buffer holds {buffer.size} values, matrix needs {A.size}"
        )
    buffer[: A.size] = A.ravel(order="F")
    return buffer


def orthonormal_factor(G: np.ndarray) -> np.ndarray:
    """
    Householder QR of an (m, k) matrix, m >= k, returning only the explicit
    (m, k) factor Q. Its columns are orthonormal and span range(G).
    """
    G = np.asarray(G, dtype=float)
    m, k = G.shape
    if m < k:
        raise InvalidArgument(f"cannot orthonormalize {k} columns in R^{m}")
    Q, _R = np.linalg.qr(G, mode="reduced")
    return np.asfortranarray(Q)


def singular_values(A: np.ndarray) -> np.ndarray:
    """All min(m, n) singular values of A, largest first."""
    return np.linalg.svd(np.asarray(A, dtype=float), compute_uv=False)


def frobenius_norm(A: np.ndarray) -> float:
    return float(np.linalg.norm(A, ord="fro"))


def packed_upper_to_full(packed: np.ndarray, order: int) -> np.ndarray:
    """
    Unpack a column-major packed upper triangle into a full (order, order)
    matrix. Column j of the triangle occupies j + 1 consecutive slots
    (rows 0..j); everything below the diagonal comes back as zero.
    """
    order = check_size("order", order)
    needed = order * (order + 1) // 2
    packed = np.asarray(packed, dtype=float).ravel()
    if packed.size < needed:
        raise InvalidArgument(
            f"packed triangle of order {order} needs {needed} values, got {packed.size}"
        )
    full = np.zeros((order, order), order="F")
    # tril_indices walks (col, row) pairs in exactly the packed order
    cols, rows = np.tril_indices(order)
    full[rows, cols] = packed[:needed]
    return full
