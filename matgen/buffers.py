# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Layout utilities for flat, column-major dense buffers.

A buffer is a 1-D float64 ndarray; a (rows, cols) matrix lives in its
leading rows*cols slots with element (i, j) at index i + j*rows. Nothing
here has numerical meaning beyond moving and scaling values.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from .backend import as_matrix
from .errors import InvalidArgument
from .utils import check_permutation, check_size

logger = logging.getLogger(__name__)


def _check_buffer(buffer: np.ndarray) -> np.ndarray:
    if not isinstance(buffer, np.ndarray):
        raise InvalidArgument("buffer must be a NumPy ndarray")
    if buffer.ndim != 1:
        raise InvalidArgument("buffer must be flat (1-D)")
    if not np.issubdtype(buffer.dtype, np.floating):
        raise InvalidArgument(f"buffer must hold floating-point values, got {buffer.dtype}")
    return buffer


def ensure_capacity(buffer: Optional[np.ndarray], target_size: int) -> np.ndarray:
    """
    Grow `buffer` to hold at least `target_size` values.

    New slots are zero; existing values are kept. A buffer that is already
    large enough is returned as-is, so calling this twice is harmless.
    Passing None allocates a fresh zero buffer.
    """
    target_size = check_size("target_size", target_size)
    if buffer is None:
        return np.zeros(target_size)
    _check_buffer(buffer)
    if buffer.size >= target_size:
        return buffer
    grown = np.zeros(target_size, dtype=buffer.dtype)
    grown[: buffer.size] = buffer
    return grown


def reshape_rows(
    buffer: np.ndarray, old_rows: int, cols: int, new_rows: int
) -> np.ndarray:
    """
    Change the row count of a column-major (old_rows, cols) matrix in place.

    Shrinking keeps the first new_rows entries of each column and packs the
    columns forward, first to last. Growing must walk from the last column
    back to the first so that no column overwrites one that has not moved
    yet; the rows added at the bottom of every column are zero.

    Returns the (possibly reallocated) buffer.
    """
    _check_buffer(buffer)
    old_rows = check_size("old_rows", old_rows)
    cols = check_size("cols", cols)
    new_rows = check_size("new_rows", new_rows)
    if buffer.size < old_rows * cols:
        raise InvalidArgument(
            f"buffer holds {buffer.size} values, {old_rows}x{cols} needs {old_rows * cols}"
        )

    if new_rows < old_rows:
        for j in range(1, cols):
            src = buffer[j * old_rows : j * old_rows + new_rows].copy()
            buffer[j * new_rows : (j + 1) * new_rows] = src
    elif new_rows > old_rows:
        buffer = ensure_capacity(buffer, new_rows * cols)
        for j in reversed(range(cols)):
            src = buffer[j * old_rows : (j + 1) * old_rows].copy()
            buffer[j * new_rows : j * new_rows + old_rows] = src
            buffer[j * new_rows + old_rows : (j + 1) * new_rows] = 0.0
    return buffer


def extract_diagonal(buffer: np.ndarray, rows: int, k: int) -> np.ndarray:
    """Return a copy of the first k diagonal entries of a matrix with `rows` rows."""
    _check_buffer(buffer)
    rows = check_size("rows", rows)
    k = check_size("k", k)
    if k and ((k - 1) * (rows + 1) >= buffer.size or k > rows):
        raise InvalidArgument(f"{k} diagonal entries do not fit the buffer")
    return buffer[: k * (rows + 1) : rows + 1][:k].copy()


def write_diagonal(buffer: np.ndarray, rows: int, values: Sequence[float]) -> np.ndarray:
    """Overwrite the leading diagonal with `values`; off-diagonal slots are untouched."""
    _check_buffer(buffer)
    rows = check_size("rows", rows)
    values = np.asarray(values, dtype=float).ravel()
    k = values.size
    if k and ((k - 1) * (rows + 1) >= buffer.size or k > rows):
        raise InvalidArgument(f"{k} diagonal entries do not fit the buffer")
    buffer[: k * (rows + 1) : rows + 1][:k] = values
    return buffer


def eye(buffer: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Put ones on the diagonal of the (rows, cols) matrix stored in buffer."""
    return write_diagonal(buffer, rows, np.ones(min(rows, cols)))


def log_diagonal(buffer: np.ndarray, rows: int, cols: int, k: int = 0) -> None:
    """Emit the first k diagonal entries at DEBUG level (k=0: all of them)."""
    if k == 0:
        k = min(rows, cols)
    for i, d in enumerate(extract_diagonal(buffer, rows, k)):
        logger.debug(f"diagonal[{i}] = {d:f}")


def lower_triangle_to_identity_diagonal(
    buffer: np.ndarray, rows: int, cols: int, overwrite_diagonal: bool
) -> np.ndarray:
    """
    Turn the packed output of an LU factorization into its L factor.

    Zeroes everything above the diagonal of each column, leaving the lower
    triangle; with `overwrite_diagonal` the diagonal becomes all ones.
    """
    A = as_matrix(_check_buffer(buffer), rows, cols)
    for j in range(cols):
        A[: min(j, rows), j] = 0.0
        if overwrite_diagonal and j < rows:
            A[j, j] = 1.0
    return buffer


def upper_triangle_extract(buffer: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """
    Copy the upper triangle of a (rows, cols) matrix into a new (cols, cols)
    buffer; everything below its diagonal is zero.
    """
    A = as_matrix(_check_buffer(buffer), rows, cols)
    out = np.zeros(cols * cols)
    U = as_matrix(out, cols, cols)
    for j in range(cols):
        depth = min(j + 1, rows)
        U[:depth, j] = A[:depth, j]
    return out


def zero_below_diagonal(buffer: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Zero the strict lower triangle in place."""
    A = as_matrix(_check_buffer(buffer), rows, cols)
    for j in range(min(cols, rows)):
        A[j + 1 :, j] = 0.0
    return buffer


def permute_columns(
    buffer: np.ndarray, rows: int, cols: int, permutation: Sequence[int]
) -> np.ndarray:
    """
    Reorder the columns of the (rows, cols) matrix in place so that column i
    ends up holding what was column permutation[i] (1-based), for
    i < len(permutation). Entries must lie in [1, cols]; slack slots past
    the matrix are never touched.

    Works by swapping: after column i is swapped with column j, the entry
    that still points at the old position of column i is redirected to j,
    so every original column is moved exactly once. The caller's
    permutation is not modified.
    """
    _check_buffer(buffer)
    rows = check_size("rows", rows)
    cols = check_size("cols", cols)
    idx = check_permutation(permutation, cols)
    A = as_matrix(buffer, rows, cols)
    k = len(idx)

    for i in range(k):
        j = idx[i] - 1
        if j != i:
            A[:, [i, j]] = A[:, [j, i]]
            # whoever wanted original column i now finds it at j
            for l in range(i + 1, k):
                if idx[l] == i + 1:
                    idx[l] = j + 1
                    break
        idx[i] = i + 1
    return buffer


def normalize_columns(buffer: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """
    Return a new buffer holding A with each column scaled to unit 2-norm.
    All-zero columns stay zero.
    """
    A = as_matrix(_check_buffer(buffer), rows, cols)
    out = np.zeros(rows * cols)
    N = as_matrix(out, rows, cols)
    norms = np.linalg.norm(A, axis=0)
    nonzero = norms != 0
    if not nonzero.all():
        logger.debug(f"normalize_columns: {int((~nonzero).sum())} zero column(s) left as zero")
    N[:, nonzero] = A[:, nonzero] / norms[nonzero]
    return out


def transpose_in_place_square(buffer: np.ndarray, order: int) -> np.ndarray:
    """Transpose the (order, order) matrix in the buffer by swapping across the diagonal."""
    A = as_matrix(_check_buffer(buffer), order, order)
    for i in range(order):
        for j in range(i + 1, order):
            A[i, j], A[j, i] = A[j, i], A[i, j]
    return buffer


def compact_stride(
    buffer: np.ndarray, vector_length: int, count: int, stride: int
) -> np.ndarray:
    """
    Pack `count` vectors that start every `stride` slots into consecutive
    blocks of `vector_length`. A no-op when the stride already equals the
    length.
    """
    _check_buffer(buffer)
    vector_length = check_size("vector_length", vector_length)
    count = check_size("count", count)
    stride = check_size("stride", stride)
    if stride < vector_length:
        raise InvalidArgument(
            f"stride {stride} is smaller than the vector length {vector_length}"
        )
    if count and (count - 1) * stride + vector_length > buffer.size:
        raise InvalidArgument("strided vectors run past the end of the buffer")
    if stride == vector_length:
        return buffer
    for i in range(count):
        work = buffer[i * stride : i * stride + vector_length].copy()
        buffer[i * vector_length : (i + 1) * vector_length] = work
    return buffer
